"""Position count criteria over closed positions."""

from qanalytics.criteria.base import AnalysisCriterion
from qanalytics.num import Num
from qanalytics.series import BarSeries
from qanalytics.trading.interface import ITradingRecord
from qanalytics.trading.position import Position


class _PositionCountCriterion(AnalysisCriterion):
    """Counts closed positions accepted by _counts()."""

    @property
    def category(self) -> str:
        return "trade"

    def _counts(self, position: Position) -> bool:
        return True

    def calculate_position(self, series: BarSeries, position: Position) -> Num:
        num_factory = series.num_factory
        if position.is_closed and self._counts(position):
            return num_factory.one
        return num_factory.zero

    def calculate_record(self, series: BarSeries, record: ITradingRecord) -> Num:
        count = sum(1 for position in record.positions if position.is_closed and self._counts(position))
        return series.num_factory.num_of(count)


class NumberOfPositionsCriterion(_PositionCountCriterion):
    """Number of closed positions (fewer is better)."""

    def better_than(self, value1: Num, value2: Num) -> bool:
        return value1 < value2


class NumberOfWinningPositionsCriterion(_PositionCountCriterion):
    """Number of closed positions with a positive net profit."""

    def _counts(self, position: Position) -> bool:
        return position.has_profit


class NumberOfLosingPositionsCriterion(_PositionCountCriterion):
    """Number of closed positions with a negative net profit (fewer is better)."""

    def _counts(self, position: Position) -> bool:
        return position.has_loss

    def better_than(self, value1: Num, value2: Num) -> bool:
        return value1 < value2


class NumberOfBreakEvenPositionsCriterion(_PositionCountCriterion):
    """Number of closed positions with zero net profit (fewer is better)."""

    def _counts(self, position: Position) -> bool:
        return position.profit() == 0

    def better_than(self, value1: Num, value2: Num) -> bool:
        return value1 < value2
