"""Consecutive profit and loss streaks."""

from abc import abstractmethod

from qanalytics.criteria.base import AnalysisCriterion
from qanalytics.num import Num
from qanalytics.series import BarSeries
from qanalytics.trading.interface import ITradingRecord
from qanalytics.trading.position import Position


class _ConsecutiveStreakCriterion(AnalysisCriterion):
    """
    Largest summed net profit over a run of consecutive matching positions.

    Positions are folded in record order. A position that does not match
    (or is not closed) ends the current run, which is compared against the
    best run before being reset. The run still open after the last position
    is compared as well.
    """

    @property
    def category(self) -> str:
        return "trade"

    @abstractmethod
    def _matches(self, profit: Num) -> bool:
        """Whether a position with this profit extends the run."""

    @abstractmethod
    def _is_better_run(self, run: Num, best: Num) -> bool:
        """Whether a finished run beats the best one so far."""

    def calculate_position(self, series: BarSeries, position: Position) -> Num:
        num_factory = series.num_factory
        if not position.is_closed:
            return num_factory.zero
        profit = num_factory.num_of(position.profit())
        return profit if self._matches(profit) else num_factory.zero

    def calculate_record(self, series: BarSeries, record: ITradingRecord) -> Num:
        num_factory = series.num_factory
        best = num_factory.zero
        run = num_factory.zero
        for position in record.positions:
            profit = num_factory.num_of(position.profit()) if position.is_closed else None
            if profit is not None and self._matches(profit):
                run += profit
                continue
            if self._is_better_run(run, best):
                best = run
            run = num_factory.zero
        if self._is_better_run(run, best):
            best = run
        return best


class MaxConsecutiveProfitCriterion(_ConsecutiveStreakCriterion):
    """Largest summed profit of consecutive winning positions."""

    def _matches(self, profit: Num) -> bool:
        return profit > 0

    def _is_better_run(self, run: Num, best: Num) -> bool:
        return run > best


class MaxConsecutiveLossCriterion(_ConsecutiveStreakCriterion):
    """
    Largest summed loss of consecutive losing positions, as a negative number.

    Example:
        >>> # profits -5, -3, +2
        >>> MaxConsecutiveLossCriterion().calculate(series, record)
        Decimal('-8')
    """

    def _matches(self, profit: Num) -> bool:
        return profit < 0

    def _is_better_run(self, run: Num, best: Num) -> bool:
        return run < best
