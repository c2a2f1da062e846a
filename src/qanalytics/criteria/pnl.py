"""Profit and loss criteria.

Record-level values aggregate the record's closed positions; a position that
is not closed contributes nothing. Single-position values use that position
alone.
"""

from qanalytics.analysis.enums import ReturnRepresentation
from qanalytics.criteria.base import AnalysisCriterion
from qanalytics.criteria.counts import NumberOfLosingPositionsCriterion, NumberOfWinningPositionsCriterion
from qanalytics.num import Num
from qanalytics.series import BarSeries
from qanalytics.trading.interface import ITradingRecord
from qanalytics.trading.position import Position


def _closed_positions(record: ITradingRecord) -> list[Position]:
    return [position for position in record.positions if position.is_closed]


class ProfitLossCriterion(AnalysisCriterion):
    """Net profit and loss: sum of closed positions' profit after costs."""

    @property
    def category(self) -> str:
        return "pnl"

    def _position_pnl(self, position: Position) -> Num:
        return position.profit()

    def calculate_position(self, series: BarSeries, position: Position) -> Num:
        num_factory = series.num_factory
        if not position.is_closed:
            return num_factory.zero
        return num_factory.num_of(self._position_pnl(position))

    def calculate_record(self, series: BarSeries, record: ITradingRecord) -> Num:
        num_factory = series.num_factory
        total = num_factory.zero
        for position in _closed_positions(record):
            total += num_factory.num_of(self._position_pnl(position))
        return total


class NetProfitLossCriterion(ProfitLossCriterion):
    """Net profit and loss (same value as ProfitLossCriterion)."""


class GrossProfitLossCriterion(ProfitLossCriterion):
    """Gross profit and loss: sum of closed positions' profit before costs."""

    def _position_pnl(self, position: Position) -> Num:
        return position.gross_profit()


class ProfitCriterion(AnalysisCriterion):
    """
    Sum of winning positions' profit.

    Args:
        exclude_costs: Use gross profit instead of net profit
    """

    def __init__(self, exclude_costs: bool = False) -> None:
        self.exclude_costs = exclude_costs

    @property
    def category(self) -> str:
        return "pnl"

    def _profit(self, position: Position) -> Num:
        return position.gross_profit() if self.exclude_costs else position.profit()

    def _include(self, profit: Num) -> bool:
        return profit > 0

    def calculate_position(self, series: BarSeries, position: Position) -> Num:
        num_factory = series.num_factory
        if not position.is_closed:
            return num_factory.zero
        profit = num_factory.num_of(self._profit(position))
        return profit if self._include(profit) else num_factory.zero

    def calculate_record(self, series: BarSeries, record: ITradingRecord) -> Num:
        total = series.num_factory.zero
        for position in _closed_positions(record):
            total += self.calculate_position(series, position)
        return total

    def __repr__(self) -> str:
        return f"{type(self).__name__}(exclude_costs={self.exclude_costs})"


class LossCriterion(ProfitCriterion):
    """
    Sum of losing positions' profit (a negative number or zero).

    Args:
        exclude_costs: Use gross profit instead of net profit
    """

    def _include(self, profit: Num) -> bool:
        return profit < 0


class ReturnCriterion(AnalysisCriterion):
    """
    Gross return: product of closed positions' gross returns.

    A single closed position yields its gross return; an open position
    yields a neutral return.

    Args:
        add_base: True for multiplicative output (1.10), False for decimal (0.10)
        representation: Explicit output representation, overrides add_base

    Example:
        >>> ReturnCriterion().calculate(series, record)
        Decimal('1.1')
        >>> ReturnCriterion(representation=ReturnRepresentation.PERCENTAGE).calculate(series, record)
        Decimal('10.0')
    """

    def __init__(self, add_base: bool = True, representation: ReturnRepresentation | None = None) -> None:
        if representation is None:
            representation = ReturnRepresentation.from_add_base(add_base)
        self.representation = ReturnRepresentation(representation)

    @property
    def category(self) -> str:
        return "return"

    def _gross_return(self, series: BarSeries, position: Position) -> Num:
        num_factory = series.num_factory
        if not position.is_closed:
            return num_factory.one
        return num_factory.num_of(position.gross_return())

    def calculate_position(self, series: BarSeries, position: Position) -> Num:
        return self.representation.from_total_return(self._gross_return(series, position), series.num_factory)

    def calculate_record(self, series: BarSeries, record: ITradingRecord) -> Num:
        total = series.num_factory.one
        for position in _closed_positions(record):
            total *= self._gross_return(series, position)
        return self.representation.from_total_return(total, series.num_factory)

    def __repr__(self) -> str:
        return f"ReturnCriterion(representation={self.representation.value})"


class _AverageCriterion(AnalysisCriterion):
    """Aggregated PnL divided by a position count; zero when the count is zero."""

    def __init__(self, total: AnalysisCriterion, count: AnalysisCriterion) -> None:
        self._total = total
        self._count = count

    @property
    def category(self) -> str:
        return "pnl"

    def _average(self, series: BarSeries, total: Num, count: Num) -> Num:
        if count == 0:
            return series.num_factory.zero
        return total / count

    def calculate_position(self, series: BarSeries, position: Position) -> Num:
        return self._average(
            series,
            self._total.calculate_position(series, position),
            self._count.calculate_position(series, position),
        )

    def calculate_record(self, series: BarSeries, record: ITradingRecord) -> Num:
        return self._average(
            series,
            self._total.calculate_record(series, record),
            self._count.calculate_record(series, record),
        )


class AverageProfitCriterion(_AverageCriterion):
    """Average net profit per winning position."""

    def __init__(self) -> None:
        super().__init__(ProfitCriterion(), NumberOfWinningPositionsCriterion())


class AverageLossCriterion(_AverageCriterion):
    """Average net loss per losing position (negative or zero)."""

    def __init__(self) -> None:
        super().__init__(LossCriterion(), NumberOfLosingPositionsCriterion())


class ProfitLossRatioCriterion(AnalysisCriterion):
    """
    Ratio of average profit to average loss magnitude.

    Zero when there is no average profit; exactly one when there is profit
    but no loss. DECIMAL reports the raw ratio, MULTIPLICATIVE one plus the
    ratio, other representations convert ratio - 1 as a rate of return.

    Args:
        representation: Output representation (default DECIMAL)
    """

    def __init__(self, representation: ReturnRepresentation = ReturnRepresentation.DECIMAL) -> None:
        self.representation = ReturnRepresentation(representation)
        self._average_profit = AverageProfitCriterion()
        self._average_loss = AverageLossCriterion()

    @property
    def category(self) -> str:
        return "pnl"

    def _ratio(self, series: BarSeries, average_profit: Num, average_loss: Num) -> Num:
        num_factory = series.num_factory
        if average_profit == 0:
            return num_factory.zero
        if average_loss == 0:
            raw_ratio = num_factory.one
        else:
            raw_ratio = abs(average_profit / average_loss)

        if self.representation is ReturnRepresentation.DECIMAL:
            return raw_ratio
        if self.representation is ReturnRepresentation.MULTIPLICATIVE:
            return raw_ratio + num_factory.one
        return self.representation.from_rate_of_return(raw_ratio - num_factory.one, num_factory)

    def calculate_position(self, series: BarSeries, position: Position) -> Num:
        return self._ratio(
            series,
            self._average_profit.calculate_position(series, position),
            self._average_loss.calculate_position(series, position),
        )

    def calculate_record(self, series: BarSeries, record: ITradingRecord) -> Num:
        return self._ratio(
            series,
            self._average_profit.calculate_record(series, record),
            self._average_loss.calculate_record(series, record),
        )
