"""Drawdown criteria.

Absolute drawdown scans the cumulative PnL curve, relative drawdown the
cash flow curve. Both scan from the record's (or position's) start to its
end index, tracking a running peak and the largest decline from it.
"""

from collections.abc import Sequence

from qanalytics.analysis.cash_flow import CashFlow
from qanalytics.analysis.cumulative_pnl import CumulativePnL
from qanalytics.analysis.enums import EquityCurveMode, OpenPositionHandling, ReturnRepresentation
from qanalytics.criteria.base import EquityCurveCriterion
from qanalytics.num import Num, NumFactory
from qanalytics.series import BarSeries
from qanalytics.trading.interface import ITradingRecord
from qanalytics.trading.position import Position


def _scan_range(position: Position) -> tuple[int, int] | None:
    if position.entry is None or position.exit is None:
        return None
    return position.entry.index, position.exit.index


def maximum_absolute_drawdown(values: Sequence[Num], start: int, end: int, num_factory: NumFactory) -> Num:
    """
    Largest peak - value over values[start..end].

    Ties keep the first-seen peak.
    """
    max_drawdown = num_factory.zero
    if start > end or end >= len(values):
        return max_drawdown
    peak = values[start]
    for i in range(start, end + 1):
        value = values[i]
        if value > peak:
            peak = value
        drawdown = peak - value
        if drawdown > max_drawdown:
            max_drawdown = drawdown
    return max_drawdown


def maximum_relative_drawdown(values: Sequence[Num], start: int, end: int, num_factory: NumFactory) -> Num:
    """Largest (peak - value) / peak over values[start..end]; non-positive peaks are skipped."""
    max_drawdown = num_factory.zero
    if start > end or end >= len(values):
        return max_drawdown
    peak = values[start]
    for i in range(start, end + 1):
        value = values[i]
        if value > peak:
            peak = value
        if peak > 0:
            drawdown = (peak - value) / peak
            if drawdown > max_drawdown:
                max_drawdown = drawdown
    return max_drawdown


class MaximumAbsoluteDrawdownCriterion(EquityCurveCriterion):
    """
    Maximum absolute drawdown of the cumulative PnL curve (lower is better).

    Args:
        point_value: Optional multiplier converting per-unit PnL into currency
        equity_curve_mode: Defaults to the configured mode
        open_position_handling: Defaults to the configured handling

    Example:
        >>> MaximumAbsoluteDrawdownCriterion().calculate(series, record)
        Decimal('5')
    """

    def __init__(
        self,
        point_value: Num | None = None,
        equity_curve_mode: EquityCurveMode | None = None,
        open_position_handling: OpenPositionHandling | None = None,
    ) -> None:
        super().__init__(equity_curve_mode, open_position_handling)
        self.point_value = point_value

    @property
    def category(self) -> str:
        return "risk"

    def _scale(self, series: BarSeries, drawdown: Num) -> Num:
        if self.point_value is None:
            return drawdown
        return drawdown * series.num_factory.num_of(self.point_value)

    def calculate_position(self, series: BarSeries, position: Position) -> Num:
        scan = _scan_range(position)
        if scan is None or series.is_empty:
            return series.num_factory.zero
        pnl = CumulativePnL(
            series,
            position,
            equity_curve_mode=self.equity_curve_mode,
            open_position_handling=self.open_position_handling,
        )
        start, end = scan
        drawdown = maximum_absolute_drawdown(pnl.values, start, min(end, series.end_index), series.num_factory)
        return self._scale(series, drawdown)

    def calculate_record(self, series: BarSeries, record: ITradingRecord) -> Num:
        if series.is_empty:
            return series.num_factory.zero
        pnl = CumulativePnL(
            series,
            record,
            equity_curve_mode=self.equity_curve_mode,
            open_position_handling=self.open_position_handling,
        )
        start = record.get_start_index(series)
        end = record.get_end_index(series)
        drawdown = maximum_absolute_drawdown(pnl.values, start, end, series.num_factory)
        return self._scale(series, drawdown)

    def better_than(self, value1: Num, value2: Num) -> bool:
        return value1 < value2


class MaximumDrawdownCriterion(EquityCurveCriterion):
    """Maximum relative drawdown of the cash flow curve, 0.25 = 25% (lower is better)."""

    @property
    def category(self) -> str:
        return "risk"

    def calculate_position(self, series: BarSeries, position: Position) -> Num:
        scan = _scan_range(position)
        if scan is None or series.is_empty:
            return series.num_factory.zero
        cash_flow = CashFlow(
            series,
            position,
            equity_curve_mode=self.equity_curve_mode,
            open_position_handling=self.open_position_handling,
        )
        start, end = scan
        return maximum_relative_drawdown(cash_flow.values, start, min(end, series.end_index), series.num_factory)

    def calculate_record(self, series: BarSeries, record: ITradingRecord) -> Num:
        if series.is_empty:
            return series.num_factory.zero
        cash_flow = CashFlow(
            series,
            record,
            equity_curve_mode=self.equity_curve_mode,
            open_position_handling=self.open_position_handling,
        )
        start = record.get_start_index(series)
        end = record.get_end_index(series)
        return maximum_relative_drawdown(cash_flow.values, start, end, series.num_factory)

    def better_than(self, value1: Num, value2: Num) -> bool:
        return value1 < value2


class ReturnOverMaxDrawdownCriterion(EquityCurveCriterion):
    """
    Net cash-flow return divided by the maximum relative drawdown.

    When there is no drawdown the net return itself is reported. A position
    that is not closed scores zero.

    Args:
        representation: Output representation (default DECIMAL)
        equity_curve_mode: Defaults to the configured mode
        open_position_handling: Defaults to the configured handling
    """

    def __init__(
        self,
        representation: ReturnRepresentation = ReturnRepresentation.DECIMAL,
        equity_curve_mode: EquityCurveMode | None = None,
        open_position_handling: OpenPositionHandling | None = None,
    ) -> None:
        super().__init__(equity_curve_mode, open_position_handling)
        self.representation = ReturnRepresentation(representation)
        self._max_drawdown = MaximumDrawdownCriterion(self.equity_curve_mode, self.open_position_handling)

    @property
    def category(self) -> str:
        return "risk_adjusted"

    def _to_representation(self, net_return: Num, max_drawdown: Num, num_factory: NumFactory) -> Num:
        if max_drawdown == 0:
            return self.representation.from_rate_of_return(net_return, num_factory)
        raw_ratio = net_return / max_drawdown
        if self.representation is ReturnRepresentation.MULTIPLICATIVE:
            return raw_ratio + num_factory.one if raw_ratio >= 0 else raw_ratio
        return self.representation.from_rate_of_return(raw_ratio, num_factory)

    def calculate_position(self, series: BarSeries, position: Position) -> Num:
        num_factory = series.num_factory
        if not position.is_closed or series.is_empty:
            return num_factory.zero
        assert position.exit is not None
        cash_flow = CashFlow(
            series,
            position,
            equity_curve_mode=self.equity_curve_mode,
            open_position_handling=self.open_position_handling,
        )
        exit_index = min(position.exit.index, series.end_index)
        net_return = cash_flow.get_value(exit_index) - num_factory.one
        max_drawdown = self._max_drawdown.calculate_position(series, position)
        return self._to_representation(net_return, max_drawdown, num_factory)

    def calculate_record(self, series: BarSeries, record: ITradingRecord) -> Num:
        num_factory = series.num_factory
        if series.is_empty:
            return num_factory.zero
        end = record.get_end_index(series)
        if end < series.begin_index:
            return num_factory.zero
        cash_flow = CashFlow(
            series,
            record,
            equity_curve_mode=self.equity_curve_mode,
            open_position_handling=self.open_position_handling,
        )
        net_return = cash_flow.get_value(end) - num_factory.one
        max_drawdown = self._max_drawdown.calculate_record(series, record)
        return self._to_representation(net_return, max_drawdown, num_factory)
