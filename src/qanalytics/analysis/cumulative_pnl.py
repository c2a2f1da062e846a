"""Cumulative profit and loss per bar.

Absolute per-unit PnL of the record, seeded at zero at the first bar.

MARK_TO_MARKET: each held bar is valued at its close, net of the holding
cost averaged over the bars held; the last bar uses the exit net price when
the position has exited by then.
REALIZED: the curve stays flat while a position is open and steps by the
whole trade result (including holding cost) at the exit bar.
"""

from qanalytics.analysis.base import PerformanceSeries
from qanalytics.analysis.enums import EquityCurveMode, OpenPositionHandling
from qanalytics.analysis.equity import (
    EquitySeries,
    add_cost,
    average_holding_cost_per_period,
    determine_end_index,
    exited_by,
    resolve_exit_price,
)
from qanalytics.num import Num
from qanalytics.series import BarSeries
from qanalytics.system.log_system import LoggerFactory
from qanalytics.trading.interface import ITradingRecord
from qanalytics.trading.position import Position

logger = LoggerFactory.get_logger()


class CumulativePnL(PerformanceSeries):
    """
    Cumulative PnL curve.

    Example:
        >>> series = BarSeries.from_closes([100, 100, 100, 110, 105, 110])
        >>> record = TradingRecord()
        >>> record.enter(2, Decimal("100"))
        >>> record.exit(5, Decimal("110"))
        >>> CumulativePnL(series, record).values
        (Decimal('0'), Decimal('0'), Decimal('0'), Decimal('10'), Decimal('5'), Decimal('10'))
    """

    def __init__(
        self,
        series: BarSeries,
        subject: ITradingRecord | Position,
        final_index: int | None = None,
        equity_curve_mode: EquityCurveMode | None = None,
        open_position_handling: OpenPositionHandling | None = None,
    ) -> None:
        super().__init__(series, subject, final_index, equity_curve_mode, open_position_handling)
        if series.is_empty:
            return

        self._pnl = EquitySeries(self.num_factory.zero)
        positions = self._positions(self.record)
        for position in positions:
            self._calculate_position(position, self.final_index)
        self._pnl.extend_to(series.end_index)
        self._values = self._pnl.freeze()

        logger.debug(
            "cumulative_pnl.calculated",
            mode=self.equity_curve_mode.value,
            positions=len(positions),
            bars=len(self._values),
            final_pnl=str(self._values[-1]),
        )

    def _delta(self, net_price: Num, net_entry_price: Num, is_long: bool) -> Num:
        return net_price - net_entry_price if is_long else net_entry_price - net_price

    def _calculate_position(self, position: Position, final_index: int) -> None:
        entry = position.entry
        if entry is None:
            return
        series_end = self.series.end_index
        entry_index = entry.index
        if entry_index > final_index or entry_index > series_end:
            return
        end_index = determine_end_index(position, final_index, series_end)

        is_long = position.is_long
        net_entry_price = entry.net_price
        self._pnl.extend_to(end_index)

        if self.equity_curve_mode is EquityCurveMode.MARK_TO_MARKET:
            average_cost = average_holding_cost_per_period(position, end_index, self.num_factory)
            for i in range(max(entry_index + 1, self.series.begin_index + 1), end_index):
                net_price = add_cost(self.series.close_price(i), average_cost, is_long)
                self._pnl.add(i, self._delta(net_price, net_entry_price, is_long))
            net_exit = add_cost(resolve_exit_price(position, end_index, self.series), average_cost, is_long)
            self._pnl.add_from(end_index, self._delta(net_exit, net_entry_price, is_long))
            return

        if exited_by(position, end_index):
            assert position.exit is not None
            net_exit = add_cost(position.exit.net_price, position.holding_cost(end_index), is_long)
            self._pnl.add_from(position.exit.index, self._delta(net_exit, net_entry_price, is_long))
