"""Cash flow: ratio-compounded equity curve starting at one.

For each position the running value at the entry bar is multiplied by
price / entry net price (long) or entry net price / price (short), using the
close for bars in between and the exit net price on the exit bar. Values are
flat between positions and after the last one.
"""

from qanalytics.analysis.base import PerformanceSeries
from qanalytics.analysis.enums import EquityCurveMode, OpenPositionHandling
from qanalytics.analysis.equity import EquitySeries, determine_end_index, exited_by, resolve_exit_price
from qanalytics.num import Num
from qanalytics.series import BarSeries
from qanalytics.system.log_system import LoggerFactory
from qanalytics.trading.interface import ITradingRecord
from qanalytics.trading.position import Position

logger = LoggerFactory.get_logger()


class CashFlow(PerformanceSeries):
    """
    Equity curve normalised to one at the first bar.

    Positions are chained: each position compounds the value reached at its
    entry bar. A position entered while the value is not positive is skipped.

    Example:
        >>> series = BarSeries.from_closes([100, 105, 110, 100])
        >>> record = TradingRecord.from_trades([Trade.buy_at(0, Decimal("100"), Decimal("1")),
        ...                                     Trade.sell_at(2, Decimal("110"), Decimal("1"))])
        >>> CashFlow(series, record).values
        (Decimal('1'), Decimal('1.05'), Decimal('1.1'), Decimal('1.1'))
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

        self._cash = EquitySeries(self.num_factory.one)
        positions = self._positions(self.record)
        for position in positions:
            self._calculate_position(position, self.final_index)
        self._cash.extend_to(series.end_index)
        self._values = self._cash.freeze()

        logger.debug(
            "cash_flow.calculated",
            mode=self.equity_curve_mode.value,
            positions=len(positions),
            bars=len(self._values),
            final_value=str(self._values[-1]),
        )

    def _ratio(self, price: Num, net_entry_price: Num, is_long: bool) -> Num:
        return price / net_entry_price if is_long else net_entry_price / price

    def _calculate_position(self, position: Position, final_index: int) -> None:
        entry = position.entry
        if entry is None:
            return
        series_end = self.series.end_index
        entry_index = entry.index
        if entry_index > final_index or entry_index > series_end:
            return
        end_index = determine_end_index(position, final_index, series_end)

        if entry_index < self._cash.last_index:
            self._cash.truncate_after(entry_index)
        self._cash.extend_to(entry_index)
        start_value = self._cash[entry_index]
        if not start_value > self.num_factory.zero:
            logger.warning(
                "cash_flow.position_skipped",
                entry_index=entry_index,
                value=str(start_value),
                reason="equity not positive at entry",
            )
            return

        is_long = position.is_long
        net_entry_price = entry.net_price

        if self.equity_curve_mode is EquityCurveMode.MARK_TO_MARKET:
            for i in range(max(entry_index + 1, self.series.begin_index + 1), end_index):
                self._cash.set(i, start_value * self._ratio(self.series.close_price(i), net_entry_price, is_long))
            if end_index > entry_index:
                exit_price = resolve_exit_price(position, end_index, self.series)
                self._cash.set(end_index, start_value * self._ratio(exit_price, net_entry_price, is_long))
            return

        self._cash.extend_to(end_index)
        if exited_by(position, end_index):
            assert position.exit is not None
            self._cash.set(end_index, start_value * self._ratio(position.exit.net_price, net_entry_price, is_long))
