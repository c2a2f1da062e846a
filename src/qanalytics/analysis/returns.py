"""Per-bar strategy returns.

Index 0 has no return (NaN). Bars outside any position return zero. Within
a position each bar's return is measured against the previous bar's price
(the entry net price for the first bar held); short positions flip the sign.
MARK_TO_MARKET nets the average holding cost out of each bar's price;
REALIZED returns zero while a position is open and the whole trade return on
the exit bar.
"""

from qanalytics.analysis.base import PerformanceSeries
from qanalytics.analysis.enums import EquityCurveMode, OpenPositionHandling, ReturnRepresentation
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


class Returns(PerformanceSeries):
    """
    Arithmetic (P_i / P_{i-1} - 1) or logarithmic (ln(P_i / P_{i-1})) returns.

    LOG representation computes log returns; every other representation
    computes arithmetic returns and formats them (e.g. PERCENTAGE multiplies
    by 100). raw_values keeps the unformatted returns.

    Args:
        series: Bar series
        subject: Trading record or single position
        final_index: Last bar of the analysis window
        representation: Output representation (default DECIMAL)
        equity_curve_mode: Defaults to the configured mode
        open_position_handling: Defaults to the configured handling
    """

    def __init__(
        self,
        series: BarSeries,
        subject: ITradingRecord | Position,
        final_index: int | None = None,
        representation: ReturnRepresentation = ReturnRepresentation.DECIMAL,
        equity_curve_mode: EquityCurveMode | None = None,
        open_position_handling: OpenPositionHandling | None = None,
    ) -> None:
        super().__init__(series, subject, final_index, equity_curve_mode, open_position_handling)
        if representation is None:
            raise ValueError("representation must not be None")
        self.representation = ReturnRepresentation(representation)
        self._raw_values: tuple[Num, ...] = ()
        if series.is_empty:
            return

        zero = self.num_factory.zero
        self._returns = EquitySeries(zero)
        positions = self._positions(self.record)
        for position in positions:
            self._calculate_position(position, self.final_index)
        self._returns.extend_to(series.end_index, fill=zero)

        raw = list(self._returns.freeze())
        raw[0] = self.num_factory.nan
        self._raw_values = tuple(raw)
        if self.representation is ReturnRepresentation.LOG:
            self._values = self._raw_values
        else:
            self._values = tuple(self.representation.from_rate_of_return(r, self.num_factory) for r in raw)

        logger.debug(
            "returns.calculated",
            representation=self.representation.value,
            mode=self.equity_curve_mode.value,
            positions=len(positions),
            bars=len(self._values),
        )

    @property
    def raw_values(self) -> tuple[Num, ...]:
        return self._raw_values

    @property
    def size(self) -> int:
        """Number of return observations (one less than the bar count)."""
        return max(self.series.bar_count - 1, 0)

    def _return(self, new_price: Num, old_price: Num, is_long: bool) -> Num:
        if self.representation is ReturnRepresentation.LOG:
            value = self.num_factory.log(new_price / old_price)
        else:
            value = new_price / old_price - self.num_factory.one
        return value if is_long else -value

    def _calculate_position(self, position: Position, final_index: int) -> None:
        entry = position.entry
        if entry is None:
            return
        series_end = self.series.end_index
        entry_index = entry.index
        if entry_index > final_index or entry_index > series_end:
            return
        end_index = determine_end_index(position, final_index, series_end)
        if end_index <= entry_index:
            return

        zero = self.num_factory.zero
        is_long = position.is_long
        self._returns.extend_to(end_index, fill=zero)
        start = max(entry_index + 1, self.series.begin_index + 1)

        if self.equity_curve_mode is EquityCurveMode.MARK_TO_MARKET:
            average_cost = average_holding_cost_per_period(position, end_index, self.num_factory)
            last_price = entry.net_price
            for i in range(start, end_index):
                close = self.series.close_price(i)
                self._returns.add(i, self._return(add_cost(close, average_cost, is_long), last_price, is_long))
                last_price = close
            exit_price = add_cost(resolve_exit_price(position, end_index, self.series), average_cost, is_long)
            self._returns.add(end_index, self._return(exit_price, last_price, is_long))
            return

        if exited_by(position, end_index):
            assert position.exit is not None
            net_exit = add_cost(position.exit.net_price, position.holding_cost(end_index), is_long)
            self._returns.add(end_index, self._return(net_exit, entry.net_price, is_long))
