"""Helpers shared by the equity builders (cash flow, cumulative PnL, returns).

Pure functions over positions and series plus EquitySeries, the growable
value list the builders fold positions into.
"""

from typing import Iterator

from qanalytics.analysis.enums import EquityCurveMode, OpenPositionHandling
from qanalytics.num import Num, NumFactory
from qanalytics.series import BarSeries
from qanalytics.trading.position import Position


class EquitySeries:
    """
    Growable per-bar value list with explicit last-value state.

    extend_to() back-fills gaps by repeating the last value (or a given fill
    value); values are only ever appended or adjusted in place.

    Example:
        >>> values = EquitySeries(Decimal("0"))
        >>> values.extend_to(3)
        >>> values.add_from(2, Decimal("5"))
        >>> values.freeze()
        (Decimal('0'), Decimal('0'), Decimal('5'), Decimal('5'))
    """

    def __init__(self, initial: Num) -> None:
        self._values: list[Num] = [initial]

    @property
    def last_value(self) -> Num:
        return self._values[-1]

    @property
    def last_index(self) -> int:
        return len(self._values) - 1

    def extend_to(self, index: int, fill: Num | None = None) -> None:
        """Grow so that index exists, padding with fill (default: repeat last value)."""
        pad = self.last_value if fill is None else fill
        while len(self._values) <= index:
            self._values.append(pad)

    def set(self, index: int, value: Num) -> None:
        self.extend_to(index)
        self._values[index] = value

    def add(self, index: int, delta: Num) -> None:
        """Add delta to a single existing index."""
        self._values[index] = self._values[index] + delta

    def add_from(self, index: int, delta: Num) -> None:
        """Add delta to every existing value from index onwards."""
        for i in range(index, len(self._values)):
            self._values[i] = self._values[i] + delta

    def truncate_after(self, index: int) -> None:
        """Drop values beyond index."""
        del self._values[index + 1 :]

    def freeze(self) -> tuple[Num, ...]:
        return tuple(self._values)

    def __getitem__(self, index: int) -> Num:
        return self._values[index]

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Num]:
        return iter(self._values)


def determine_end_index(position: Position, final_index: int, max_index: int) -> int:
    """Last bar a position contributes to: its exit, capped by final_index and the series end."""
    end = final_index
    if position.is_closed:
        assert position.exit is not None
        end = min(position.exit.index, final_index)
    return min(end, max_index)


def add_cost(price: Num, cost: Num, is_long: bool) -> Num:
    """Price net of a per-unit cost: a long receives less, a short pays more."""
    return price - cost if is_long else price + cost


def average_holding_cost_per_period(position: Position, end_index: int, num_factory: NumFactory) -> Num:
    """Holding cost up to end_index spread evenly over the bars held (zero when none)."""
    assert position.entry is not None
    periods = end_index - position.entry.index
    if periods <= 0:
        return num_factory.zero
    return position.holding_cost(end_index) / num_factory.num_of(periods)


def resolve_exit_price(position: Position, end_index: int, series: BarSeries) -> Num:
    """Exit net price when the position has exited by end_index, else the close at end_index."""
    if position.is_closed and position.exit is not None and position.exit.index <= end_index:
        return position.exit.net_price
    return series.close_price(end_index)


def exited_by(position: Position, end_index: int) -> bool:
    return position.is_closed and position.exit is not None and position.exit.index <= end_index


def resolve_equity_settings(
    equity_curve_mode: EquityCurveMode | None,
    open_position_handling: OpenPositionHandling | None,
) -> tuple[EquityCurveMode, OpenPositionHandling]:
    """Fill unset equity-curve settings from the system config."""
    if equity_curve_mode is None or open_position_handling is None:
        from qanalytics.system.config import get_system_config

        config = get_system_config()
        if equity_curve_mode is None:
            equity_curve_mode = config.equity_curve_mode
        if open_position_handling is None:
            open_position_handling = config.open_position_handling
    return EquityCurveMode(equity_curve_mode), OpenPositionHandling(open_position_handling)
