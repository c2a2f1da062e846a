"""Trading record interface.

Defines the contract the analytics consume. Both the single-position
TradingRecord and the lot-based LiveTradingRecord satisfy it.
"""

from abc import ABC, abstractmethod

from qanalytics.series import BarSeries
from qanalytics.trading.cost import CostModel
from qanalytics.trading.position import Position
from qanalytics.trading.trade import Trade, TradeType


class ITradingRecord(ABC):
    """
    Read-side contract of a trading record.

    Core responsibilities:
    - Expose closed positions in chronological order
    - Expose the current (NEW or OPEN) position
    - Expose the cost models positions were built with
    - Resolve the analysis window against a bar series
    """

    @property
    @abstractmethod
    def starting_type(self) -> TradeType:
        """Entry trade type of every position (BUY = long, SELL = short)."""

    @property
    @abstractmethod
    def positions(self) -> list[Position]:
        """Closed positions, oldest first."""

    @property
    @abstractmethod
    def current_position(self) -> Position:
        """Position in progress (NEW when flat)."""

    @property
    @abstractmethod
    def transaction_cost_model(self) -> CostModel | None:
        pass

    @property
    @abstractmethod
    def holding_cost_model(self) -> CostModel | None:
        pass

    @property
    @abstractmethod
    def trades(self) -> list[Trade]:
        """All trades in execution order."""

    @property
    def position_count(self) -> int:
        return len(self.positions)

    @property
    def last_position(self) -> Position | None:
        positions = self.positions
        return positions[-1] if positions else None

    @property
    def is_closed(self) -> bool:
        """True when no position is in progress."""
        return not self.current_position.is_opened

    def get_start_index(self, series: BarSeries) -> int:
        return series.begin_index

    def get_end_index(self, series: BarSeries) -> int:
        return series.end_index
