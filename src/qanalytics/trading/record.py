"""Trading record: chronological sequence of trades forming positions.

The record owns exactly one current position. Entering opens it, exiting
closes it, and a closed position is moved to the list of positions and
replaced by a fresh NEW position right away.
"""

from typing import Iterable

from qanalytics.num import Num, factory_of
from qanalytics.series import BarSeries
from qanalytics.system.log_system import LoggerFactory
from qanalytics.trading.cost import CostModel, ZeroCostModel
from qanalytics.trading.interface import ITradingRecord
from qanalytics.trading.position import Position
from qanalytics.trading.trade import Trade, TradeType

logger = LoggerFactory.get_logger()


class TradingRecord(ITradingRecord):
    """
    Record of trades on a single instrument, one position at a time.

    Args:
        starting_type: Entry type of every position (BUY = long, SELL = short)
        transaction_cost_model: Cost model for trades (zero cost if None)
        holding_cost_model: Cost model for holding positions (zero cost if None)
        name: Optional record name (e.g. strategy name)
        start_index: Optional first bar index of the analysis window
        end_index: Optional last bar index of the analysis window

    Example:
        >>> record = TradingRecord()
        >>> record.enter(2, Decimal("100"), Decimal("1"))
        True
        >>> record.exit(5, Decimal("110"), Decimal("1"))
        True
        >>> record.position_count
        1
    """

    def __init__(
        self,
        starting_type: TradeType = TradeType.BUY,
        transaction_cost_model: CostModel | None = None,
        holding_cost_model: CostModel | None = None,
        name: str | None = None,
        start_index: int | None = None,
        end_index: int | None = None,
    ) -> None:
        if starting_type is None:
            raise ValueError("starting_type must not be None")
        if start_index is not None and end_index is not None and end_index < start_index:
            raise ValueError(f"end_index {end_index} cannot precede start_index {start_index}")
        self.name = name
        self.start_index = start_index
        self.end_index = end_index
        self._starting_type = TradeType(starting_type)
        self._transaction_cost_model = transaction_cost_model or ZeroCostModel()
        self._holding_cost_model = holding_cost_model or ZeroCostModel()
        self._positions: list[Position] = []
        self._trades: list[Trade] = []
        self._current_position = self._new_position()

    # ==================== Construction helpers ====================

    @classmethod
    def from_trades(
        cls,
        trades: Iterable[Trade],
        transaction_cost_model: CostModel | None = None,
        holding_cost_model: CostModel | None = None,
        name: str | None = None,
    ) -> "TradingRecord":
        """
        Replay trades into a new record.

        The first trade's type sets the starting type; trades then alternate
        entry and exit.

        Raises:
            ValueError: If trades is empty or trades do not alternate types
        """
        trades = list(trades)
        if not trades:
            raise ValueError("At least one trade is required")
        record = cls(trades[0].type, transaction_cost_model, holding_cost_model, name=name)
        for trade in trades:
            expected = record.current_position.starting_type
            if record.current_position.is_opened:
                expected = expected.complement()
            if trade.type is not expected:
                raise ValueError(f"Trade at index {trade.index} must be a {expected.value}, got {trade.type.value}")
            record.operate(trade.index, trade.price, trade.amount)
        return record

    @classmethod
    def from_position(cls, position: Position, name: str | None = None) -> "TradingRecord":
        """Build a record holding a single open or closed position."""
        return cls.from_positions([position], name=name)

    @classmethod
    def from_positions(cls, positions: Iterable[Position], name: str | None = None) -> "TradingRecord":
        """
        Build a record from positions, oldest first.

        Closed positions are stored as they are. An open position may only come
        last and becomes the current position.

        Raises:
            ValueError: If positions is empty, mixes long and short, contains a
                NEW position, or has an open position before the last one
        """
        positions = list(positions)
        if not positions:
            raise ValueError("At least one position is required")
        first = positions[0]
        record = cls(first.starting_type, first.transaction_cost_model, first.holding_cost_model, name=name)
        for i, position in enumerate(positions):
            if position.is_new:
                raise ValueError("Cannot build a record from a position without an entry")
            if position.starting_type is not record.starting_type:
                raise ValueError("All positions of a record must have the same starting type")
            assert position.entry is not None
            record._trades.append(position.entry)
            if position.is_closed:
                assert position.exit is not None
                record._trades.append(position.exit)
                record._positions.append(position)
            elif i == len(positions) - 1:
                record._current_position = position
            else:
                raise ValueError("Only the last position of a record may be open")
        return record

    def _new_position(self) -> Position:
        return Position(self._starting_type, self._transaction_cost_model, self._holding_cost_model)

    # ==================== ITradingRecord ====================

    @property
    def starting_type(self) -> TradeType:
        return self._starting_type

    @property
    def positions(self) -> list[Position]:
        return list(self._positions)

    @property
    def current_position(self) -> Position:
        return self._current_position

    @property
    def transaction_cost_model(self) -> CostModel:
        return self._transaction_cost_model

    @property
    def holding_cost_model(self) -> CostModel:
        return self._holding_cost_model

    @property
    def trades(self) -> list[Trade]:
        return list(self._trades)

    def get_start_index(self, series: BarSeries) -> int:
        return series.begin_index if self.start_index is None else max(self.start_index, series.begin_index)

    def get_end_index(self, series: BarSeries) -> int:
        return series.end_index if self.end_index is None else min(self.end_index, series.end_index)

    # ==================== Operations ====================

    def operate(self, index: int, price: Num, amount: Num | None = None) -> Trade:
        """
        Enter if flat, exit if in a position.

        Args:
            index: Bar index of the trade
            price: Price per unit
            amount: Traded amount (defaults to one)

        Returns:
            The recorded trade

        Raises:
            ValueError: If the current position is closed, or on invalid trade data
        """
        if self._current_position.is_closed:
            raise ValueError("Current position should not be closed")
        if amount is None:
            amount = factory_of(price).one

        trade = self._current_position.operate(index, price, amount)
        self._trades.append(trade)

        if self._current_position.is_closed:
            closed = self._current_position
            self._positions.append(closed)
            self._current_position = self._new_position()
            logger.debug(
                "trading_record.position_closed",
                record=self.name,
                entry_index=closed.entry.index if closed.entry else None,
                exit_index=index,
                positions=len(self._positions),
            )
        else:
            logger.debug("trading_record.position_opened", record=self.name, entry_index=index)
        return trade

    def enter(self, index: int, price: Num, amount: Num | None = None) -> bool:
        """Open a position if flat. Returns False (no-op) when a position is open."""
        if self._current_position.is_new:
            self.operate(index, price, amount)
            return True
        return False

    def exit(self, index: int, price: Num, amount: Num | None = None) -> bool:
        """Close the open position. Returns False (no-op) when flat."""
        if self._current_position.is_opened:
            self.operate(index, price, amount)
            return True
        return False

    # ==================== Queries ====================

    def last_trade(self, trade_type: TradeType | None = None) -> Trade | None:
        """Most recent trade, optionally of a given type."""
        for trade in reversed(self._trades):
            if trade_type is None or trade.type is trade_type:
                return trade
        return None

    @property
    def last_entry(self) -> Trade | None:
        return self.last_trade(self._starting_type)

    @property
    def last_exit(self) -> Trade | None:
        return self.last_trade(self._starting_type.complement())

    def __repr__(self) -> str:
        return (
            f"TradingRecord(name={self.name!r}, starting_type={self._starting_type.value}, "
            f"positions={len(self._positions)}, current={self._current_position.state.value})"
        )
