"""Position: an entry trade and an optional exit trade of the opposite type.

State machine:
    NEW --operate--> OPEN --operate--> CLOSED

A position never refers back to the record that owns it.
"""

from decimal import Decimal
from enum import Enum

from qanalytics.num import Num, factory_of
from qanalytics.trading.cost import CostModel, ZeroCostModel
from qanalytics.trading.trade import Trade, TradeType


class PositionState(str, Enum):
    """Lifecycle state of a position."""

    NEW = "new"
    OPEN = "open"
    CLOSED = "closed"


class Position:
    """
    Pair of entry and exit trades.

    A long position starts with a BUY, a short position with a SELL. The exit
    is always the complement of the entry type and cannot precede it.

    Args:
        starting_type: Type of the entry trade (BUY for long, SELL for short)
        transaction_cost_model: Cost model applied to each trade
        holding_cost_model: Cost model for holding the position over time

    Example:
        >>> position = Position()
        >>> position.operate(2, Decimal("100"), Decimal("1"))
        >>> position.operate(5, Decimal("110"), Decimal("1"))
        >>> position.profit()
        Decimal('10')
    """

    def __init__(
        self,
        starting_type: TradeType = TradeType.BUY,
        transaction_cost_model: CostModel | None = None,
        holding_cost_model: CostModel | None = None,
    ) -> None:
        self.starting_type = TradeType(starting_type)
        self.transaction_cost_model = transaction_cost_model or ZeroCostModel()
        self.holding_cost_model = holding_cost_model or ZeroCostModel()
        self._entry: Trade | None = None
        self._exit: Trade | None = None

    @classmethod
    def of(
        cls,
        entry: Trade,
        exit: Trade | None = None,
        transaction_cost_model: CostModel | None = None,
        holding_cost_model: CostModel | None = None,
    ) -> "Position":
        """
        Build an open or closed position from existing trades.

        Args:
            entry: Entry trade
            exit: Optional exit trade (opposite type, index >= entry index)
            transaction_cost_model: Defaults to the entry trade's cost model
            holding_cost_model: Defaults to zero cost

        Raises:
            ValueError: If entry and exit have the same type or exit precedes entry
        """
        if exit is not None:
            if exit.type is entry.type:
                raise ValueError(f"Entry and exit trades must have different types, both are {entry.type.value}")
            if exit.index < entry.index:
                raise ValueError(f"Exit index {exit.index} cannot precede entry index {entry.index}")
        position = cls(entry.type, transaction_cost_model or entry.cost_model, holding_cost_model)
        position._entry = entry
        position._exit = exit
        return position

    @property
    def entry(self) -> Trade | None:
        return self._entry

    @property
    def exit(self) -> Trade | None:
        return self._exit

    @property
    def state(self) -> PositionState:
        if self._entry is None:
            return PositionState.NEW
        if self._exit is None:
            return PositionState.OPEN
        return PositionState.CLOSED

    @property
    def is_new(self) -> bool:
        return self._entry is None

    @property
    def is_opened(self) -> bool:
        return self._entry is not None and self._exit is None

    @property
    def is_closed(self) -> bool:
        return self._exit is not None

    @property
    def is_long(self) -> bool:
        return self.starting_type is TradeType.BUY

    @property
    def is_short(self) -> bool:
        return self.starting_type is TradeType.SELL

    def operate(self, index: int, price: Num, amount: Num) -> Trade:
        """
        Advance the position with a trade at index.

        Args:
            index: Bar index of the trade
            price: Price per unit
            amount: Traded amount

        Returns:
            The entry trade (NEW position) or exit trade (OPEN position)

        Raises:
            ValueError: If the position is already closed or exit precedes entry
        """
        if self._entry is None:
            self._entry = Trade(index, self.starting_type, price, amount, self.transaction_cost_model)
            return self._entry
        if self._exit is not None:
            raise ValueError(f"Cannot operate on a closed position (exit at index {self._exit.index})")
        if index < self._entry.index:
            raise ValueError(f"Exit index {index} cannot precede entry index {self._entry.index}")
        self._exit = Trade(index, self.starting_type.complement(), price, amount, self.transaction_cost_model)
        return self._exit

    def _zero(self) -> Num:
        return factory_of(self._entry.price if self._entry is not None else Decimal("0")).zero

    def _require_entry(self) -> Trade:
        if self._entry is None:
            raise ValueError("Position has no entry")
        return self._entry

    def gross_profit(self, final_price: Num | None = None) -> Num:
        """
        Profit before costs.

        Args:
            final_price: Price used to value an open position (ignored when closed)

        Returns:
            exit value - entry value for a closed position (negated for short),
            amount * final_price - entry value for an open one with a price,
            zero otherwise
        """
        if self._entry is None:
            return self._zero()
        entry = self._entry
        if self._exit is not None:
            profit = self._exit.value - entry.value
        elif final_price is not None:
            profit = entry.amount * final_price - entry.value
        else:
            return self._zero()
        return -profit if self.is_short else profit

    def profit(self) -> Num:
        """Net profit of a closed position (zero while not closed)."""
        if not self.is_closed:
            return self._zero()
        return self.gross_profit() - self.position_cost()

    def profit_at(self, final_index: int, final_price: Num) -> Num:
        """Net profit, valuing an open position at final_price as of final_index."""
        if self.is_closed:
            return self.profit()
        if self._entry is None:
            return self._zero()
        return self.gross_profit(final_price) - self.position_cost(final_index)

    def gross_return(self, final_price: Num | None = None) -> Num:
        """
        Multiplicative return before costs (1.10 = +10%).

        Long: exit / entry. Short: 2 - exit / entry. An open position without
        final_price returns one.
        """
        entry = self._require_entry()
        num_factory = factory_of(entry.price)
        if self._exit is not None:
            exit_price = self._exit.price
        elif final_price is not None:
            exit_price = final_price
        else:
            return num_factory.one
        ratio = exit_price / entry.price
        if self.is_short:
            return num_factory.two - ratio
        return ratio

    def holding_cost(self, final_index: int | None = None) -> Num:
        self._require_entry()
        return self.holding_cost_model.position_cost(self, final_index)

    def position_cost(self, final_index: int | None = None) -> Num:
        """Transaction cost plus holding cost up to final_index."""
        self._require_entry()
        return self.transaction_cost_model.position_cost(self, final_index) + self.holding_cost(final_index)

    @property
    def has_profit(self) -> bool:
        return self.profit() > 0

    @property
    def has_loss(self) -> bool:
        return self.profit() < 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return (
            self.starting_type is other.starting_type
            and self._entry == other._entry
            and self._exit == other._exit
        )

    def __repr__(self) -> str:
        return f"Position(state={self.state.value}, entry={self._entry}, exit={self._exit})"
