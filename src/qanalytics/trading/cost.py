"""Cost models for trades and positions.

Two kinds of cost apply to a position:
- Transaction cost: charged per trade (entry and exit), folded into the
  trade's net price
- Holding cost: accrues per bar while a position is held (e.g. borrowing
  fees on short positions)

Cost models are pure and stateless; one instance may be shared by any number
of trades, positions and records.
"""

from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import TYPE_CHECKING, Any

from qanalytics.num import Num, factory_of

if TYPE_CHECKING:
    from qanalytics.trading.position import Position


def _parse_fee(value: Any, label: str) -> Decimal:
    """Convert a fee rate to a finite, non-negative Decimal."""
    if isinstance(value, bool):
        raise ValueError(f"{label} must be numeric, got {value!r}")
    try:
        fee = Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"{label} must be numeric, got {value!r}") from e
    if not fee.is_finite():
        raise ValueError(f"{label} must be finite, got {value!r}")
    if fee < 0:
        raise ValueError(f"{label} cannot be negative, got {value}")
    return fee


class CostModelType(str, Enum):
    """Cost model types."""

    ZERO = "zero"
    LINEAR_TRANSACTION = "linear_transaction"
    LINEAR_BORROWING = "linear_borrowing"


class CostModel(ABC):
    """Interface for cost models."""

    @abstractmethod
    def trade_cost(self, price: Num, amount: Num) -> Num:
        """Cost of a single trade.

        Args:
            price: Trade price per unit
            amount: Traded amount

        Returns:
            Absolute cost of the trade (same numeric type as price)
        """
        ...

    @abstractmethod
    def position_cost(self, position: "Position", final_index: int | None = None) -> Num:
        """Cost attributed to a whole position up to final_index.

        Args:
            position: Open or closed position
            final_index: Bar index the cost is evaluated at (None = position's own end)

        Returns:
            Absolute cost of the position
        """
        ...


class ZeroCostModel(CostModel):
    """Cost model that never charges anything."""

    def trade_cost(self, price: Num, amount: Num) -> Num:
        return factory_of(price).zero

    def position_cost(self, position: "Position", final_index: int | None = None) -> Num:
        if position.entry is None:
            raise ValueError("Cannot compute the cost of a position without an entry")
        return factory_of(position.entry.price).zero

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ZeroCostModel)

    def __hash__(self) -> int:
        return hash(ZeroCostModel)

    def __repr__(self) -> str:
        return "ZeroCostModel()"


class LinearTransactionCostModel(CostModel):
    """Transaction cost proportional to traded value.

    Each trade costs price * amount * fee_per_trade. A closed position costs
    its entry and exit trades; an open one only its entry.

    Attributes:
        fee_per_trade: Fraction of traded value charged per trade (0.005 = 0.5%)
    """

    def __init__(self, fee_per_trade: Any) -> None:
        """Initialize linear transaction cost model.

        Args:
            fee_per_trade: Fee as a fraction of traded value

        Raises:
            ValueError: If fee is not numeric or is negative
        """
        self.fee_per_trade = _parse_fee(fee_per_trade, "Fee per trade")

    def trade_cost(self, price: Num, amount: Num) -> Num:
        return price * amount * factory_of(price).num_of(self.fee_per_trade)

    def position_cost(self, position: "Position", final_index: int | None = None) -> Num:
        if position.entry is None:
            raise ValueError("Cannot compute the cost of a position without an entry")
        cost = position.entry.cost
        if position.is_closed:
            assert position.exit is not None
            cost = cost + position.exit.cost
        return cost

    def __eq__(self, other: object) -> bool:
        return isinstance(other, LinearTransactionCostModel) and other.fee_per_trade == self.fee_per_trade

    def __hash__(self) -> int:
        return hash((LinearTransactionCostModel, self.fee_per_trade))

    def __repr__(self) -> str:
        return f"LinearTransactionCostModel(fee_per_trade={self.fee_per_trade})"


class LinearBorrowingCostModel(CostModel):
    """Holding cost for short positions, linear in the number of bars held.

    cost = entry value * fee_per_period * periods

    Long positions cost nothing. Periods run from the entry index to the exit
    index (closed) or to final_index (open), capped at final_index when it
    is given and never negative.

    Attributes:
        fee_per_period: Fraction of entry value charged per bar held
    """

    def __init__(self, fee_per_period: Any) -> None:
        """Initialize linear borrowing cost model.

        Args:
            fee_per_period: Fee per bar as a fraction of entry value

        Raises:
            ValueError: If fee is not numeric or is negative
        """
        self.fee_per_period = _parse_fee(fee_per_period, "Fee per period")

    def trade_cost(self, price: Num, amount: Num) -> Num:
        return factory_of(price).zero

    def position_cost(self, position: "Position", final_index: int | None = None) -> Num:
        entry = position.entry
        if entry is None:
            raise ValueError("Cannot compute the cost of a position without an entry")
        num_factory = factory_of(entry.price)
        if entry.is_buy:
            return num_factory.zero

        if position.is_closed:
            assert position.exit is not None
            end = position.exit.index if final_index is None else min(position.exit.index, final_index)
        else:
            end = entry.index if final_index is None else final_index
        periods = max(0, end - entry.index)
        return entry.value * num_factory.num_of(self.fee_per_period) * num_factory.num_of(periods)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, LinearBorrowingCostModel) and other.fee_per_period == self.fee_per_period

    def __hash__(self) -> int:
        return hash((LinearBorrowingCostModel, self.fee_per_period))

    def __repr__(self) -> str:
        return f"LinearBorrowingCostModel(fee_per_period={self.fee_per_period})"


class CostModelFactory:
    """Factory for creating cost models from configuration."""

    @staticmethod
    def create(model: CostModelType, **kwargs: Any) -> CostModel:
        """Create cost model from model type and parameters.

        Args:
            model: Cost model type
            **kwargs: Model-specific parameters

        Returns:
            Configured cost model

        Raises:
            ValueError: If model is unknown
            ValueError: If required parameters are missing

        Examples:
            >>> model = CostModelFactory.create(
            ...     CostModelType.LINEAR_TRANSACTION,
            ...     fee_per_trade=Decimal("0.005")
            ... )
            >>> model = CostModelFactory.create(CostModelType.ZERO)
        """
        model = CostModelType(model)
        if model == CostModelType.ZERO:
            return ZeroCostModel()

        elif model == CostModelType.LINEAR_TRANSACTION:
            if "fee_per_trade" not in kwargs:
                raise ValueError("Linear transaction model requires 'fee_per_trade' parameter")
            return LinearTransactionCostModel(fee_per_trade=kwargs["fee_per_trade"])

        elif model == CostModelType.LINEAR_BORROWING:
            if "fee_per_period" not in kwargs:
                raise ValueError("Linear borrowing model requires 'fee_per_period' parameter")
            return LinearBorrowingCostModel(fee_per_period=kwargs["fee_per_period"])

        raise ValueError(f"Unknown cost model: {model}")
