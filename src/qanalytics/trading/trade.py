"""Trade: a single buy or sell at a bar index."""

from dataclasses import dataclass, field
from enum import Enum

from qanalytics.num import Num, as_num
from qanalytics.trading.cost import CostModel, ZeroCostModel


class TradeType(str, Enum):
    """Side of a trade."""

    BUY = "buy"
    SELL = "sell"

    def complement(self) -> "TradeType":
        """Opposite side (BUY <-> SELL)."""
        return TradeType.SELL if self is TradeType.BUY else TradeType.BUY


@dataclass(frozen=True)
class Trade:
    """
    Immutable trade record.

    The net price folds the transaction cost into the price per unit:
    buys pay more (price + cost/amount), sells receive less (price - cost/amount).

    Attributes:
        index: Bar index of the trade (>= 0)
        type: BUY or SELL
        price: Price per unit
        amount: Traded amount (> 0)
        cost_model: Transaction cost model used to compute cost
        cost: Transaction cost of this trade (derived)
        net_price: Cost-adjusted price per unit (derived)

    Example:
        >>> trade = Trade.buy_at(2, Decimal("100"), Decimal("1"))
        >>> trade.value
        Decimal('100')
    """

    index: int
    type: TradeType
    price: Num
    amount: Num
    cost_model: CostModel = field(default_factory=ZeroCostModel, compare=False, repr=False)
    cost: Num = field(init=False, compare=False)
    net_price: Num = field(init=False, compare=False)

    def __post_init__(self) -> None:
        """Validate trade and derive cost and net price."""
        if self.index < 0:
            raise ValueError(f"Trade index cannot be negative, got {self.index}")
        price = as_num(self.price, self.amount)
        amount = as_num(self.amount, price)
        if type(price) is not type(amount):
            raise ValueError(f"Trade price and amount must share a numeric type, got {price!r} and {amount!r}")
        object.__setattr__(self, "price", price)
        object.__setattr__(self, "amount", amount)
        if not self.amount > 0:
            raise ValueError(f"Trade amount must be positive, got {self.amount}")
        object.__setattr__(self, "type", TradeType(self.type))

        cost = self.cost_model.trade_cost(self.price, self.amount)
        per_unit = cost / self.amount
        net_price = self.price + per_unit if self.type is TradeType.BUY else self.price - per_unit
        object.__setattr__(self, "cost", cost)
        object.__setattr__(self, "net_price", net_price)

    @classmethod
    def buy_at(cls, index: int, price: Num, amount: Num, cost_model: CostModel | None = None) -> "Trade":
        return cls(index, TradeType.BUY, price, amount, cost_model or ZeroCostModel())

    @classmethod
    def sell_at(cls, index: int, price: Num, amount: Num, cost_model: CostModel | None = None) -> "Trade":
        return cls(index, TradeType.SELL, price, amount, cost_model or ZeroCostModel())

    @property
    def is_buy(self) -> bool:
        return self.type is TradeType.BUY

    @property
    def is_sell(self) -> bool:
        return self.type is TradeType.SELL

    @property
    def value(self) -> Num:
        """Gross traded value (price * amount)."""
        return self.price * self.amount

