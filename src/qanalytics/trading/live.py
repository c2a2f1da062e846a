"""Live trading record with lot-based accounting.

A live record accepts partial fills. Each fill on the entry side opens a lot;
each fill on the exit side closes lots according to a match policy and
produces one closed Position per matched lot slice:
- FIFO: close oldest lots first
- LIFO: close newest lots first
- AVG_COST: lots are merged into one amount-weighted lot on entry
"""

from collections import deque
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from qanalytics.num import Num, factory_of
from qanalytics.system.log_system import LoggerFactory
from qanalytics.trading.cost import CostModel, ZeroCostModel
from qanalytics.trading.interface import ITradingRecord
from qanalytics.trading.position import Position
from qanalytics.trading.trade import Trade, TradeType

logger = LoggerFactory.get_logger()


class MatchPolicy(str, Enum):
    """Which open lots an exit fill closes."""

    FIFO = "fifo"
    LIFO = "lifo"
    AVG_COST = "avg_cost"


class PositionLot(BaseModel):
    """
    One partial entry fill of open exposure.

    Attributes:
        lot_id: Unique identifier
        entry_index: Bar index of the entry fill
        entry_price: Price per unit at entry
        amount: Open amount (positive)
        entry_time: Optional wall-clock time of the fill

    Example:
        >>> lot = PositionLot(entry_index=3, entry_price=Decimal("100"), amount=Decimal("2"))
    """

    model_config = ConfigDict(frozen=True)

    lot_id: str = Field(default_factory=lambda: str(uuid4()))
    entry_index: int = Field(..., ge=0)
    entry_price: Decimal | float
    amount: Decimal | float
    entry_time: Optional[datetime] = None

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: Decimal | float) -> Decimal | float:
        """Validate amount is positive."""
        if not v > 0:
            raise ValueError(f"Lot amount must be positive, got {v}")
        return v


class LotBook:
    """
    Open lots of one side, ordered by entry.

    Example:
        >>> book = LotBook(MatchPolicy.FIFO)
        >>> book.add_lot(PositionLot(entry_index=1, entry_price=Decimal("100"), amount=Decimal("100")))
        >>> book.add_lot(PositionLot(entry_index=2, entry_price=Decimal("105"), amount=Decimal("100")))
        >>> matches = book.match_close(Decimal("150"))
        >>> # Returns: [(lot@100, 100), (lot@105, 50)]
        >>> # Leaves: [lot(50@105)]
    """

    def __init__(self, match_policy: MatchPolicy = MatchPolicy.FIFO) -> None:
        self.match_policy = MatchPolicy(match_policy)
        self._lots: deque[PositionLot] = deque()

    @property
    def lots(self) -> list[PositionLot]:
        return list(self._lots)

    @property
    def is_empty(self) -> bool:
        return not self._lots

    def total_amount(self) -> Num:
        if not self._lots:
            return Decimal("0")
        total = factory_of(self._lots[0].amount).zero
        for lot in self._lots:
            total = total + lot.amount
        return total

    def average_price(self) -> Num | None:
        """Amount-weighted average entry price (None when empty)."""
        if not self._lots:
            return None
        total_value = factory_of(self._lots[0].amount).zero
        for lot in self._lots:
            total_value = total_value + lot.entry_price * lot.amount
        return total_value / self.total_amount()

    def add_lot(self, lot: PositionLot) -> None:
        """Add a lot. Under AVG_COST it is merged into the single open lot."""
        if self.match_policy is MatchPolicy.AVG_COST and self._lots:
            current = self._lots.pop()
            amount = current.amount + lot.amount
            price = (current.entry_price * current.amount + lot.entry_price * lot.amount) / amount
            lot = current.model_copy(update={"amount": amount, "entry_price": price})
        self._lots.append(lot)

    def match_close(self, amount: Num) -> list[tuple[PositionLot, Num]]:
        """
        Match an exit amount against open lots.

        Args:
            amount: Amount to close (positive)

        Returns:
            List of (lot, amount_closed) tuples in match order

        Raises:
            ValueError: If amount is not positive or exceeds the open amount
        """
        if not amount > 0:
            raise ValueError(f"Amount must be positive, got {amount}")
        available = self.total_amount()
        if amount > available:
            raise ValueError(f"Insufficient open amount: need {amount}, have {available}")

        matches: list[tuple[PositionLot, Num]] = []
        remaining = amount
        newest_first = self.match_policy is MatchPolicy.LIFO

        while remaining > 0 and self._lots:
            lot = self._lots.pop() if newest_first else self._lots.popleft()
            if lot.amount <= remaining:
                matches.append((lot, lot.amount))
                remaining = remaining - lot.amount
            else:
                matches.append((lot, remaining))
                rest = lot.model_copy(update={"lot_id": f"{lot.lot_id}_remaining", "amount": lot.amount - remaining})
                if newest_first:
                    self._lots.append(rest)
                else:
                    self._lots.appendleft(rest)
                break

        return matches


class LiveTradingRecord(ITradingRecord):
    """
    Trading record fed by partial fills.

    Cost models are optional; analytics substitute zero cost where a model is
    not configured.

    Args:
        starting_type: Entry side (BUY = long lots, SELL = short lots)
        match_policy: Lot matching policy for exit fills
        transaction_cost_model: Optional cost model for trades
        holding_cost_model: Optional cost model for holding lots
        name: Optional record name

    Example:
        >>> record = LiveTradingRecord(match_policy=MatchPolicy.FIFO)
        >>> record.record_fill(1, TradeType.BUY, Decimal("100"), Decimal("2"))
        >>> record.record_fill(3, TradeType.BUY, Decimal("110"), Decimal("2"))
        >>> closed = record.record_fill(5, TradeType.SELL, Decimal("120"), Decimal("3"))
        >>> [p.entry.index for p in closed]
        [1, 3]
    """

    def __init__(
        self,
        starting_type: TradeType = TradeType.BUY,
        match_policy: MatchPolicy = MatchPolicy.FIFO,
        transaction_cost_model: CostModel | None = None,
        holding_cost_model: CostModel | None = None,
        name: str | None = None,
    ) -> None:
        if starting_type is None:
            raise ValueError("starting_type must not be None")
        self.name = name
        self._starting_type = TradeType(starting_type)
        self._transaction_cost_model = transaction_cost_model
        self._holding_cost_model = holding_cost_model
        self._book = LotBook(match_policy)
        self._positions: list[Position] = []
        self._trades: list[Trade] = []

    @property
    def match_policy(self) -> MatchPolicy:
        return self._book.match_policy

    @property
    def starting_type(self) -> TradeType:
        return self._starting_type

    @property
    def transaction_cost_model(self) -> CostModel | None:
        return self._transaction_cost_model

    @property
    def holding_cost_model(self) -> CostModel | None:
        return self._holding_cost_model

    @property
    def effective_transaction_cost_model(self) -> CostModel:
        return self._transaction_cost_model or ZeroCostModel()

    @property
    def effective_holding_cost_model(self) -> CostModel:
        return self._holding_cost_model or ZeroCostModel()

    @property
    def positions(self) -> list[Position]:
        return list(self._positions)

    @property
    def trades(self) -> list[Trade]:
        return list(self._trades)

    @property
    def open_lots(self) -> list[PositionLot]:
        return self._book.lots

    @property
    def net_open_amount(self) -> Num:
        return self._book.total_amount()

    @property
    def average_open_price(self) -> Num | None:
        return self._book.average_price()

    @property
    def current_position(self) -> Position:
        """
        Net open exposure as a single position.

        NEW when no lots are open; otherwise OPEN with the earliest lot's index,
        the amount-weighted entry price and the total open amount.
        """
        tcm = self.effective_transaction_cost_model
        hcm = self.effective_holding_cost_model
        if self._book.is_empty:
            return Position(self._starting_type, tcm, hcm)
        entry_index = min(lot.entry_index for lot in self._book.lots)
        entry = Trade(entry_index, self._starting_type, self._book.average_price(), self._book.total_amount(), tcm)
        return Position.of(entry, None, tcm, hcm)

    def open_lot_positions(self) -> list[Position]:
        """Each open lot as an independent entry-only position."""
        tcm = self.effective_transaction_cost_model
        hcm = self.effective_holding_cost_model
        return [
            Position.of(Trade(lot.entry_index, self._starting_type, lot.entry_price, lot.amount, tcm), None, tcm, hcm)
            for lot in self._book.lots
        ]

    def record_fill(
        self,
        index: int,
        side: TradeType,
        price: Num,
        amount: Num,
        entry_time: datetime | None = None,
    ) -> list[Position]:
        """
        Apply a fill.

        Entry-side fills open a lot. Exit-side fills close lots per the match
        policy.

        Args:
            index: Bar index of the fill
            side: BUY or SELL
            price: Fill price per unit
            amount: Fill amount (positive)
            entry_time: Optional wall-clock time of the fill

        Returns:
            Positions closed by this fill (empty for entry fills)

        Raises:
            ValueError: If the fill is invalid, no lots are open, or the exit
                amount exceeds the open amount
        """
        side = TradeType(side)
        tcm = self.effective_transaction_cost_model
        trade = Trade(index, side, price, amount, tcm)

        if side is self._starting_type:
            lot = PositionLot(entry_index=index, entry_price=trade.price, amount=trade.amount, entry_time=entry_time)
            self._book.add_lot(lot)
            self._trades.append(trade)
            logger.debug("live_record.lot_opened", record=self.name, index=index, amount=str(amount))
            return []

        if self._book.is_empty:
            raise ValueError(f"No open lots to close at index {index}")
        for lot in self._book.lots:
            if index < lot.entry_index:
                raise ValueError(f"Exit index {index} cannot precede lot entry index {lot.entry_index}")

        hcm = self.effective_holding_cost_model
        closed: list[Position] = []
        for lot, closed_amount in self._book.match_close(trade.amount):
            entry = Trade(lot.entry_index, self._starting_type, lot.entry_price, closed_amount, tcm)
            exit = Trade(index, side, trade.price, closed_amount, tcm)
            closed.append(Position.of(entry, exit, tcm, hcm))

        self._positions.extend(closed)
        self._trades.append(trade)
        logger.debug(
            "live_record.lots_closed",
            record=self.name,
            index=index,
            positions_closed=len(closed),
            open_lots=len(self._book.lots),
        )
        return closed

    def enter(self, index: int, price: Num, amount: Num | None = None) -> bool:
        """Open a lot. Always accepted."""
        if amount is None:
            amount = factory_of(price).one
        self.record_fill(index, self._starting_type, price, amount)
        return True

    def exit(self, index: int, price: Num, amount: Num | None = None) -> bool:
        """Close open lots (all of them by default). Returns False when flat."""
        if self._book.is_empty:
            return False
        if amount is None:
            amount = self._book.total_amount()
        self.record_fill(index, self._starting_type.complement(), price, amount)
        return True

    def __repr__(self) -> str:
        return (
            f"LiveTradingRecord(name={self.name!r}, policy={self.match_policy.value}, "
            f"positions={len(self._positions)}, open_lots={len(self._book.lots)})"
        )
