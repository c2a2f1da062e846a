"""Trades, positions, cost models and trading records."""

from qanalytics.trading.cost import (
    CostModel,
    CostModelFactory,
    CostModelType,
    LinearBorrowingCostModel,
    LinearTransactionCostModel,
    ZeroCostModel,
)
from qanalytics.trading.interface import ITradingRecord
from qanalytics.trading.live import LiveTradingRecord, LotBook, MatchPolicy, PositionLot
from qanalytics.trading.position import Position, PositionState
from qanalytics.trading.record import TradingRecord
from qanalytics.trading.trade import Trade, TradeType

__all__ = [
    "CostModel",
    "CostModelFactory",
    "CostModelType",
    "LinearBorrowingCostModel",
    "LinearTransactionCostModel",
    "ZeroCostModel",
    "ITradingRecord",
    "LiveTradingRecord",
    "LotBook",
    "MatchPolicy",
    "PositionLot",
    "Position",
    "PositionState",
    "TradingRecord",
    "Trade",
    "TradeType",
]
