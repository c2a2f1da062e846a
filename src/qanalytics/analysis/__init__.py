"""
Analysis package: equity curves, return series and invested intervals.

Exports:
    - CashFlow: Ratio-compounded equity curve starting at one
    - CumulativePnL: Absolute per-unit PnL curve starting at zero
    - Returns: Per-bar arithmetic or log strategy returns
    - ExcessReturns: Compounded returns over a risk-free rate
    - InvestedInterval: Per-interval invested flags
    - select_positions: Position-selection policy
"""

from qanalytics.analysis.cash_flow import CashFlow
from qanalytics.analysis.cumulative_pnl import CumulativePnL
from qanalytics.analysis.enums import (
    CashReturnPolicy,
    EquityCurveMode,
    OpenPositionHandling,
    ReturnRepresentation,
    effective_open_position_handling,
)
from qanalytics.analysis.excess_returns import ExcessReturns
from qanalytics.analysis.invested_interval import InvestedInterval
from qanalytics.analysis.returns import Returns
from qanalytics.analysis.selection import select_positions

__all__ = [
    "CashFlow",
    "CumulativePnL",
    "CashReturnPolicy",
    "EquityCurveMode",
    "OpenPositionHandling",
    "ReturnRepresentation",
    "effective_open_position_handling",
    "ExcessReturns",
    "InvestedInterval",
    "Returns",
    "select_positions",
]
