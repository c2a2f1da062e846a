"""Performance statement data models.

Pydantic models for a complete, immutable summary of one trading record's
performance over a bar series. Produced by build_statement().
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from qanalytics.analysis.enums import CashReturnPolicy, EquityCurveMode, OpenPositionHandling


class PositionStatsReport(BaseModel):
    """Position counts, streaks and exposure."""

    model_config = ConfigDict(frozen=True)

    total_positions: int
    winning_positions: int
    losing_positions: int
    break_even_positions: int
    max_consecutive_profit: Decimal
    max_consecutive_loss: Decimal  # Negative or zero
    in_position_pct: Decimal  # Share of bar intervals invested, 50 = half

    @property
    def win_rate(self) -> Decimal:
        """Winning share of closed positions (0 when there are none)."""
        if self.total_positions == 0:
            return Decimal("0")
        return Decimal(self.winning_positions) / Decimal(self.total_positions)


class PnlReport(BaseModel):
    """Profit and loss of closed positions, per unit traded."""

    model_config = ConfigDict(frozen=True)

    net_profit_loss: Decimal
    gross_profit_loss: Decimal
    total_profit: Decimal
    total_loss: Decimal
    average_profit: Decimal
    average_loss: Decimal
    profit_loss_ratio: Decimal
    gross_return: Decimal  # Multiplicative, 1.10 = +10%


class DrawdownReport(BaseModel):
    """Drawdown and return-over-drawdown figures."""

    model_config = ConfigDict(frozen=True)

    max_absolute_drawdown: Decimal
    max_drawdown: Decimal  # Relative, 0.25 = 25%
    return_over_max_drawdown: Decimal


class PerformanceStatement(BaseModel):
    """
    Complete performance statement for a trading record.

    Includes the analysis window, the equity settings used, and the
    position, PnL, drawdown and risk-adjusted sections.
    """

    model_config = ConfigDict(frozen=True)

    # Analysis window
    series_name: str | None = None
    record_name: str | None = None
    bar_count: int
    start_index: int
    end_index: int

    # Settings
    equity_curve_mode: EquityCurveMode
    open_position_handling: OpenPositionHandling
    cash_return_policy: CashReturnPolicy
    annual_risk_free_rate: Decimal

    # Sections
    positions: PositionStatsReport
    pnl: PnlReport
    drawdown: DrawdownReport

    # Risk-adjusted
    sharpe_ratio: Decimal
