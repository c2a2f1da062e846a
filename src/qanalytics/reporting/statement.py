"""Performance statement builder.

Runs the standard criteria against one trading record and collects the
results into a PerformanceStatement.

Usage:
    >>> from qanalytics.reporting import build_statement
    >>> statement = build_statement(series, record)
    >>> statement.pnl.net_profit_loss
    Decimal('10')
    >>> statement.model_dump_json()
"""

from decimal import Decimal
from typing import Any

from qanalytics.analysis.base import as_record
from qanalytics.analysis.enums import (
    CashReturnPolicy,
    EquityCurveMode,
    OpenPositionHandling,
    ReturnRepresentation,
    effective_open_position_handling,
)
from qanalytics.analysis.equity import resolve_equity_settings
from qanalytics.criteria import (
    AnalysisCriterion,
    AverageLossCriterion,
    AverageProfitCriterion,
    GrossProfitLossCriterion,
    InPositionPercentageCriterion,
    LossCriterion,
    MaxConsecutiveLossCriterion,
    MaxConsecutiveProfitCriterion,
    MaximumAbsoluteDrawdownCriterion,
    MaximumDrawdownCriterion,
    NetProfitLossCriterion,
    NumberOfBreakEvenPositionsCriterion,
    NumberOfLosingPositionsCriterion,
    NumberOfPositionsCriterion,
    NumberOfWinningPositionsCriterion,
    ProfitCriterion,
    ProfitLossRatioCriterion,
    ReturnCriterion,
    ReturnOverMaxDrawdownCriterion,
    SharpeRatioCriterion,
)
from qanalytics.num import Num
from qanalytics.reporting.models import DrawdownReport, PerformanceStatement, PnlReport, PositionStatsReport
from qanalytics.series import BarSeries
from qanalytics.system.log_system import LoggerFactory
from qanalytics.trading.interface import ITradingRecord
from qanalytics.trading.position import Position

logger = LoggerFactory.get_logger()


def _to_decimal(value: Num) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def build_statement(
    series: BarSeries,
    subject: ITradingRecord | Position,
    equity_curve_mode: EquityCurveMode | None = None,
    open_position_handling: OpenPositionHandling | None = None,
    annual_risk_free_rate: Any | None = None,
    cash_return_policy: CashReturnPolicy | None = None,
) -> PerformanceStatement:
    """
    Build a performance statement for a trading record.

    Settings left as None are taken from the system configuration.

    Args:
        series: Bar series the record traded on
        subject: Trading record or single position
        equity_curve_mode: Equity-curve mode for drawdown and Sharpe
        open_position_handling: Open-position handling for drawdown, Sharpe and exposure
        annual_risk_free_rate: Annual risk-free rate for Sharpe (0.02 = 2%)
        cash_return_policy: Treatment of flat bars for Sharpe

    Returns:
        Immutable PerformanceStatement

    Raises:
        ValueError: If series or subject is None
    """
    if series is None:
        raise ValueError("series must not be None")
    record = as_record(subject)
    mode, handling = resolve_equity_settings(equity_curve_mode, open_position_handling)
    handling = effective_open_position_handling(mode, handling)
    if annual_risk_free_rate is None or cash_return_policy is None:
        from qanalytics.system.config import get_system_config

        config = get_system_config()
        if annual_risk_free_rate is None:
            annual_risk_free_rate = config.annual_risk_free_rate
        if cash_return_policy is None:
            cash_return_policy = config.cash_return_policy

    def run(criterion: AnalysisCriterion) -> Decimal:
        return _to_decimal(criterion.calculate_record(series, record))

    positions = PositionStatsReport(
        total_positions=int(run(NumberOfPositionsCriterion())),
        winning_positions=int(run(NumberOfWinningPositionsCriterion())),
        losing_positions=int(run(NumberOfLosingPositionsCriterion())),
        break_even_positions=int(run(NumberOfBreakEvenPositionsCriterion())),
        max_consecutive_profit=run(MaxConsecutiveProfitCriterion()),
        max_consecutive_loss=run(MaxConsecutiveLossCriterion()),
        in_position_pct=run(InPositionPercentageCriterion(ReturnRepresentation.PERCENTAGE, handling)),
    )
    pnl = PnlReport(
        net_profit_loss=run(NetProfitLossCriterion()),
        gross_profit_loss=run(GrossProfitLossCriterion()),
        total_profit=run(ProfitCriterion()),
        total_loss=run(LossCriterion()),
        average_profit=run(AverageProfitCriterion()),
        average_loss=run(AverageLossCriterion()),
        profit_loss_ratio=run(ProfitLossRatioCriterion()),
        gross_return=run(ReturnCriterion(add_base=True)),
    )
    drawdown = DrawdownReport(
        max_absolute_drawdown=run(MaximumAbsoluteDrawdownCriterion(None, mode, handling)),
        max_drawdown=run(MaximumDrawdownCriterion(mode, handling)),
        return_over_max_drawdown=run(ReturnOverMaxDrawdownCriterion(ReturnRepresentation.DECIMAL, mode, handling)),
    )
    sharpe = run(
        SharpeRatioCriterion(
            annual_risk_free_rate,
            cash_return_policy,
            equity_curve_mode=mode,
            open_position_handling=handling,
        )
    )

    statement = PerformanceStatement(
        series_name=series.name,
        record_name=getattr(record, "name", None),
        bar_count=series.bar_count,
        start_index=record.get_start_index(series),
        end_index=record.get_end_index(series),
        equity_curve_mode=mode,
        open_position_handling=handling,
        cash_return_policy=CashReturnPolicy(cash_return_policy),
        annual_risk_free_rate=_to_decimal(annual_risk_free_rate),
        positions=positions,
        pnl=pnl,
        drawdown=drawdown,
        sharpe_ratio=sharpe,
    )

    logger.info(
        "statement.built",
        series=series.name,
        record=statement.record_name,
        positions=positions.total_positions,
        net_profit_loss=str(pnl.net_profit_loss),
        max_drawdown=str(drawdown.max_drawdown),
        sharpe_ratio=str(sharpe),
    )
    return statement
