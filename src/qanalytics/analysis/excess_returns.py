"""Excess returns over a risk-free rate.

excess_return(a, b) compounds, for every bar i in (a, b], the equity growth
equity[i] / equity[i-1] divided by the risk-free growth (1 + rate)^Δyears
over the same interval, and returns the compounded growth minus one.

Flat, uninvested bars are skipped under CASH_EARNS_RISK_FREE (cash earns the
risk-free rate, so the bar contributes nothing) and charged the risk-free
drag under CASH_EARNS_ZERO.
"""

from typing import Any

from qanalytics.analysis.cash_flow import CashFlow
from qanalytics.analysis.enums import (
    CashReturnPolicy,
    EquityCurveMode,
    OpenPositionHandling,
    effective_open_position_handling,
)
from qanalytics.analysis.equity import resolve_equity_settings
from qanalytics.analysis.invested_interval import InvestedInterval
from qanalytics.num import Num
from qanalytics.series import BarSeries
from qanalytics.trading.interface import ITradingRecord


class ExcessReturns:
    """
    Excess-return calculator over a cash-flow equity curve.

    Args:
        series: Bar series
        annual_risk_free_rate: Annual risk-free rate (0.02 = 2%), defaults to the configured rate
        cash_return_policy: Treatment of flat, uninvested bars, defaults to the configured policy
        record: Trading record
        equity_curve_mode: Defaults to the configured mode
        open_position_handling: Defaults to the configured handling

    Example:
        >>> excess = ExcessReturns(series, Decimal("0.02"), CashReturnPolicy.CASH_EARNS_RISK_FREE, record)
        >>> excess.excess_return(0, series.end_index)
    """

    def __init__(
        self,
        series: BarSeries,
        annual_risk_free_rate: Any | None,
        cash_return_policy: CashReturnPolicy | None,
        record: ITradingRecord,
        equity_curve_mode: EquityCurveMode | None = None,
        open_position_handling: OpenPositionHandling | None = None,
    ) -> None:
        if series is None:
            raise ValueError("series must not be None")
        if record is None:
            raise ValueError("record must not be None")
        if annual_risk_free_rate is None or cash_return_policy is None:
            from qanalytics.system.config import get_system_config

            config = get_system_config()
            if annual_risk_free_rate is None:
                annual_risk_free_rate = config.annual_risk_free_rate
            if cash_return_policy is None:
                cash_return_policy = config.cash_return_policy

        mode, handling = resolve_equity_settings(equity_curve_mode, open_position_handling)
        handling = effective_open_position_handling(mode, handling)

        self.series = series
        self.num_factory = series.num_factory
        self.annual_risk_free_rate = self.num_factory.num_of(annual_risk_free_rate)
        if self.annual_risk_free_rate <= self.num_factory.minus_one:
            raise ValueError(f"annual_risk_free_rate must be > -1, got {annual_risk_free_rate}")
        self.cash_return_policy = CashReturnPolicy(cash_return_policy)
        self.equity_curve_mode = mode
        self.open_position_handling = handling

        final_index = None if series.is_empty else series.end_index
        self.cash_flow = CashFlow(series, record, final_index, mode, handling)
        self.invested_interval = InvestedInterval(series, record, handling)

    def risk_free_growth(self, previous_index: int, current_index: int) -> Num:
        """(1 + rate)^Δyears between two bars."""
        one = self.num_factory.one
        delta_years = self.series.delta_years(previous_index, current_index)
        return self.num_factory.pow(one + self.annual_risk_free_rate, delta_years)

    def excess_return(self, start_index: int, end_index: int) -> Num:
        """
        Compounded excess return over bars (start_index, end_index].

        Returns:
            Compounded growth minus one (zero for an empty interval)
        """
        zero = self.num_factory.zero
        one = self.num_factory.one
        growth = one
        skip_flat_cash = self.cash_return_policy is CashReturnPolicy.CASH_EARNS_RISK_FREE

        for i in range(start_index + 1, end_index + 1):
            previous = self.cash_flow.get_value(i - 1)
            current = self.cash_flow.get_value(i)
            if previous == zero:
                if current != zero:
                    growth = zero
                continue
            if skip_flat_cash and current == previous and not self.invested_interval.get_value(i):
                continue
            growth = growth * (current / previous) / self.risk_free_growth(i - 1, i)

        return growth - one
