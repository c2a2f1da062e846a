"""Risk-adjusted and exposure ratios."""

from enum import Enum
from typing import Any

from qanalytics.analysis.base import as_record
from qanalytics.analysis.enums import (
    CashReturnPolicy,
    EquityCurveMode,
    OpenPositionHandling,
    ReturnRepresentation,
)
from qanalytics.analysis.excess_returns import ExcessReturns
from qanalytics.analysis.invested_interval import InvestedInterval
from qanalytics.analysis.selection import select_positions
from qanalytics.criteria.base import AnalysisCriterion, EquityCurveCriterion
from qanalytics.num import Num
from qanalytics.series import BarSeries
from qanalytics.system.log_system import LoggerFactory
from qanalytics.trading.interface import ITradingRecord
from qanalytics.trading.position import Position

logger = LoggerFactory.get_logger()


class SamplingFrequency(str, Enum):
    """How excess-return samples are taken for ratio criteria.

    BAR samples every consecutive pair of bars. TRADE samples each included
    position from its entry to its exit (or the series end when still open).
    """

    BAR = "BAR"
    TRADE = "TRADE"


class SharpeRatioCriterion(EquityCurveCriterion):
    """
    Sharpe ratio of excess returns over the cash flow curve.

    Sharpe = mean(excess) / stdev(excess), using the sample standard
    deviation. Annualised by sqrt(samples / years covered by the samples).
    Zero when there are fewer than two samples or no dispersion.

    Args:
        annual_risk_free_rate: Annual rate (0.02 = 2%), defaults to the configured rate
        cash_return_policy: Treatment of flat bars, defaults to the configured policy
        annualize: Scale the per-sample ratio to one year
        sampling_frequency: BAR (default) or TRADE samples
        equity_curve_mode: Defaults to the configured mode
        open_position_handling: Defaults to the configured handling

    Example:
        >>> SharpeRatioCriterion(annual_risk_free_rate=Decimal("0")).calculate(series, record)
    """

    def __init__(
        self,
        annual_risk_free_rate: Any | None = None,
        cash_return_policy: CashReturnPolicy | None = None,
        annualize: bool = True,
        sampling_frequency: SamplingFrequency = SamplingFrequency.BAR,
        equity_curve_mode: EquityCurveMode | None = None,
        open_position_handling: OpenPositionHandling | None = None,
    ) -> None:
        super().__init__(equity_curve_mode, open_position_handling)
        self.annual_risk_free_rate = annual_risk_free_rate
        self.cash_return_policy = cash_return_policy
        self.annualize = annualize
        self.sampling_frequency = SamplingFrequency(sampling_frequency)

    @property
    def category(self) -> str:
        return "risk_adjusted"

    def _index_pairs(self, series: BarSeries, record: ITradingRecord) -> list[tuple[int, int]]:
        if self.sampling_frequency is SamplingFrequency.BAR:
            return [(i - 1, i) for i in range(series.begin_index + 1, series.end_index + 1)]

        final_index = series.end_index
        pairs = []
        for position in select_positions(record, final_index, self.open_position_handling, self.equity_curve_mode):
            assert position.entry is not None
            entry_index = position.entry.index
            current_index = final_index if position.exit is None else min(position.exit.index, final_index)
            if current_index >= entry_index:
                pairs.append((entry_index, current_index))
        return pairs

    def calculate_position(self, series: BarSeries, position: Position) -> Num:
        return self.calculate_record(series, as_record(position))

    def calculate_record(self, series: BarSeries, record: ITradingRecord) -> Num:
        num_factory = series.num_factory
        zero = num_factory.zero
        if series.bar_count < 2:
            return zero

        excess_returns = ExcessReturns(
            series,
            self.annual_risk_free_rate,
            self.cash_return_policy,
            record,
            self.equity_curve_mode,
            self.open_position_handling,
        )
        pairs = self._index_pairs(series, record)
        samples = [excess_returns.excess_return(previous, current) for previous, current in pairs]
        count = len(samples)
        if count < 2:
            return zero

        n = num_factory.num_of(count)
        mean = sum(samples, zero) / n
        variance = sum(((sample - mean) * (sample - mean) for sample in samples), zero) / (n - num_factory.one)
        stdev = num_factory.sqrt(variance)
        if stdev == 0:
            return zero

        sharpe = mean / stdev
        if self.annualize:
            years = sum((series.delta_years(previous, current) for previous, current in pairs), zero)
            if years > 0:
                sharpe = sharpe * num_factory.sqrt(n / years)

        logger.debug(
            "sharpe_ratio.calculated",
            samples=count,
            sampling=self.sampling_frequency.value,
            sharpe=str(sharpe),
        )
        return sharpe

    def __repr__(self) -> str:
        return (
            f"SharpeRatioCriterion(annual_risk_free_rate={self.annual_risk_free_rate}, "
            f"sampling_frequency={self.sampling_frequency.value}, annualize={self.annualize})"
        )


class InPositionPercentageCriterion(AnalysisCriterion):
    """
    Share of bar intervals spent invested (lower is better).

    invested intervals / (bar count - 1), formatted as a rate of return in
    the chosen representation (DECIMAL 0.5, PERCENTAGE 50).

    Args:
        representation: Output representation (default DECIMAL)
        open_position_handling: Whether the current open position counts,
            defaults to the configured handling
    """

    def __init__(
        self,
        representation: ReturnRepresentation = ReturnRepresentation.DECIMAL,
        open_position_handling: OpenPositionHandling | None = None,
    ) -> None:
        self.representation = ReturnRepresentation(representation)
        self.open_position_handling = open_position_handling

    @property
    def category(self) -> str:
        return "trade"

    def calculate_position(self, series: BarSeries, position: Position) -> Num:
        return self.calculate_record(series, as_record(position))

    def calculate_record(self, series: BarSeries, record: ITradingRecord) -> Num:
        num_factory = series.num_factory
        if series.bar_count < 2:
            return num_factory.zero
        invested = InvestedInterval(series, record, self.open_position_handling)
        ratio = num_factory.num_of(invested.invested_count) / num_factory.num_of(series.bar_count - 1)
        return self.representation.from_rate_of_return(ratio, num_factory)

    def better_than(self, value1: Num, value2: Num) -> bool:
        return value1 < value2
