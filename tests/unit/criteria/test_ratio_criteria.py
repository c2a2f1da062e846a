"""Unit tests for the Sharpe ratio and in-position percentage criteria."""

import math
import statistics
from decimal import Decimal

import pytest

from qanalytics.analysis import CashReturnPolicy, OpenPositionHandling, ReturnRepresentation
from qanalytics.criteria import InPositionPercentageCriterion, SamplingFrequency, SharpeRatioCriterion
from qanalytics.series import BarSeries
from qanalytics.trading import Position, Trade, TradingRecord

SCENARIO_BAR_SAMPLES = [0.0, 0.0, 0.1, 1.05 / 1.1 - 1, 1.1 / 1.05 - 1]
MIXED_TRADE_SAMPLES = [0.1, 100 / 105 - 1, -0.03, 101 / 99 - 1, 0.0]


def _sharpe(samples: list[float]) -> float:
    return statistics.mean(samples) / statistics.stdev(samples)


class TestSharpeRatioCriterion:
    """Test Sharpe ratio sampling and annualisation."""

    def test_bar_sampling(self, scenario_series, scenario_record):
        """Test per-bar excess returns with a zero rate."""
        criterion = SharpeRatioCriterion(annual_risk_free_rate=Decimal("0"), annualize=False)

        value = criterion.calculate(scenario_series, scenario_record)

        assert float(value) == pytest.approx(_sharpe(SCENARIO_BAR_SAMPLES))

    def test_annualized(self, scenario_series, scenario_record):
        """Test daily samples scale by sqrt(samples per year)."""
        criterion = SharpeRatioCriterion(annual_risk_free_rate=Decimal("0"))

        value = criterion.calculate(scenario_series, scenario_record)

        assert float(value) == pytest.approx(_sharpe(SCENARIO_BAR_SAMPLES) * math.sqrt(365.25))

    def test_trade_sampling(self, mixed_series, mixed_record):
        """Test one sample per position from entry to exit."""
        criterion = SharpeRatioCriterion(
            annual_risk_free_rate=Decimal("0"),
            annualize=False,
            sampling_frequency=SamplingFrequency.TRADE,
        )

        value = criterion.calculate(mixed_series, mixed_record)

        assert float(value) == pytest.approx(_sharpe(MIXED_TRADE_SAMPLES))

    def test_single_trade_sample_is_zero(self, scenario_series, scenario_record):
        """Test fewer than two samples scores zero."""
        criterion = SharpeRatioCriterion(sampling_frequency=SamplingFrequency.TRADE)

        assert criterion.calculate(scenario_series, scenario_record) == Decimal("0")

    def test_position_matches_record(self, scenario_series, scenario_record):
        """Test a position is scored as a one-position record."""
        position = Position.of(Trade.buy_at(2, Decimal("100"), Decimal("1")), Trade.sell_at(5, Decimal("110"), Decimal("1")))
        criterion = SharpeRatioCriterion(annual_risk_free_rate=Decimal("0"))

        assert criterion.calculate(scenario_series, position) == criterion.calculate(scenario_series, scenario_record)

    def test_no_dispersion_is_zero(self, flat_series):
        """Test identical samples score zero."""
        criterion = SharpeRatioCriterion(cash_return_policy=CashReturnPolicy.CASH_EARNS_RISK_FREE)

        assert criterion.calculate(flat_series, TradingRecord()) == Decimal("0")

    def test_single_bar_is_zero(self, num_factory):
        """Test a one-bar series scores zero."""
        series = BarSeries.from_closes([100], num_factory=num_factory)

        assert SharpeRatioCriterion().calculate(series, TradingRecord()) == Decimal("0")

    def test_sampling_frequency_from_string(self):
        """Test the enum accepts its value."""
        assert SharpeRatioCriterion(sampling_frequency="TRADE").sampling_frequency is SamplingFrequency.TRADE


class TestInPositionPercentageCriterion:
    """Test share of intervals spent invested."""

    def test_decimal(self, scenario_series, scenario_record):
        """Test three of five intervals invested."""
        assert InPositionPercentageCriterion().calculate(scenario_series, scenario_record) == Decimal("0.6")

    def test_percentage(self, scenario_series, scenario_record):
        """Test PERCENTAGE representation."""
        criterion = InPositionPercentageCriterion(ReturnRepresentation.PERCENTAGE)

        assert criterion.calculate(scenario_series, scenario_record) == Decimal("60")

    def test_open_position_handling(self, scenario_series):
        """Test IGNORE drops the open position."""
        record = TradingRecord()
        record.enter(2, Decimal("100"))

        included = InPositionPercentageCriterion(open_position_handling=OpenPositionHandling.MARK_TO_MARKET)
        ignored = InPositionPercentageCriterion(open_position_handling=OpenPositionHandling.IGNORE)

        assert included.calculate(scenario_series, record) == Decimal("0.6")
        assert ignored.calculate(scenario_series, record) == Decimal("0")

    def test_single_bar_is_zero(self, num_factory):
        """Test a one-bar series has no intervals."""
        series = BarSeries.from_closes([100], num_factory=num_factory)

        assert InPositionPercentageCriterion().calculate(series, TradingRecord()) == Decimal("0")

    def test_lower_is_better(self):
        """Test ordering."""
        assert InPositionPercentageCriterion().better_than(Decimal("0.2"), Decimal("0.5"))
