"""Unit tests for consecutive profit and loss criteria."""

from decimal import Decimal

from qanalytics.criteria import MaxConsecutiveLossCriterion, MaxConsecutiveProfitCriterion
from qanalytics.trading import Position, Trade, TradingRecord


class TestMaxConsecutiveLoss:
    """Test losing streaks."""

    def test_consecutive_losses_sum(self, mixed_series, mixed_record):
        """Test -5 then -3 form a streak of -8."""
        assert MaxConsecutiveLossCriterion().calculate(mixed_series, mixed_record) == Decimal("-8")

    def test_streak_at_end_is_counted(self, mixed_series):
        """Test a streak still running after the last position is compared."""
        record = TradingRecord()
        record.enter(0, Decimal("100"))
        record.exit(1, Decimal("110"))
        record.enter(2, Decimal("105"))
        record.exit(3, Decimal("100"))
        record.enter(3, Decimal("100"))
        record.exit(4, Decimal("97"))

        assert MaxConsecutiveLossCriterion().calculate(mixed_series, record) == Decimal("-8")

    def test_no_losses(self, scenario_series, scenario_record):
        """Test a record without losses scores zero."""
        assert MaxConsecutiveLossCriterion().calculate(scenario_series, scenario_record) == Decimal("0")

    def test_single_position(self, scenario_series):
        """Test a losing position scores its loss."""
        loser = Position.of(Trade.buy_at(3, Decimal("110"), Decimal("1")), Trade.sell_at(4, Decimal("105"), Decimal("1")))

        assert MaxConsecutiveLossCriterion().calculate(scenario_series, loser) == Decimal("-5")
        assert MaxConsecutiveProfitCriterion().calculate(scenario_series, loser) == Decimal("0")


class TestMaxConsecutiveProfit:
    """Test winning streaks."""

    def test_best_streak(self, mixed_series, mixed_record):
        """Test the +10 streak beats the later +2 one."""
        assert MaxConsecutiveProfitCriterion().calculate(mixed_series, mixed_record) == Decimal("10")

    def test_consecutive_wins_sum(self, scenario_series):
        """Test adjacent winners are summed."""
        record = TradingRecord()
        record.enter(0, Decimal("100"))
        record.exit(1, Decimal("103"))
        record.enter(2, Decimal("100"))
        record.exit(3, Decimal("110"))

        assert MaxConsecutiveProfitCriterion().calculate(scenario_series, record) == Decimal("13")

    def test_empty_record(self, flat_series):
        """Test no positions scores zero."""
        assert MaxConsecutiveProfitCriterion().calculate(flat_series, TradingRecord()) == Decimal("0")
