"""Root conftest: pinned system configuration and shared series/records."""

from decimal import Decimal

import pytest

from qanalytics.num import DecimalNumFactory
from qanalytics.series import BarSeries
from qanalytics.system.config import AnalyticsConfig, set_system_config
from qanalytics.trading import TradingRecord


@pytest.fixture(autouse=True)
def default_system_config():
    """Run every test against built-in defaults, whatever qanalytics.yaml the cwd holds."""
    set_system_config(AnalyticsConfig())
    yield
    set_system_config(None)


@pytest.fixture
def num_factory() -> DecimalNumFactory:
    """Decimal backend used by most tests."""
    return DecimalNumFactory()


@pytest.fixture
def scenario_series(num_factory: DecimalNumFactory) -> BarSeries:
    """Six daily closes: flat at 100, then 110, 105, 110."""
    return BarSeries.from_closes([100, 100, 100, 110, 105, 110], name="SCN", num_factory=num_factory)


@pytest.fixture
def scenario_record() -> TradingRecord:
    """Long entry at index 2 @ 100, exit at index 5 @ 110."""
    record = TradingRecord(name="scenario")
    record.enter(2, Decimal("100"))
    record.exit(5, Decimal("110"))
    return record


@pytest.fixture
def flat_series(num_factory: DecimalNumFactory) -> BarSeries:
    """Four bars at a constant price."""
    return BarSeries.from_closes([100, 100, 100, 100], num_factory=num_factory)


@pytest.fixture
def mixed_series(num_factory: DecimalNumFactory) -> BarSeries:
    """Eight daily closes used by the mixed-outcome record."""
    return BarSeries.from_closes([100, 110, 105, 100, 97, 99, 100, 100], name="MIX", num_factory=num_factory)


@pytest.fixture
def mixed_record() -> TradingRecord:
    """Five long positions with net profits +10, -5, -3, +2 and 0."""
    record = TradingRecord(name="mixed")
    for entry_index, entry_price, exit_index, exit_price in [
        (0, "100", 1, "110"),
        (2, "105", 3, "100"),
        (3, "100", 4, "97"),
        (5, "99", 6, "101"),
        (6, "100", 7, "100"),
    ]:
        record.enter(entry_index, Decimal(entry_price))
        record.exit(exit_index, Decimal(exit_price))
    return record
