"""Unit tests for invested-interval flags."""

from decimal import Decimal

import pytest

from qanalytics.analysis import InvestedInterval, OpenPositionHandling
from qanalytics.trading import LiveTradingRecord, TradingRecord


class TestInvestedInterval:
    """Test interval classification."""

    def test_closed_position_covers_entry_to_exit(self, scenario_series, scenario_record):
        """Test intervals after the entry bar up to the exit bar are invested."""
        invested = InvestedInterval(scenario_series, scenario_record)

        assert invested.values == (False, False, False, True, True, True)
        assert invested.invested_count == 3
        assert invested.get_value(3) is True

    def test_open_position_included(self, scenario_series):
        """Test MARK_TO_MARKET counts an open position through the series end."""
        record = TradingRecord()
        record.enter(3, Decimal("110"))

        invested = InvestedInterval(scenario_series, record, OpenPositionHandling.MARK_TO_MARKET)

        assert invested.values == (False, False, False, False, True, True)

    def test_open_position_ignored(self, scenario_series):
        """Test IGNORE leaves an open position out."""
        record = TradingRecord()
        record.enter(2, Decimal("100"))

        invested = InvestedInterval(scenario_series, record, OpenPositionHandling.IGNORE)

        assert not any(invested.values)

    def test_live_record_open_lots(self, scenario_series):
        """Test open lots count as invested."""
        record = LiveTradingRecord()
        record.enter(4, Decimal("105"))

        invested = InvestedInterval(scenario_series, record, OpenPositionHandling.MARK_TO_MARKET)

        assert invested.invested_count == 1
        assert invested.get_value(5) is True

    def test_flat_record(self, flat_series):
        """Test no positions means no invested intervals."""
        invested = InvestedInterval(flat_series, TradingRecord())

        assert invested.values == (False,) * 4
        assert len(invested) == 4

    def test_index_out_of_range(self, flat_series):
        """Test out-of-range access raises IndexError."""
        invested = InvestedInterval(flat_series, TradingRecord())

        with pytest.raises(IndexError):
            invested.get_value(4)
