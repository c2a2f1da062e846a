"""Invested-interval classification.

Value i describes the bar interval (i-1, i]: True when a position is held
over it. A position held from entry e to exit x covers intervals e+1..x; an
open position covers e+1 through the series end. Index 0 is always False.
"""

from qanalytics.analysis.enums import EquityCurveMode, OpenPositionHandling
from qanalytics.analysis.selection import select_positions
from qanalytics.series import BarSeries
from qanalytics.trading.interface import ITradingRecord


class InvestedInterval:
    """
    Per-interval invested flags.

    Args:
        series: Bar series
        record: Trading record
        open_position_handling: MARK_TO_MARKET includes the current open
            position (or a live record's open lots); defaults to the configured handling
    """

    def __init__(
        self,
        series: BarSeries,
        record: ITradingRecord,
        open_position_handling: OpenPositionHandling | None = None,
    ) -> None:
        if series is None:
            raise ValueError("series must not be None")
        if record is None:
            raise ValueError("record must not be None")
        if open_position_handling is None:
            from qanalytics.system.config import get_system_config

            open_position_handling = get_system_config().open_position_handling

        self.series = series
        self.open_position_handling = OpenPositionHandling(open_position_handling)

        flags = [False] * series.bar_count
        series_end = series.end_index
        positions = []
        if not series.is_empty:
            positions = select_positions(record, series_end, self.open_position_handling, EquityCurveMode.MARK_TO_MARKET)
        for position in positions:
            assert position.entry is not None
            last = position.exit.index if position.exit is not None else series_end
            for i in range(max(position.entry.index + 1, series.begin_index + 1), min(last, series_end) + 1):
                flags[i] = True
        self._values = tuple(flags)

    @property
    def values(self) -> tuple[bool, ...]:
        return self._values

    @property
    def unstable_bars(self) -> int:
        return 0

    @property
    def invested_count(self) -> int:
        return sum(1 for flag in self._values if flag)

    def get_value(self, index: int) -> bool:
        """
        Whether interval (index-1, index] is invested.

        Raises:
            IndexError: If index is outside the series
        """
        if index < 0 or index >= len(self._values):
            raise IndexError(f"Index {index} out of range [0, {len(self._values) - 1}]")
        return self._values[index]

    def __len__(self) -> int:
        return len(self._values)
