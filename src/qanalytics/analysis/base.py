"""
Base class for per-bar performance series.

A performance series folds the positions chosen by the selection policy into
one value per bar of a series. Subclasses implement _calculate_position();
the base class resolves settings, runs the selection and exposes the values.

Philosophy:
- Series are computed eagerly in the constructor
- Each series owns its own output; records and series are only read
- A single Position is analysed as a one-position record
"""

from abc import ABC, abstractmethod

from qanalytics.analysis.enums import EquityCurveMode, OpenPositionHandling, effective_open_position_handling
from qanalytics.analysis.equity import resolve_equity_settings
from qanalytics.analysis.selection import select_positions
from qanalytics.num import Num
from qanalytics.series import BarSeries
from qanalytics.trading.interface import ITradingRecord
from qanalytics.trading.position import Position
from qanalytics.trading.record import TradingRecord


def as_record(subject: ITradingRecord | Position) -> ITradingRecord:
    """Wrap a single position into a record; pass records through."""
    if subject is None:
        raise ValueError("trading record or position must not be None")
    if isinstance(subject, Position):
        return TradingRecord.from_position(subject)
    return subject


class PerformanceSeries(ABC):
    """
    Per-bar series derived from a trading record.

    Args:
        series: Bar series the record trades on
        subject: Trading record or single position
        final_index: Last bar of the analysis window (defaults to the record's end index)
        equity_curve_mode: Defaults to the configured mode
        open_position_handling: Defaults to the configured handling
    """

    def __init__(
        self,
        series: BarSeries,
        subject: ITradingRecord | Position,
        final_index: int | None = None,
        equity_curve_mode: EquityCurveMode | None = None,
        open_position_handling: OpenPositionHandling | None = None,
    ) -> None:
        if series is None:
            raise ValueError("series must not be None")
        record = as_record(subject)
        mode, handling = resolve_equity_settings(equity_curve_mode, open_position_handling)

        self.series = series
        self.record = record
        self.equity_curve_mode = mode
        self.open_position_handling = effective_open_position_handling(mode, handling)
        self.num_factory = series.num_factory
        if final_index is not None and final_index < 0:
            raise ValueError(f"final_index cannot be negative, got {final_index}")
        self.final_index = record.get_end_index(series) if final_index is None else final_index
        self._values: tuple[Num, ...] = ()

    def _positions(self, record: ITradingRecord) -> list[Position]:
        return select_positions(record, self.final_index, self.open_position_handling, self.equity_curve_mode)

    @abstractmethod
    def _calculate_position(self, position: Position, final_index: int) -> None:
        """Fold one selected position into the series under construction."""

    @property
    def values(self) -> tuple[Num, ...]:
        return self._values

    @property
    def size(self) -> int:
        return self.series.bar_count

    @property
    def unstable_bars(self) -> int:
        return 0

    def get_value(self, index: int) -> Num:
        """
        Value at a bar index.

        Raises:
            IndexError: If index is outside the computed range
        """
        if index < 0 or index >= len(self._values):
            raise IndexError(f"Index {index} out of range [0, {len(self._values) - 1}]")
        return self._values[index]

    def __getitem__(self, index: int) -> Num:
        return self.get_value(index)

    def __len__(self) -> int:
        return len(self._values)
