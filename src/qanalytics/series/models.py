"""
Bar series data models.

The analytics consume a bar series through a narrow interface: begin/end
index, close price per index, the numeric factory and the elapsed time
between two bars. BarSeries is a minimal in-memory implementation of it.

Design Principles:
- Bars are immutable (frozen=True)
- Series is append-only with strictly increasing end times
- All prices share the series' numeric factory
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field, model_validator

from qanalytics.num import Num, NumFactory

SECONDS_PER_YEAR = 365.25 * 24 * 60 * 60


class Bar(BaseModel):
    """
    Price bar at the end of a time period.

    Attributes:
        end_time: End of the bar period (bar timestamp)
        close_price: Closing price
        open_price: Opening price (optional)
        high_price: High price (optional, >= low when both present)
        low_price: Low price (optional)
        volume: Traded volume (optional)

    Example:
        >>> bar = Bar(end_time=datetime(2024, 1, 2, 16, 0), close_price=Decimal("150.5"))
    """

    end_time: datetime = Field(..., description="End of the bar period")
    close_price: Decimal | float = Field(..., description="Close price")
    open_price: Optional[Decimal | float] = Field(default=None, description="Open price")
    high_price: Optional[Decimal | float] = Field(default=None, description="High price")
    low_price: Optional[Decimal | float] = Field(default=None, description="Low price")
    volume: Optional[Decimal | float] = Field(default=None, ge=0, description="Volume")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_range(self) -> "Bar":
        """Enforce high >= low when both are present."""
        if self.high_price is not None and self.low_price is not None and self.high_price < self.low_price:
            raise ValueError(f"[{self.end_time}] Bar violation: high ({self.high_price}) < low ({self.low_price})")
        return self


class BarSeries:
    """
    Append-only series of bars indexed from zero.

    Args:
        bars: Initial bars (chronologically ordered)
        name: Optional series name (e.g. symbol)
        num_factory: Numeric factory for prices; defaults to the configured one

    Example:
        >>> series = BarSeries.from_closes([100, 101, 99])
        >>> series.end_index
        2
        >>> series.close_price(1)
        Decimal('101')
    """

    def __init__(
        self,
        bars: Iterable[Bar] = (),
        name: str | None = None,
        num_factory: NumFactory | None = None,
    ) -> None:
        if num_factory is None:
            from qanalytics.system.config import get_system_config

            num_factory = get_system_config().num_factory()
        self.name = name
        self._num_factory = num_factory
        self._bars: list[Bar] = []
        for bar in bars:
            self.add_bar(bar)

    @classmethod
    def from_closes(
        cls,
        closes: Iterable[Any],
        start: datetime = datetime(2024, 1, 1),
        step: timedelta = timedelta(days=1),
        name: str | None = None,
        num_factory: NumFactory | None = None,
    ) -> "BarSeries":
        """Build a series from close prices at evenly spaced end times."""
        series = cls(name=name, num_factory=num_factory)
        for offset, close in enumerate(closes):
            series.add_bar(Bar(end_time=start + step * offset, close_price=series.num_factory.num_of(close)))
        return series

    @property
    def num_factory(self) -> NumFactory:
        return self._num_factory

    @property
    def begin_index(self) -> int:
        return 0

    @property
    def end_index(self) -> int:
        """Index of the last bar, -1 for an empty series."""
        return len(self._bars) - 1

    @property
    def bar_count(self) -> int:
        return len(self._bars)

    @property
    def is_empty(self) -> bool:
        return not self._bars

    def add_bar(self, bar: Bar) -> None:
        """
        Append a bar, converting its prices with the series' numeric factory.

        Raises:
            ValueError: If the bar does not end strictly after the last bar
        """
        if self._bars and bar.end_time <= self._bars[-1].end_time:
            raise ValueError(
                f"Bar end time {bar.end_time} must be after last bar end time {self._bars[-1].end_time}"
            )
        converted = {
            field: self._num_factory.num_of(getattr(bar, field))
            for field in ("close_price", "open_price", "high_price", "low_price", "volume")
            if getattr(bar, field) is not None
        }
        self._bars.append(bar.model_copy(update=converted))

    def get_bar(self, index: int) -> Bar:
        """
        Get the bar at an index.

        Raises:
            IndexError: If index is outside [begin_index, end_index]
        """
        if index < 0 or index > self.end_index:
            raise IndexError(f"Bar index {index} out of range [0, {self.end_index}]")
        return self._bars[index]

    def close_price(self, index: int) -> Num:
        return self.get_bar(index).close_price

    def delta_years(self, start_index: int, end_index: int) -> Num:
        """Elapsed time between two bars' end times in years (365.25-day years)."""
        seconds = (self.get_bar(end_index).end_time - self.get_bar(start_index).end_time).total_seconds()
        return self._num_factory.num_of(seconds) / self._num_factory.num_of(SECONDS_PER_YEAR)

    def __len__(self) -> int:
        return len(self._bars)

    def __repr__(self) -> str:
        return f"BarSeries(name={self.name!r}, bars={len(self._bars)})"
