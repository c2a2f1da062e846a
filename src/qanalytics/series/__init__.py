"""Bar series consumed by the analytics."""

from qanalytics.series.models import Bar, BarSeries

__all__ = ["Bar", "BarSeries"]
