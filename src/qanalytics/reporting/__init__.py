"""Performance statements built from the analysis criteria."""

from qanalytics.reporting.models import DrawdownReport, PerformanceStatement, PnlReport, PositionStatsReport
from qanalytics.reporting.statement import build_statement

__all__ = [
    "DrawdownReport",
    "PerformanceStatement",
    "PnlReport",
    "PositionStatsReport",
    "build_statement",
]
