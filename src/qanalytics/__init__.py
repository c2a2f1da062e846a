"""
QAnalytics - Trading Record Performance Analytics

Public API for analysing trading records against a bar series: equity curves,
per-bar returns, excess returns, invested intervals and performance criteria.
"""

from importlib.metadata import version

try:
    __version__ = version("qanalytics")
except Exception:
    __version__ = "0.0.0.dev"  # Fallback for development


__all__ = [
    "__version__",
]
