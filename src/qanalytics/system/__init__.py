"""
System package: logging and configuration.

Exports:
    - LoggerFactory: Factory for creating configured loggers
    - LoggingConfig: Logging configuration model

Configuration lives in qanalytics.system.config (AnalyticsConfig,
get_system_config, reload_system_config, set_system_config).
"""

from qanalytics.system.log_system import LoggerFactory, LoggingConfig

__all__ = [
    "LoggerFactory",
    "LoggingConfig",
]
