"""System configuration.

One configuration for the whole analytics engine: numeric backend, default
equity-curve settings, risk-free assumptions and logging.

Search Order:
1. Explicit path passed to AnalyticsConfig.load()
2. $QANALYTICS_CONFIG
3. ./qanalytics.yaml
4. Built-in defaults

Example YAML:
    num_type: decimal
    decimal_precision: 32
    equity_curve_mode: MARK_TO_MARKET
    open_position_handling: IGNORE
    annual_risk_free_rate: "0.02"
    cash_return_policy: CASH_EARNS_RISK_FREE
    logging:
      level: DEBUG
"""

import os
from decimal import Decimal
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from qanalytics.analysis.enums import CashReturnPolicy, EquityCurveMode, OpenPositionHandling
from qanalytics.num import DecimalNumFactory, FloatNumFactory, NumFactory
from qanalytics.system.log_system import LoggingConfig

CONFIG_ENV_VAR = "QANALYTICS_CONFIG"
DEFAULT_CONFIG_FILE = "qanalytics.yaml"


class AnalyticsConfig(BaseModel):
    """
    Complete analytics configuration.

    Attributes:
        num_type: Numeric backend for series and analyses ("decimal" or "float")
        decimal_precision: Precision for Decimal transcendental operations
        equity_curve_mode: Default equity-curve mode for builders and criteria
        open_position_handling: Default open-position handling
        annual_risk_free_rate: Default annual risk-free rate (0.02 = 2%)
        cash_return_policy: Default treatment of flat, uninvested bars
        logging: Logging configuration
    """

    model_config = ConfigDict(frozen=True)

    num_type: Literal["decimal", "float"] = Field(default="decimal")
    decimal_precision: int = Field(default=32, gt=0)
    equity_curve_mode: EquityCurveMode = Field(default=EquityCurveMode.MARK_TO_MARKET)
    open_position_handling: OpenPositionHandling = Field(default=OpenPositionHandling.MARK_TO_MARKET)
    annual_risk_free_rate: Decimal = Field(default=Decimal("0"))
    cash_return_policy: CashReturnPolicy = Field(default=CashReturnPolicy.CASH_EARNS_RISK_FREE)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("annual_risk_free_rate")
    @classmethod
    def _validate_risk_free_rate(cls, value: Decimal) -> Decimal:
        if value <= Decimal("-1"):
            raise ValueError(f"annual_risk_free_rate must be > -1, got {value}")
        return value

    def num_factory(self) -> NumFactory:
        """Build the configured numeric factory."""
        if self.num_type == "float":
            return FloatNumFactory()
        return DecimalNumFactory(self.decimal_precision)

    @classmethod
    def load(cls, path: str | Path | None = None) -> "AnalyticsConfig":
        """
        Load configuration from YAML.

        Args:
            path: Explicit config file. Falls back to $QANALYTICS_CONFIG, then
                ./qanalytics.yaml, then defaults.

        Returns:
            Validated AnalyticsConfig

        Raises:
            FileNotFoundError: If an explicit path (or the env var) points to a missing file
            ValueError: If the file is not valid YAML or fails validation
        """
        explicit = path if path is not None else os.environ.get(CONFIG_ENV_VAR)
        if explicit:
            config_path = Path(explicit)
            if not config_path.exists():
                raise FileNotFoundError(f"Config file not found: {config_path}")
        else:
            config_path = Path.cwd() / DEFAULT_CONFIG_FILE
            if not config_path.exists():
                return cls()

        try:
            with open(config_path, "r") as f:
                raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse YAML from {config_path}: {e}")

        if raw is None:
            return cls()
        if not isinstance(raw, dict):
            raise ValueError(f"Config file {config_path} must contain a mapping at the root")

        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            raise ValueError(f"Invalid configuration in {config_path}: {e}")


_system_config: AnalyticsConfig | None = None


def get_system_config() -> AnalyticsConfig:
    """Get the system config singleton, loading it on first use."""
    global _system_config
    if _system_config is None:
        _system_config = AnalyticsConfig.load()
    return _system_config


def reload_system_config(path: str | Path | None = None) -> AnalyticsConfig:
    """Force reload of the system config."""
    global _system_config
    _system_config = AnalyticsConfig.load(path)
    return _system_config


def set_system_config(config: AnalyticsConfig | None) -> None:
    """Replace the system config singleton (None restores lazy loading)."""
    global _system_config
    _system_config = config
