"""
Base Analysis Criterion Abstract Class.

All criteria must inherit from AnalysisCriterion and implement the two
calculate methods. A criterion reduces a bar series and either a single
position or a whole trading record to one number.

Philosophy:
- Criteria are stateless: parameters are fixed at construction
- Criteria only read series and records, never mutate them
- better_than() orders two values of the same criterion (strict weak order)

Registry Name: Derived from class name (e.g., SharpeRatioCriterion → "sharpe_ratio")
"""

import re
from abc import ABC, abstractmethod

from qanalytics.analysis.enums import EquityCurveMode, OpenPositionHandling, effective_open_position_handling
from qanalytics.analysis.equity import resolve_equity_settings
from qanalytics.num import Num
from qanalytics.series import BarSeries
from qanalytics.trading.interface import ITradingRecord
from qanalytics.trading.position import Position

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class AnalysisCriterion(ABC):
    """
    Abstract base class for all analysis criteria.

    Responsibilities:
    - Calculate a value for one position or for a trading record
    - Order two values of the criterion via better_than()
    - Provide names for registries and reports

    Does NOT:
    - Cache results between calls
    - Modify the series or the record

    Example Implementation:
        ```python
        class NumberOfPositionsCriterion(AnalysisCriterion):
            def calculate_position(self, series, position):
                return series.num_factory.one

            def calculate_record(self, series, record):
                return series.num_factory.num_of(record.position_count)

            def better_than(self, value1, value2):
                return value1 < value2
        ```
    """

    @abstractmethod
    def calculate_position(self, series: BarSeries, position: Position) -> Num:
        """
        Criterion value for a single position.

        Args:
            series: Bar series the position was traded on
            position: Position to evaluate

        Returns:
            Criterion value
        """

    @abstractmethod
    def calculate_record(self, series: BarSeries, record: ITradingRecord) -> Num:
        """
        Criterion value for a whole trading record.

        Args:
            series: Bar series the record was traded on
            record: Trading record to evaluate

        Returns:
            Criterion value
        """

    def calculate(self, series: BarSeries, subject: ITradingRecord | Position) -> Num:
        """
        Dispatch to calculate_position() or calculate_record().

        Raises:
            ValueError: If series or subject is None
        """
        if series is None:
            raise ValueError("series must not be None")
        if subject is None:
            raise ValueError("trading record or position must not be None")
        if isinstance(subject, Position):
            return self.calculate_position(series, subject)
        return self.calculate_record(series, subject)

    def better_than(self, value1: Num, value2: Num) -> bool:
        """True when value1 is strictly better than value2 (higher is better by default)."""
        return value1 > value2

    @property
    def name(self) -> str:
        """
        Criterion identifier in snake_case.

        Example:
            MaximumDrawdownCriterion → "maximum_drawdown"
        """
        class_name = type(self).__name__
        if class_name.endswith("Criterion"):
            class_name = class_name[: -len("Criterion")]
        return _CAMEL_BOUNDARY.sub("_", class_name).lower()

    @property
    def display_name(self) -> str:
        return self.name.replace("_", " ").title()

    @property
    def category(self) -> str:
        """Grouping for reports: "pnl", "trade", "risk", "risk_adjusted" or "other"."""
        return "other"

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class EquityCurveCriterion(AnalysisCriterion):
    """
    Criterion computed from an equity curve.

    Carries the equity curve mode and open position handling passed to the
    underlying builders. REALIZED mode always ignores open positions.

    Args:
        equity_curve_mode: Defaults to the configured mode
        open_position_handling: Defaults to the configured handling
    """

    def __init__(
        self,
        equity_curve_mode: EquityCurveMode | None = None,
        open_position_handling: OpenPositionHandling | None = None,
    ) -> None:
        mode, handling = resolve_equity_settings(equity_curve_mode, open_position_handling)
        self.equity_curve_mode = mode
        self.open_position_handling = effective_open_position_handling(mode, handling)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(equity_curve_mode={self.equity_curve_mode.value}, "
            f"open_position_handling={self.open_position_handling.value})"
        )
