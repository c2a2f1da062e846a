"""Enumerations shared by equity builders, return series and criteria."""

from enum import Enum

from qanalytics.num import Num, NumFactory


class EquityCurveMode(str, Enum):
    """How open exposure is valued on the equity curve.

    MARK_TO_MARKET revalues positions on every bar at the close price.
    REALIZED holds the curve flat until a position exits.
    """

    MARK_TO_MARKET = "MARK_TO_MARKET"
    REALIZED = "REALIZED"


class OpenPositionHandling(str, Enum):
    """Whether positions still open at the analysis end contribute."""

    MARK_TO_MARKET = "MARK_TO_MARKET"
    IGNORE = "IGNORE"


class CashReturnPolicy(str, Enum):
    """What flat, uninvested bars earn when computing excess returns."""

    CASH_EARNS_RISK_FREE = "CASH_EARNS_RISK_FREE"
    CASH_EARNS_ZERO = "CASH_EARNS_ZERO"


class ReturnRepresentation(str, Enum):
    """
    Output format of a rate of return r.

    MULTIPLICATIVE: 1 + r (1.10 for +10%)
    DECIMAL: r (0.10)
    PERCENTAGE: 100 * r (10)
    LOG: ln(1 + r)
    """

    MULTIPLICATIVE = "MULTIPLICATIVE"
    DECIMAL = "DECIMAL"
    PERCENTAGE = "PERCENTAGE"
    LOG = "LOG"

    @classmethod
    def from_add_base(cls, add_base: bool) -> "ReturnRepresentation":
        return cls.MULTIPLICATIVE if add_base else cls.DECIMAL

    def from_rate_of_return(self, rate: Num, num_factory: NumFactory) -> Num:
        """Convert a decimal rate of return (0.10 = +10%) into this representation."""
        if num_factory.is_nan(rate):
            return rate
        if self is ReturnRepresentation.MULTIPLICATIVE:
            return rate + num_factory.one
        if self is ReturnRepresentation.PERCENTAGE:
            return rate * num_factory.hundred
        if self is ReturnRepresentation.LOG:
            return num_factory.log(rate + num_factory.one)
        return rate

    def from_total_return(self, total_return: Num, num_factory: NumFactory) -> Num:
        """Convert a multiplicative total return (1.10 = +10%) into this representation."""
        if num_factory.is_nan(total_return):
            return total_return
        return self.from_rate_of_return(total_return - num_factory.one, num_factory)


def effective_open_position_handling(
    equity_curve_mode: EquityCurveMode,
    open_position_handling: OpenPositionHandling,
) -> OpenPositionHandling:
    """Resolve handling actually applied: REALIZED always ignores open positions."""
    if equity_curve_mode is EquityCurveMode.REALIZED:
        return OpenPositionHandling.IGNORE
    return open_position_handling
