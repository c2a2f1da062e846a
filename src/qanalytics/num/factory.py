"""
Numeric factories.

All analytics operate on an opaque numeric value produced by a NumFactory.
Values are plain Python numbers so arithmetic and comparisons use operators;
the factory supplies constants, conversion, the NaN sentinel and the few
transcendental operations the analytics need.

Design Principles:
- Decimal by default for financial calculations
- One factory per computation (never mix Decimal and float)
- Floats convert to Decimal through str() to avoid binary artefacts
"""

import math
from abc import ABC, abstractmethod
from decimal import Decimal, localcontext
from typing import Any

Num = Any
"""A numeric value created by a NumFactory (Decimal or float)."""


class NumFactory(ABC):
    """Interface for numeric backends."""

    @property
    @abstractmethod
    def zero(self) -> Num:
        pass

    @property
    @abstractmethod
    def one(self) -> Num:
        pass

    @property
    @abstractmethod
    def nan(self) -> Num:
        pass

    @property
    def two(self) -> Num:
        return self.num_of(2)

    @property
    def hundred(self) -> Num:
        return self.num_of(100)

    @property
    def minus_one(self) -> Num:
        return self.num_of(-1)

    @abstractmethod
    def num_of(self, value: Any) -> Num:
        """Convert int, float, str or Decimal into this factory's value type."""

    @abstractmethod
    def is_nan(self, value: Num) -> bool:
        pass

    @abstractmethod
    def log(self, value: Num) -> Num:
        """Natural logarithm."""

    @abstractmethod
    def sqrt(self, value: Num) -> Num:
        pass

    @abstractmethod
    def pow(self, base: Num, exponent: Num) -> Num:
        pass

    def produces(self, value: Any) -> bool:
        """Check whether a value has this factory's value type."""
        return isinstance(value, type(self.zero))


class DecimalNumFactory(NumFactory):
    """
    Decimal backend.

    Transcendental operations (log, sqrt, fractional powers) run in a local
    context with the configured precision. Plain arithmetic uses whatever
    context is active in the caller.

    Example:
        >>> factory = DecimalNumFactory()
        >>> factory.num_of(0.1)
        Decimal('0.1')
    """

    def __init__(self, precision: int = 32) -> None:
        if precision <= 0:
            raise ValueError(f"precision must be positive, got {precision}")
        self.precision = precision

    @property
    def zero(self) -> Decimal:
        return Decimal("0")

    @property
    def one(self) -> Decimal:
        return Decimal("1")

    @property
    def nan(self) -> Decimal:
        return Decimal("NaN")

    def num_of(self, value: Any) -> Decimal:
        if isinstance(value, Decimal):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Cannot convert bool to a number: {value!r}")
        if isinstance(value, (int, str)):
            return Decimal(value)
        if isinstance(value, float):
            if math.isnan(value):
                return self.nan
            return Decimal(str(value))
        raise ValueError(f"Cannot convert {type(value).__name__} to Decimal: {value!r}")

    def is_nan(self, value: Num) -> bool:
        return isinstance(value, Decimal) and value.is_nan()

    def log(self, value: Decimal) -> Decimal:
        with localcontext() as ctx:
            ctx.prec = self.precision
            return value.ln()

    def sqrt(self, value: Decimal) -> Decimal:
        with localcontext() as ctx:
            ctx.prec = self.precision
            return value.sqrt()

    def pow(self, base: Decimal, exponent: Decimal) -> Decimal:
        with localcontext() as ctx:
            ctx.prec = self.precision
            return base ** self.num_of(exponent)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, DecimalNumFactory) and other.precision == self.precision

    def __hash__(self) -> int:
        return hash((DecimalNumFactory, self.precision))

    def __repr__(self) -> str:
        return f"DecimalNumFactory(precision={self.precision})"


class FloatNumFactory(NumFactory):
    """Float backend for speed-sensitive analyses."""

    @property
    def zero(self) -> float:
        return 0.0

    @property
    def one(self) -> float:
        return 1.0

    @property
    def nan(self) -> float:
        return math.nan

    def num_of(self, value: Any) -> float:
        if isinstance(value, bool):
            raise ValueError(f"Cannot convert bool to a number: {value!r}")
        if isinstance(value, (int, float, str, Decimal)):
            return float(value)
        raise ValueError(f"Cannot convert {type(value).__name__} to float: {value!r}")

    def is_nan(self, value: Num) -> bool:
        return isinstance(value, float) and math.isnan(value)

    def log(self, value: float) -> float:
        return math.log(value)

    def sqrt(self, value: float) -> float:
        return math.sqrt(value)

    def pow(self, base: float, exponent: float) -> float:
        return base ** float(exponent)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, FloatNumFactory)

    def __hash__(self) -> int:
        return hash(FloatNumFactory)

    def __repr__(self) -> str:
        return "FloatNumFactory()"


_DEFAULT_DECIMAL = DecimalNumFactory()
_DEFAULT_FLOAT = FloatNumFactory()


def factory_of(value: Any) -> NumFactory:
    """
    Get the factory matching a value's type.

    Used by components that hold values but no factory (trades, positions)
    to produce constants of the same type. Plain ints are treated as Decimal.

    Raises:
        ValueError: If value is not a Decimal, float or int
    """
    if isinstance(value, float):
        return _DEFAULT_FLOAT
    if isinstance(value, (Decimal, int)) and not isinstance(value, bool):
        return _DEFAULT_DECIMAL
    raise ValueError(f"No numeric factory for {type(value).__name__}: {value!r}")


def as_num(value: Any, like: Any = None) -> Num:
    """
    Normalise a user-supplied number.

    Decimal and float pass through. An int becomes a float when `like` is a
    float, and a Decimal otherwise.

    Raises:
        ValueError: If value is not a Decimal, float or int
    """
    factory = factory_of(value)
    if not isinstance(value, int):
        return value
    if isinstance(like, float):
        factory = factory_of(like)
    return factory.num_of(value)
