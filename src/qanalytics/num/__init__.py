"""Numeric backends for analytics values."""

from qanalytics.num.factory import DecimalNumFactory, FloatNumFactory, Num, NumFactory, as_num, factory_of

__all__ = [
    "Num",
    "NumFactory",
    "DecimalNumFactory",
    "FloatNumFactory",
    "factory_of",
    "as_num",
]
