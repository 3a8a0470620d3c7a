"""
Normalization helpers: cell values to Decimal, money/quantity formatting,
Chinese capitalized amounts and date labels.
"""

from .numerals import rmb_upper
from .numbers import to_decimal

__all__ = [
    "rmb_upper",
    "to_decimal",
]
