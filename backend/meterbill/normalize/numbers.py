from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

# Plain decimal number, optionally signed, with thousands separators:
#  - "1,234.5", "1 234.5" (space / NBSP)
#  - "-12", "+0.865", ".5"
_NUMBER_RE = re.compile(
    r"^(?P<sign>[-+\u2212])?(?P<int>\d{1,3}(?:[, \u00A0]\d{3})+|\d*)(?P<dec>\.\d+)?$"
)

CENT = Decimal("0.01")
YUAN = Decimal("1")


def is_blank(raw: Any) -> bool:
    if raw is None:
        return True
    return isinstance(raw, str) and raw.strip() == ""


def to_decimal(raw: Any) -> Optional[Decimal]:
    """
    Normalize a decoded cell value to Decimal.

    Returns None for blank cells (None / empty / whitespace-only string).
    Raises ValueError when the value is not a number.

    Accepts:
      - int / Decimal as is
      - float through its shortest repr (0.1 -> Decimal("0.1"), not the binary expansion)
      - "1,234.50", " 826 ", "1 234", "-5"
    """
    if is_blank(raw):
        return None
    if isinstance(raw, bool):
        raise ValueError(f"boolean is not a number: {raw!r}")
    if isinstance(raw, Decimal):
        return raw
    if isinstance(raw, int):
        return Decimal(raw)
    if isinstance(raw, float):
        return Decimal(repr(raw))

    s = str(raw).strip()
    m = _NUMBER_RE.match(s)
    if not m or not (m.group("int") or m.group("dec")):
        raise ValueError(f"number token not found: {raw!r}")

    sign = "-" if m.group("sign") in ("-", "\u2212") else ""
    int_part = re.sub(r"[, \u00A0]", "", m.group("int")) or "0"
    dec_part = m.group("dec") or ""

    try:
        return Decimal(f"{sign}{int_part}{dec_part}")
    except InvalidOperation as e:
        raise ValueError(f"invalid number token: {raw!r}") from e


def round_yuan(value: Decimal) -> Decimal:
    """Round half away from zero to a whole yuan."""
    return value.quantize(YUAN, rounding=ROUND_HALF_UP)


def round_cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_quantity(value: Decimal) -> str:
    """
    Meter readings and usages: "1234" for integral values, trimmed decimals otherwise.
    """
    if value == value.to_integral_value():
        return f"{value.quantize(YUAN):f}"
    return f"{value.normalize():f}"


def format_price(value: Decimal) -> str:
    """
    Unit prices: at least two decimals, trailing zeros trimmed beyond that.

      1.0300 -> "1.03", 1.1180 -> "1.118", 2 -> "2.00"
    """
    text = f"{value.normalize():f}"
    if "." not in text:
        return f"{text}.00"
    int_part, frac = text.split(".")
    return f"{int_part}.{frac.ljust(2, '0')}"


def format_money(value: Decimal) -> str:
    return f"{round_cents(value):.2f}"


def format_yuan(value: Decimal) -> str:
    return f"{round_yuan(value):.0f}"
