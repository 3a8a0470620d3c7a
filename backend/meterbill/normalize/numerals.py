from __future__ import annotations

from decimal import Decimal
from typing import Union

from .numbers import round_cents, to_decimal

DIGITS = "零壹贰叁肆伍陆柒捌玖"
# positions inside a four-digit group, from the lowest
_SECTION_UNITS = ("", "拾", "佰", "仟")
# four-digit group markers, from the lowest
_GROUP_UNITS = ("", "万", "亿", "万亿")

MAX_AMOUNT = Decimal(10) ** (4 * len(_GROUP_UNITS))

ZERO_AMOUNT = "零元整"


def _section(value: int) -> str:
    """0 < value < 10000 -> e.g. 1005 -> 壹仟零伍."""
    out = []
    pending_zero = False
    for pos in range(3, -1, -1):
        d = value // 10 ** pos % 10
        if d == 0:
            if out:
                pending_zero = True
            continue
        if pending_zero:
            out.append("零")
            pending_zero = False
        out.append(DIGITS[d] + _SECTION_UNITS[pos])
    return "".join(out)


def _integer_words(value: int) -> str:
    groups = []
    while value:
        groups.append(value % 10000)
        value //= 10000

    out = []
    pending_zero = False
    for idx in range(len(groups) - 1, -1, -1):
        g = groups[idx]
        if g == 0:
            pending_zero = bool(out)
            continue
        # a gap inside the number: 壹万零伍, 壹拾万零壹佰
        if out and (pending_zero or g < 1000):
            out.append("零")
        out.append(_section(g) + _GROUP_UNITS[idx])
        pending_zero = False
    return "".join(out)


def rmb_upper(amount: Union[Decimal, int, str]) -> str:
    """
    Chinese capitalized RMB amount, yuan to fen.

      0        -> 零元整
      100      -> 壹佰元整
      123.45   -> 壹佰贰拾叁元肆角伍分
      0.05     -> 伍分
      1.05     -> 壹元零伍分
      100100   -> 壹拾万零壹佰元整

    The amount is rounded half-up to cents first.
    """
    value = to_decimal(amount)
    if value is None or not value.is_finite():
        raise ValueError(f"amount must be a finite number: {amount!r}")
    value = round_cents(value)
    if value < 0:
        raise ValueError(f"amount must be non-negative: {amount!r}")
    if value >= MAX_AMOUNT:
        raise ValueError(f"amount too large: {amount!r}")

    cents = int(value * 100)
    yuan, rest = divmod(cents, 100)
    jiao, fen = divmod(rest, 10)

    if cents == 0:
        return ZERO_AMOUNT

    out = ""
    if yuan:
        out = _integer_words(yuan) + "元"

    if jiao == 0 and fen == 0:
        return out + "整"

    if jiao:
        out += DIGITS[jiao] + "角"
    elif yuan:
        out += "零"
    if fen:
        out += DIGITS[fen] + "分"
    return out
