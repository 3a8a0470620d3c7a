from __future__ import annotations

import re
from datetime import date
from typing import Optional

_CN_DATE_RE = re.compile(r"^(\d{4})年(\d{1,2})月(\d{1,2})日$")
_ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")


def billing_month_label(d: date) -> str:
    """date(2025, 8, 16) -> "2025年08月" """
    return f"{d.year}年{d.month:02d}月"


def default_title(d: date) -> str:
    return f"{billing_month_label(d)}抄表计费通知单"


def cn_date(d: date) -> str:
    """date(2025, 8, 16) -> "2025年08月16日" """
    return f"{d.year}年{d.month:02d}月{d.day:02d}日"


def normalize_meter_date(raw: Optional[str]) -> Optional[str]:
    """
    Meter-reading date as typed by the user.

    "2025-8-16" is rewritten to "2025年08月16日"; a valid Chinese date is
    zero-padded; anything else is kept verbatim (free-form label).
    Empty -> None.
    """
    s = (raw or "").strip()
    if not s:
        return None
    for rx in (_ISO_DATE_RE, _CN_DATE_RE):
        m = rx.match(s)
        if m:
            yyyy, mm, dd = map(int, m.groups())
            try:
                return cn_date(date(yyyy, mm, dd))
            except ValueError:
                return s
    return s
