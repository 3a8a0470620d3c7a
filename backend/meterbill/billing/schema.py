from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..core.errors import SchemaError
from .models import MeterColumnSpec, TableSchema

logger = logging.getLogger(__name__)

# field -> header keyword (matched as substring of the stripped header text)
MANDATORY_COLUMNS: Dict[str, str] = {
    "shop_code": "铺面编号",
    "merchant_name": "店铺名称",
    "water_prev": "上期水表读数",
    "water_curr": "本期水表读数",
    "water_unit_price": "水费单价",
    "electricity_unit_price": "电费单价",
}

OPTIONAL_COLUMNS: Dict[str, str] = {
    "labor_fee": "水电人工费",
    "garbage_fee": "垃圾处理费",
    "late_fee": "滞纳金",
    "ad_fee": "广告费",
}

_METER_RE = re.compile(r"电表\s*(?P<label>.+?)\s*(?P<side>上期|本期)读数")


def _header_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _find_column(headers: Sequence[str], keyword: str) -> Optional[int]:
    for idx, h in enumerate(headers):
        if keyword in h:
            return idx
    return None


def _label_sort_key(label: str) -> Tuple[int, int, str]:
    """Numeric labels first (by value), then the rest lexically."""
    if label.isdigit():
        return (0, int(label), label)
    return (1, 0, label)


def find_meter_columns(headers: Sequence[str]) -> List[MeterColumnSpec]:
    """
    All complete "电表N上期读数" / "电表N本期读数" pairs.

    A label that has only one side of the pair is dropped: the merchant table
    simply has no such meter.
    """
    prev: Dict[str, int] = {}
    curr: Dict[str, int] = {}
    for idx, h in enumerate(headers):
        m = _METER_RE.search(h)
        if not m:
            continue
        label = m.group("label")
        side = prev if m.group("side") == "上期" else curr
        side.setdefault(label, idx)

    specs: List[MeterColumnSpec] = []
    for label in sorted(set(prev) | set(curr), key=_label_sort_key):
        if label not in prev or label not in curr:
            logger.debug("meter %r has an incomplete column pair, skipped", label)
            continue
        specs.append(
            MeterColumnSpec(
                meter_id=label,
                prev_column_index=prev[label],
                curr_column_index=curr[label],
            )
        )
    return specs


def detect_schema(header: Sequence[Any]) -> TableSchema:
    """
    Build the immutable table schema from the header row.

    Raises SchemaError when any of the mandatory columns is missing.
    """
    headers = [_header_text(h) for h in header]

    fixed: Dict[str, Optional[int]] = {}
    missing: List[str] = []
    for name, keyword in MANDATORY_COLUMNS.items():
        idx = _find_column(headers, keyword)
        if idx is None:
            missing.append(keyword)
        fixed[name] = idx
    if missing:
        raise SchemaError(missing)

    for name, keyword in OPTIONAL_COLUMNS.items():
        fixed[name] = _find_column(headers, keyword)

    meters = find_meter_columns(headers)
    logger.info(
        "detected %d electricity meter(s): %s",
        len(meters),
        ", ".join(m.meter_id for m in meters) or "-",
    )

    return TableSchema(
        meters=tuple(meters),
        header=tuple(headers),
        **fixed,  # type: ignore[arg-type]
    )
