from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterable, List, Optional, Sequence

from ..core.errors import FieldParseError
from ..normalize.numbers import is_blank, to_decimal
from .models import ZERO, ElectricityMeter, MerchantBill, TableSchema


def _cell(row: Sequence[Any], index: Optional[int]) -> Any:
    if index is None or index >= len(row):
        return None
    return row[index]


def _text(raw: Any) -> str:
    if raw is None:
        return ""
    # spreadsheet cells often turn "101" into 101.0
    if isinstance(raw, float) and raw.is_integer():
        return str(int(raw))
    return str(raw).strip()


def _number(row: Sequence[Any], index: Optional[int], schema: TableSchema, row_number: int, *, required: bool) -> Decimal:
    raw = _cell(row, index)
    try:
        value = to_decimal(raw)
    except ValueError:
        raise FieldParseError(row_number, schema.column_name(index), raw) from None
    if value is None:
        if required:
            raise FieldParseError(row_number, schema.column_name(index), raw, reason="不能为空")
        return ZERO
    return value


def is_empty_row(row: Sequence[Any], schema: TableSchema) -> bool:
    return is_blank(_cell(row, schema.merchant_name))


def parse_record(row: Sequence[Any], schema: TableSchema, *, row_number: int) -> MerchantBill:
    """
    Map one decoded row to a raw MerchantBill (no arithmetic).

    Water readings and unit prices are mandatory; fee columns default to 0.
    A meter with both readings blank or zero is not installed for this
    merchant and is left out.
    """
    def num(index: Optional[int], *, required: bool = False) -> Decimal:
        return _number(row, index, schema, row_number, required=required)

    meters: List[ElectricityMeter] = []
    for spec in schema.meters:
        prev = num(spec.prev_column_index)
        curr = num(spec.curr_column_index)
        if prev == 0 and curr == 0:
            continue
        meters.append(ElectricityMeter(meter_id=spec.meter_id, prev_reading=prev, curr_reading=curr))

    return MerchantBill(
        row_number=row_number,
        shop_code=_text(_cell(row, schema.shop_code)),
        merchant_name=_text(_cell(row, schema.merchant_name)),
        water_prev=num(schema.water_prev, required=True),
        water_curr=num(schema.water_curr, required=True),
        water_unit_price=num(schema.water_unit_price, required=True),
        electricity_unit_price=num(schema.electricity_unit_price, required=True),
        electricity_meters=tuple(meters),
        labor_fee=num(schema.labor_fee),
        garbage_fee=num(schema.garbage_fee),
        late_fee=num(schema.late_fee),
        ad_fee=num(schema.ad_fee),
    )


def parse_records(rows: Iterable[Sequence[Any]], schema: TableSchema, *, first_row_number: int = 2) -> List[MerchantBill]:
    """Parse all data rows; rows without a merchant name are skipped."""
    out: List[MerchantBill] = []
    for offset, row in enumerate(rows):
        if is_empty_row(row, schema):
            continue
        out.append(parse_record(row, schema, row_number=first_row_number + offset))
    return out
