from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from typing import List, Tuple

from ..core.errors import ComputationError
from ..normalize.numbers import round_cents, round_yuan
from ..normalize.numerals import MAX_AMOUNT
from .models import ZERO, ElectricityMeter, MerchantBill


def _check_finite(bill: MerchantBill) -> None:
    fields: List[Tuple[str, Decimal]] = [
        ("water_prev", bill.water_prev),
        ("water_curr", bill.water_curr),
        ("water_unit_price", bill.water_unit_price),
        ("electricity_unit_price", bill.electricity_unit_price),
        ("labor_fee", bill.labor_fee),
        ("garbage_fee", bill.garbage_fee),
        ("late_fee", bill.late_fee),
        ("ad_fee", bill.ad_fee),
    ]
    for m in bill.electricity_meters:
        fields.append((f"meter_{m.meter_id}_prev", m.prev_reading))
        fields.append((f"meter_{m.meter_id}_curr", m.curr_reading))

    for name, value in fields:
        if not value.is_finite():
            raise ComputationError(
                f"第{bill.row_number}行 {bill.merchant_name}: {name} 不是有限数值 ({value})",
                row=bill.row_number,
                field_name=name,
            )


def _check_non_negative(bill: MerchantBill) -> None:
    """Readings, unit prices and fees are all >= 0; credits are not billed here."""
    fields: List[Tuple[str, str, Decimal]] = [
        ("water_prev", "水表读数", bill.water_prev),
        ("water_curr", "水表读数", bill.water_curr),
        ("water_unit_price", "单价", bill.water_unit_price),
        ("electricity_unit_price", "单价", bill.electricity_unit_price),
        ("labor_fee", "费用", bill.labor_fee),
        ("garbage_fee", "费用", bill.garbage_fee),
        ("late_fee", "费用", bill.late_fee),
        ("ad_fee", "费用", bill.ad_fee),
    ]
    for m in bill.electricity_meters:
        fields.append((f"meter_{m.meter_id}_prev", "电表读数", m.prev_reading))
        fields.append((f"meter_{m.meter_id}_curr", "电表读数", m.curr_reading))

    for name, label, value in fields:
        if value < 0:
            raise ComputationError(
                f"第{bill.row_number}行 {bill.merchant_name}: {label}不能为负数 ({name}={value})",
                row=bill.row_number,
                field_name=name,
            )


def _check_total(bill: MerchantBill, total_fee: Decimal) -> None:
    if total_fee >= MAX_AMOUNT:
        raise ComputationError(
            f"第{bill.row_number}行 {bill.merchant_name}: 合计金额过大 ({total_fee})",
            row=bill.row_number,
            field_name="total_fee",
        )


def clamp_usage(prev: Decimal, curr: Decimal) -> Decimal:
    """Meter replaced / misread: a backwards reading bills nothing."""
    usage = curr - prev
    return usage if usage > 0 else ZERO


def prorate(total: Decimal, usages: List[Decimal]) -> List[Decimal]:
    """
    Split a rounded total over meters by usage share, in cents.

    The last meter with usage takes the remainder, so the shares always add
    up to `total` exactly.
    """
    shares = [ZERO for _ in usages]
    usage_sum = sum(usages, ZERO)
    if usage_sum == 0:
        return shares

    last = max(i for i, u in enumerate(usages) if u > 0)
    allocated = ZERO
    for i, u in enumerate(usages):
        if i == last:
            shares[i] = total - allocated
            break
        shares[i] = round_cents(total * u / usage_sum)
        allocated += shares[i]
    return shares


def compute_bill(bill: MerchantBill) -> MerchantBill:
    """
    Fill in usages and amounts. Pure: returns a new bill.

    Rounding policy:
      - water: usage rounded to a whole unit, amount rounded to a whole yuan
      - electricity: usage summed over all meters, multiplied by the shared
        unit price and rounded to a whole yuan ONCE (never per meter)
      - other fees: cents
    Half-way values round away from zero.

    Raises ComputationError for non-finite or negative inputs and for a
    total too large to be written out in capitalized form.
    """
    _check_finite(bill)
    _check_non_negative(bill)

    water_usage = round_yuan(clamp_usage(bill.water_prev, bill.water_curr))
    water_amount = round_yuan(water_usage * bill.water_unit_price)

    usages = [clamp_usage(m.prev_reading, m.curr_reading) for m in bill.electricity_meters]
    electricity_usage = sum(usages, ZERO)
    electricity_amount = round_yuan(electricity_usage * bill.electricity_unit_price)

    shares = prorate(electricity_amount, usages)
    meters = tuple(
        ElectricityMeter(
            meter_id=m.meter_id,
            prev_reading=m.prev_reading,
            curr_reading=m.curr_reading,
            usage=u,
            amount=s,
        )
        for m, u, s in zip(bill.electricity_meters, usages, shares)
    )

    labor_fee = round_cents(bill.labor_fee)
    garbage_fee = round_cents(bill.garbage_fee)
    late_fee = round_cents(bill.late_fee)
    ad_fee = round_cents(bill.ad_fee)

    total_fee = round_cents(
        water_amount + electricity_amount + labor_fee + garbage_fee + late_fee + ad_fee
    )
    _check_total(bill, total_fee)

    return replace(
        bill,
        electricity_meters=meters,
        labor_fee=labor_fee,
        garbage_fee=garbage_fee,
        late_fee=late_fee,
        ad_fee=ad_fee,
        water_usage=water_usage,
        water_amount=water_amount,
        electricity_usage=electricity_usage,
        electricity_amount=electricity_amount,
        total_fee=total_fee,
        computed=True,
    )


def compute_bills(bills: List[MerchantBill]) -> List[MerchantBill]:
    return [compute_bill(b) for b in bills]
