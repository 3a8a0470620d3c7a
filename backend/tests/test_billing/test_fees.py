"""
Tests for fee computation and rounding policy.
"""

from decimal import Decimal

import pytest

from meterbill.billing.fees import clamp_usage, compute_bill, compute_bills, prorate
from meterbill.billing.models import ElectricityMeter, MerchantBill
from meterbill.billing.records import parse_records
from meterbill.billing.schema import detect_schema
from meterbill.core.errors import ComputationError


def D(s: str) -> Decimal:
    return Decimal(s)


def make_bill(**kw) -> MerchantBill:
    base = dict(
        row_number=2,
        shop_code="A101",
        merchant_name="测试商户",
        water_prev=D("0"),
        water_curr=D("0"),
        water_unit_price=D("1.118"),
        electricity_unit_price=D("1.03"),
    )
    base.update(kw)
    return MerchantBill(**base)


def meter(mid: str, prev: str, curr: str) -> ElectricityMeter:
    return ElectricityMeter(meter_id=mid, prev_reading=D(prev), curr_reading=D(curr))


@pytest.fixture
def computed(header, sample_rows):
    return compute_bills(parse_records(sample_rows, detect_schema(header)))


class TestComputeBill:
    def test_water_rounds_to_whole_yuan(self):
        bill = compute_bill(make_bill(water_prev=D("50"), water_curr=D("58"), water_unit_price=D("1.1180")))
        assert bill.water_usage == D("8")
        assert bill.water_amount == D("9")

    def test_electricity_rounded_once_on_total(self):
        bill = compute_bill(
            make_bill(
                electricity_unit_price=D("1.0300"),
                electricity_meters=(meter("1", "1254", "2000"), meter("2", "300", "380")),
            )
        )
        assert [m.usage for m in bill.electricity_meters] == [D("746"), D("80")]
        assert bill.electricity_usage == D("826")
        # 826 * 1.03 = 850.78
        assert bill.electricity_amount == D("851")

    def test_rounding_is_half_up(self):
        # 5 * 0.5 = 2.5 -> 3 (banker's rounding would give 2)
        bill = compute_bill(
            make_bill(
                electricity_unit_price=D("0.5"),
                electricity_meters=(meter("1", "0", "5"),),
            )
        )
        assert bill.electricity_amount == D("3")

    def test_backwards_reading_is_clamped(self):
        bill = compute_bill(
            make_bill(
                water_prev=D("60"),
                water_curr=D("58"),
                electricity_meters=(meter("1", "100", "90"), meter("2", "0", "10")),
            )
        )
        assert bill.water_usage == 0
        assert bill.water_amount == 0
        assert bill.electricity_meters[0].usage == 0
        assert bill.electricity_usage == D("10")

    def test_no_meters_bills_no_electricity(self):
        bill = compute_bill(make_bill(labor_fee=D("20")))
        assert bill.electricity_usage == 0
        assert bill.electricity_amount == 0
        assert bill.total_fee == D("20.00")

    def test_input_is_not_mutated(self):
        raw = make_bill(water_prev=D("1"), water_curr=D("3"))
        out = compute_bill(raw)
        assert raw.computed is False and raw.water_usage == 0
        assert out.computed is True and out.water_usage == D("2")

    def test_total_is_sum_of_parts(self, computed):
        for b in computed:
            assert b.total_fee == b.water_amount + b.electricity_amount + b.other_fees

    def test_meter_shares_sum_to_electricity_amount(self, computed):
        first = computed[0]
        assert [m.amount for m in first.electricity_meters] == [D("768.58"), D("82.42")]
        assert sum(m.amount for m in first.electricity_meters) == first.electricity_amount

    def test_sample_totals(self, computed):
        first, second = computed
        assert (first.water_amount, first.electricity_amount, first.total_fee) == (D("9"), D("851"), D("905.50"))
        # 120 * 1.03 = 123.6
        assert (second.water_amount, second.electricity_amount, second.total_fee) == (D("9"), D("124"), D("133.00"))


class TestComputationErrors:
    def test_negative_unit_price(self):
        with pytest.raises(ComputationError) as ei:
            compute_bill(make_bill(water_unit_price=D("-1")))
        assert ei.value.field_name == "water_unit_price"
        assert ei.value.row == 2

    def test_non_finite_value(self):
        with pytest.raises(ComputationError) as ei:
            compute_bill(make_bill(electricity_meters=(meter("1", "0", "NaN"),)))
        assert ei.value.field_name == "meter_1_curr"

    def test_infinite_fee(self):
        with pytest.raises(ComputationError):
            compute_bill(make_bill(ad_fee=D("Infinity")))

    @pytest.mark.parametrize("field_name", ["labor_fee", "garbage_fee", "late_fee", "ad_fee"])
    def test_negative_fee(self, field_name):
        with pytest.raises(ComputationError) as ei:
            compute_bill(make_bill(**{field_name: D("-200")}))
        assert ei.value.field_name == field_name
        assert ei.value.to_dict()["code"] == "computation"

    @pytest.mark.parametrize("field_name", ["water_prev", "water_curr"])
    def test_negative_water_reading(self, field_name):
        with pytest.raises(ComputationError) as ei:
            compute_bill(make_bill(**{field_name: D("-1")}))
        assert ei.value.field_name == field_name

    def test_negative_meter_reading(self):
        # -100 -> 50 would otherwise bill 150 units
        with pytest.raises(ComputationError) as ei:
            compute_bill(make_bill(electricity_meters=(meter("2", "-100", "50"),)))
        assert ei.value.field_name == "meter_2_prev"

    def test_total_too_large(self):
        with pytest.raises(ComputationError) as ei:
            compute_bill(make_bill(labor_fee=D("10000000000000000")))
        assert ei.value.field_name == "total_fee"

    def test_negative_fee_row_rejected_in_batch(self, header, sample_rows):
        sample_rows[1][10] = "-200"
        with pytest.raises(ComputationError) as ei:
            compute_bills(parse_records(sample_rows, detect_schema(header)))
        assert ei.value.row == 3


class TestHelpers:
    @pytest.mark.parametrize(
        "prev, curr, expected",
        [("10", "25", "15"), ("25", "10", "0"), ("7", "7", "0")],
    )
    def test_clamp_usage(self, prev, curr, expected):
        assert clamp_usage(D(prev), D(curr)) == D(expected)

    def test_prorate_sums_to_total(self):
        shares = prorate(D("851"), [D("746"), D("80")])
        assert shares == [D("768.58"), D("82.42")]
        assert sum(shares) == D("851")

    def test_prorate_remainder_goes_to_last_metered(self):
        shares = prorate(D("10"), [D("1"), D("1"), D("1"), D("0")])
        assert shares[3] == 0
        assert shares[:2] == [D("3.33"), D("3.33")]
        assert shares[2] == D("3.34")

    def test_prorate_without_usage(self):
        assert prorate(D("0"), [D("0"), D("0")]) == [D("0"), D("0")]
