from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional, Tuple

from ..core.errors import ConfigError

ZERO = Decimal("0")

DEFAULT_PER_PAGE = 4


@dataclass(frozen=True)
class MeterColumnSpec:
    meter_id: str            # "1", "2", "A" ... (label from the header name)
    prev_column_index: int   # 电表N上期读数
    curr_column_index: int   # 电表N本期读数


@dataclass(frozen=True)
class TableSchema:
    """Column positions resolved once from the header row."""

    shop_code: int
    merchant_name: int
    water_prev: int
    water_curr: int
    water_unit_price: int
    electricity_unit_price: int

    labor_fee: Optional[int] = None
    garbage_fee: Optional[int] = None
    late_fee: Optional[int] = None
    ad_fee: Optional[int] = None

    meters: Tuple[MeterColumnSpec, ...] = ()

    # header text per index, for error messages
    header: Tuple[str, ...] = ()

    def column_name(self, index: Optional[int]) -> str:
        if index is None or index >= len(self.header):
            return f"#{index}"
        return self.header[index]


@dataclass(frozen=True)
class ElectricityMeter:
    meter_id: str
    prev_reading: Decimal
    curr_reading: Decimal
    usage: Decimal = ZERO
    amount: Decimal = ZERO   # display share of electricity_amount, see fees.py


@dataclass(frozen=True)
class MerchantBill:
    row_number: int
    shop_code: str
    merchant_name: str

    water_prev: Decimal
    water_curr: Decimal
    water_unit_price: Decimal
    electricity_unit_price: Decimal

    electricity_meters: Tuple[ElectricityMeter, ...] = ()

    labor_fee: Decimal = ZERO      # 水电人工费
    garbage_fee: Decimal = ZERO    # 垃圾处理费
    late_fee: Decimal = ZERO       # 滞纳金
    ad_fee: Decimal = ZERO         # 广告费

    # derived (fees.compute_bill)
    water_usage: Decimal = ZERO
    water_amount: Decimal = ZERO
    electricity_usage: Decimal = ZERO
    electricity_amount: Decimal = ZERO
    total_fee: Decimal = ZERO
    computed: bool = False

    @property
    def other_fees(self) -> Decimal:
        return self.labor_fee + self.garbage_fee + self.late_fee + self.ad_fee


@dataclass(frozen=True)
class GenerateOptions:
    """
    Generation parameters coming from the upload form or the CLI.

    Defaults:
      - custom_title: "<yyyy>年<MM>月抄表计费通知单" of the generation date
      - per_page: 4 statements per page
      - meter_reader: empty
      - meter_date: "<yyyy>年<MM>月<DD>日" of the generation date
      - today: date.today() at generation time
    """

    custom_title: Optional[str] = None
    per_page: int = DEFAULT_PER_PAGE
    meter_reader: Optional[str] = None
    meter_date: Optional[str] = None
    today: Optional[date] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        validate_per_page(self.per_page)

    def generation_date(self) -> date:
        return self.today or date.today()


def validate_per_page(per_page: object) -> int:
    if isinstance(per_page, bool) or not isinstance(per_page, int):
        raise ConfigError(f"每页数量必须是正整数: {per_page!r}", option="per_page")
    if per_page <= 0:
        raise ConfigError(f"每页数量必须大于0: {per_page}", option="per_page")
    return per_page
