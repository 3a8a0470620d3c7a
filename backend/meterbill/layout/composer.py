from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Sequence

from ..billing.models import ZERO, GenerateOptions, MerchantBill
from ..normalize.dates import cn_date, default_title
from ..normalize.numbers import format_money, format_price, format_quantity, format_yuan
from ..normalize.numerals import rmb_upper
from .table import Cell, StatementTable, TableRow

# ---------------------------------------------------------------------
# Statement grid: 7 columns, 金额 wider to fit "大写" text on the total row
# ---------------------------------------------------------------------

HEADER = ("项目", "上月表底", "本月抄表数", "实用度数", "公共分摊", "单价(元)", "金额")

COLUMN_WIDTHS_CM = (2.6, 2.2, 2.4, 2.2, 2.0, 2.0, 3.6)

COLUMNS = len(HEADER)

FEE_ROWS = (
    ("水电人工费", "labor_fee"),
    ("垃圾处理费", "garbage_fee"),
    ("滞纳金", "late_fee"),
    ("广告费", "ad_fee"),
)

NOTICE_LINES = (
    "1、此单可对账不做凭证；",
    "2、每月5日前为收费时间，超期按5%收滞纳金或停电；",
    "3、以上费用如有不明或差错，请到管理处核对。",
)

SUMMARY_TITLE = "费用汇总表"
SUMMARY_HEADER = ("店铺名称", "水电费合计（元）", "水电人工费", "垃圾处理费", "总价")
SUMMARY_COLUMN_WIDTHS_CM = (4.5, 3.2, 2.6, 2.6, 3.0)


def _row(*cells: Cell) -> TableRow:
    return TableRow(cells=tuple(cells))


def _texts(*texts: str, bold: bool = False) -> TableRow:
    return TableRow(cells=tuple(Cell(t, bold=bold) for t in texts))


def statement_title(options: GenerateOptions) -> str:
    if options.custom_title and options.custom_title.strip():
        return options.custom_title.strip()
    return default_title(options.generation_date())


def meter_date_label(options: GenerateOptions) -> str:
    if options.meter_date and options.meter_date.strip():
        return options.meter_date.strip()
    return cn_date(options.generation_date())


def _meter_rows(bill: MerchantBill) -> List[TableRow]:
    meters = bill.electricity_meters
    price = format_price(bill.electricity_unit_price)
    amount = format_yuan(bill.electricity_amount)

    if not meters:
        return [_texts("电表", "0", "0", "0", "", price, "0")]

    merged = len(meters) > 1
    rows: List[TableRow] = []
    for idx, m in enumerate(meters):
        label = f"电表{m.meter_id}" if merged else "电表"
        if not merged:
            price_cell, amount_cell = Cell(price), Cell(amount)
        elif idx == 0:
            # one price/amount block for all meters: the price is shared and
            # the amount is rounded on the total usage
            price_cell = Cell(price, v_merge="restart")
            amount_cell = Cell(amount, v_merge="restart")
        else:
            price_cell = Cell("", v_merge="continue")
            amount_cell = Cell("", v_merge="continue")

        rows.append(
            _row(
                Cell(label),
                Cell(format_quantity(m.prev_reading)),
                Cell(format_quantity(m.curr_reading)),
                Cell(format_quantity(m.usage)),
                Cell(""),
                price_cell,
                amount_cell,
            )
        )
    return rows


def compose_statement(bill: MerchantBill, options: GenerateOptions) -> StatementTable:
    """
    One merchant's 抄表计费通知单 as an abstract table.

    Row order: title, info, header, meters, water, the four fee rows (always
    present, even at zero), total.
    """
    if not bill.computed:
        raise ValueError(f"bill of row {bill.row_number} is not computed")

    rows: List[TableRow] = [
        _row(Cell(statement_title(options), span=COLUMNS, bold=True)),
        _texts(
            "编号",
            bill.shop_code,
            "姓名",
            bill.merchant_name,
            "抄表人",
            (options.meter_reader or "").strip(),
            f"抄表日期：{meter_date_label(options)}",
        ),
        _texts(*HEADER, bold=True),
    ]

    rows.extend(_meter_rows(bill))

    rows.append(
        _texts(
            "水费",
            format_quantity(bill.water_prev),
            format_quantity(bill.water_curr),
            format_quantity(bill.water_usage),
            "",
            format_price(bill.water_unit_price),
            format_yuan(bill.water_amount),
        )
    )

    for label, attr in FEE_ROWS:
        value: Decimal = getattr(bill, attr)
        rows.append(_texts(label, "", "", "", "", "", format_money(value)))

    total = bill.total_fee
    rows.append(
        _row(
            Cell("合计", bold=True),
            Cell(
                f"大写：{rmb_upper(total)}    小写：{format_money(total)}",
                span=COLUMNS - 1,
                bold=True,
            ),
        )
    )

    return StatementTable(
        rows=tuple(rows),
        column_widths=COLUMN_WIDTHS_CM,
        notes=NOTICE_LINES,
    )


def compose_summary(bills: Sequence[MerchantBill]) -> Optional[StatementTable]:
    """费用汇总表: one line per merchant plus a 合计 line. None for no bills."""
    if not bills:
        return None

    rows: List[TableRow] = [_texts(*SUMMARY_HEADER, bold=True)]

    sum_utilities = sum_labor = sum_garbage = grand_total = ZERO
    for b in bills:
        utilities = b.water_amount + b.electricity_amount
        rows.append(
            _texts(
                b.merchant_name,
                format_money(utilities),
                format_money(b.labor_fee),
                format_money(b.garbage_fee),
                format_money(b.total_fee),
            )
        )
        sum_utilities += utilities
        sum_labor += b.labor_fee
        sum_garbage += b.garbage_fee
        grand_total += b.total_fee

    rows.append(
        _texts(
            "合计",
            format_money(sum_utilities),
            format_money(sum_labor),
            format_money(sum_garbage),
            format_money(grand_total),
            bold=True,
        )
    )

    return StatementTable(
        rows=tuple(rows),
        column_widths=SUMMARY_COLUMN_WIDTHS_CM,
        title=SUMMARY_TITLE,
    )
