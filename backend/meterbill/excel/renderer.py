from __future__ import annotations

import io
from typing import Dict, List, Tuple

from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.page import PageMargins
from openpyxl.worksheet.pagebreak import Break
from openpyxl.worksheet.worksheet import Worksheet

from ..layout.table import SEPARATOR, BillingDocument, StatementTable
from .style_apply import apply_column_widths, apply_row_heights, apply_thin_grid, set_cell
from .styles import (
    BODY_SIZE,
    COLUMN_WIDTHS,
    FILL_HEADER,
    FILL_TOTAL,
    NOTE_SIZE,
    ROW_HEIGHT,
    SUMMARY_COLUMN_WIDTHS,
    TITLE_ROW_HEIGHT,
    TITLE_SIZE,
)

SHEET_TITLE = "通知单"
SUMMARY_SHEET_TITLE = "费用汇总表"


# =============================================================================
# Print setup helpers
# =============================================================================

def _apply_print_setup(ws: Worksheet, last_col: int) -> None:
    """
    A4 portrait, one page wide, unlimited height, narrow margins.
    Explicit row breaks (between pages of statements) are kept.
    """
    last_row = ws.max_row or 1
    ws.print_area = f"A1:{get_column_letter(last_col)}{last_row}"

    ws.page_setup.orientation = "portrait"
    ws.page_setup.paperSize = ws.PAPERSIZE_A4
    ws.page_setup.fitToPage = True
    ws.page_setup.fitToWidth = 1
    ws.page_setup.fitToHeight = 0

    m = 0.4
    ws.page_margins = PageMargins(left=m, right=m, top=m, bottom=m, header=0.2, footer=0.2)


# =============================================================================
# Table rendering
# =============================================================================

def render_table(ws: Worksheet, table: StatementTable, *, start_row: int) -> int:
    """
    Write one abstract table starting at `start_row`.

    Horizontal spans and vertical restart/continue groups become merged
    ranges. Returns the first row after the table (notes included).
    """
    row_no = start_row
    heights: Dict[int, float] = {}

    if table.title:
        set_cell(ws, row_no, 1, table.title, bold=True, size=TITLE_SIZE)
        ws.merge_cells(start_row=row_no, start_column=1, end_row=row_no, end_column=table.column_count)
        heights[row_no] = TITLE_ROW_HEIGHT
        row_no += 1

    table_top = row_no
    open_groups: Dict[int, List[int]] = {}   # column -> [first_row, last_row]
    v_ranges: List[Tuple[int, int, int]] = []

    def close(col: int) -> None:
        group = open_groups.pop(col, None)
        if group and group[1] > group[0]:
            v_ranges.append((col, group[0], group[1]))

    last_index = len(table.rows) - 1
    for index, row in enumerate(table.rows):
        col = 1
        for cell in row.cells:
            if cell.v_merge == "continue" and col in open_groups:
                open_groups[col][1] = row_no
            else:
                close(col)
                if cell.v_merge == "restart":
                    open_groups[col] = [row_no, row_no]

                full_width = cell.span == table.column_count
                fill = None
                if cell.bold and not full_width:
                    fill = FILL_TOTAL if index == last_index else FILL_HEADER
                set_cell(
                    ws,
                    row_no,
                    col,
                    cell.text,
                    bold=cell.bold,
                    size=TITLE_SIZE if full_width else BODY_SIZE,
                    h="center" if cell.center else "left",
                    fill=fill,
                    wrap=True,
                )
                if cell.span > 1:
                    ws.merge_cells(
                        start_row=row_no,
                        start_column=col,
                        end_row=row_no,
                        end_column=col + cell.span - 1,
                    )
                if full_width:
                    heights[row_no] = TITLE_ROW_HEIGHT
            col += cell.span
        heights.setdefault(row_no, ROW_HEIGHT)
        row_no += 1

    for col in list(open_groups):
        close(col)
    for col, first, last in v_ranges:
        ws.merge_cells(start_row=first, start_column=col, end_row=last, end_column=col)

    apply_thin_grid(ws, table_top, 1, row_no - 1, table.column_count)

    for note in table.notes:
        set_cell(ws, row_no, 1, note, size=NOTE_SIZE, h="left")
        ws.merge_cells(start_row=row_no, start_column=1, end_row=row_no, end_column=table.column_count)
        row_no += 1

    apply_row_heights(ws, heights)
    return row_no


# =============================================================================
# Public API
# =============================================================================

def render_statements_sheet(ws: Worksheet, document: BillingDocument) -> None:
    """
    All statements on one sheet: a separator row between statements of a
    page, a manual row break between pages (none after the last page).
    """
    apply_column_widths(ws, COLUMN_WIDTHS)
    last_col = len(COLUMN_WIDTHS)

    cursor = 1
    for page_idx, page in enumerate(document.pages):
        for st_idx, statement in enumerate(page.statements):
            if st_idx > 0:
                set_cell(ws, cursor, 1, SEPARATOR, h="left")
                ws.merge_cells(start_row=cursor, start_column=1, end_row=cursor, end_column=last_col)
                cursor += 1
            cursor = render_table(ws, statement.table, start_row=cursor)
            cursor += 1  # blank line after notes

        if page_idx < len(document.pages) - 1:
            ws.row_breaks.append(Break(id=cursor - 1))

    _apply_print_setup(ws, last_col)


def render_summary_sheet(ws: Worksheet, summary: StatementTable) -> None:
    apply_column_widths(ws, SUMMARY_COLUMN_WIDTHS)
    render_table(ws, summary, start_row=1)
    _apply_print_setup(ws, summary.column_count)


def render_xlsx(document: BillingDocument) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    render_statements_sheet(ws, document)

    if document.summary is not None:
        render_summary_sheet(wb.create_sheet(SUMMARY_SHEET_TITLE), document.summary)

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()
