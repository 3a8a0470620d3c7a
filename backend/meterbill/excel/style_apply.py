from __future__ import annotations

from typing import Any, Optional

from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.worksheet.worksheet import Worksheet

from .styles import BODY_SIZE, FONT_NAME, THIN

EMPTY_DIAG = Side(style=None, color=None)


# ---------------------------------------------------------------------
# Layout helpers
# ---------------------------------------------------------------------

def apply_column_widths(ws: Worksheet, widths: dict[str, float]) -> None:
    for col, w in widths.items():
        ws.column_dimensions[col].width = w


def apply_row_heights(ws: Worksheet, heights: dict[int, float]) -> None:
    for r, h in heights.items():
        ws.row_dimensions[r].height = h


# ---------------------------------------------------------------------
# Cell setter (single point of styling)
# ---------------------------------------------------------------------

def set_cell(
    ws: Worksheet,
    row: int,
    column: int,
    value: Any,
    *,
    bold: bool = False,
    size: int = BODY_SIZE,
    h: str = "center",
    v: str = "center",
    fill: Optional[PatternFill] = None,
    wrap: Optional[bool] = None,
) -> None:
    cell = ws.cell(row=row, column=column)
    cell.value = value
    cell.alignment = Alignment(horizontal=h, vertical=v, wrap_text=wrap)
    cell.font = Font(name=FONT_NAME, size=size, bold=bold)
    if fill is not None:
        cell.fill = fill


# ---------------------------------------------------------------------
# Borders
# ---------------------------------------------------------------------

def apply_thin_grid(ws: Worksheet, min_row: int, min_col: int, max_row: int, max_col: int) -> None:
    border = Border(left=THIN, right=THIN, top=THIN, bottom=THIN, diagonal=EMPTY_DIAG)

    for r in range(min_row, max_row + 1):
        for c in range(min_col, max_col + 1):
            ws.cell(r, c).border = border
