from __future__ import annotations

from openpyxl.styles import PatternFill, Side

# ---------------------------------------------------------------------
# Base typography
# ---------------------------------------------------------------------

FONT_NAME = "宋体"

TITLE_SIZE = 14
BODY_SIZE = 11
NOTE_SIZE = 9

# ---------------------------------------------------------------------
# Column widths (characters): 项目 .. 金额, 金额 wide enough for 大写 text
# ---------------------------------------------------------------------

COLUMN_WIDTHS = {
    "A": 13.0,
    "B": 11.0,
    "C": 12.0,
    "D": 11.0,
    "E": 10.0,
    "F": 10.0,
    "G": 18.0,
}

SUMMARY_COLUMN_WIDTHS = {
    "A": 24.0,
    "B": 18.0,
    "C": 13.0,
    "D": 13.0,
    "E": 15.0,
}

TITLE_ROW_HEIGHT = 24.0
ROW_HEIGHT = 18.0

# ---------------------------------------------------------------------
# Fills (ARGB)
# ---------------------------------------------------------------------

FILL_HEADER = PatternFill("solid", fgColor="FFD9D9D9")
FILL_TOTAL = PatternFill("solid", fgColor="FFFFF2CC")

# ---------------------------------------------------------------------
# Borders
# ---------------------------------------------------------------------

THIN = Side(style="thin", color="FF000000")
