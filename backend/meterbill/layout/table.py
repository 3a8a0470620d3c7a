from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Tuple

from ..billing.models import MerchantBill

VMerge = Literal["restart", "continue"]


@dataclass(frozen=True)
class Cell:
    text: str = ""
    span: int = 1                    # horizontal grid span
    v_merge: Optional[VMerge] = None # vertical merge with the cells below/above
    center: bool = True
    bold: bool = False


@dataclass(frozen=True)
class TableRow:
    cells: Tuple[Cell, ...]

    @property
    def width(self) -> int:
        return sum(c.span for c in self.cells)

    def texts(self) -> Tuple[str, ...]:
        return tuple(c.text for c in self.cells)


@dataclass(frozen=True)
class StatementTable:
    """
    Serialization-independent table: rows of cells with spans, vertical
    merges and alignment. Renderers (DOCX, XLSX) only translate it.
    """

    rows: Tuple[TableRow, ...]
    column_widths: Tuple[float, ...]  # cm, one per grid column
    notes: Tuple[str, ...] = ()
    title: Optional[str] = None       # heading printed above the table (summary only)

    @property
    def column_count(self) -> int:
        return len(self.column_widths)


@dataclass(frozen=True)
class ComposedStatement:
    bill: MerchantBill
    table: StatementTable


@dataclass(frozen=True)
class Page:
    number: int                               # 1-based
    statements: Tuple[ComposedStatement, ...]


@dataclass(frozen=True)
class BillingDocument:
    """
    Pages of statements; renderers put a page break between pages (never
    after the last one) and a separator line between statements of a page.
    The summary table, when present, goes on its own final page.
    """

    pages: Tuple[Page, ...]
    per_page: int
    summary: Optional[StatementTable] = None

    @property
    def statements(self) -> Tuple[ComposedStatement, ...]:
        return tuple(s for p in self.pages for s in p.statements)

    @property
    def page_sizes(self) -> Tuple[int, ...]:
        return tuple(len(p.statements) for p in self.pages)


SEPARATOR = "=" * 40
