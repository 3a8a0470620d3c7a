from __future__ import annotations

import io
from typing import Dict, List, Tuple

from docx import Document
from docx.enum.table import WD_ALIGN_VERTICAL
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Cm, Pt
from docx.table import Table

from ..layout.table import SEPARATOR, BillingDocument, StatementTable

FONT_FAMILY = "SimSun"
EAST_ASIA_FONT_FAMILY = "宋体"
TITLE_SIZE_PT = 14
BODY_SIZE_PT = 10.5
NOTE_SIZE_PT = 9
TABLE_STYLE = "Table Grid"


def _apply_style_font(document: Document, style_name: str, size_pt: float) -> None:
    try:
        style = document.styles[style_name]
    except KeyError:
        return

    font = style.font
    font.name = FONT_FAMILY
    font.size = Pt(size_pt)

    r_pr = style._element.get_or_add_rPr()
    r_fonts = r_pr.rFonts
    if r_fonts is None:
        r_fonts = OxmlElement("w:rFonts")
        r_pr.append(r_fonts)

    r_fonts.set(qn("w:ascii"), FONT_FAMILY)
    r_fonts.set(qn("w:hAnsi"), FONT_FAMILY)
    r_fonts.set(qn("w:cs"), FONT_FAMILY)
    r_fonts.set(qn("w:eastAsia"), EAST_ASIA_FONT_FAMILY)


def configure_document_styles(document: Document) -> None:
    _apply_style_font(document, "Normal", BODY_SIZE_PT)


def _add_text_paragraph(document: Document, text: str, *, size_pt: float, bold: bool = False, center: bool = False) -> None:
    paragraph = document.add_paragraph()
    run = paragraph.add_run(text)
    run.bold = bold
    run.font.size = Pt(size_pt)
    if center:
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER


def _write_cell(table: Table, row: int, col: int, text: str, *, bold: bool, center: bool, size_pt: float) -> None:
    cell = table.cell(row, col)
    paragraph = cell.paragraphs[0]
    run = paragraph.add_run(text)
    run.bold = bold
    run.font.size = Pt(size_pt)
    paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER if center else WD_ALIGN_PARAGRAPH.LEFT
    cell.vertical_alignment = WD_ALIGN_VERTICAL.CENTER


def add_statement_table(document: Document, layout: StatementTable) -> Table:
    """
    Translate an abstract table into a python-docx table.

    Horizontal spans are merged per row; vertical restart/continue groups are
    merged per column once all rows are written.
    """
    if layout.title:
        _add_text_paragraph(document, layout.title, size_pt=TITLE_SIZE_PT, bold=True, center=True)

    table = document.add_table(rows=len(layout.rows), cols=layout.column_count)
    table.style = TABLE_STYLE
    table.autofit = False

    open_groups: Dict[int, List[int]] = {}
    v_ranges: List[Tuple[int, int, int]] = []

    def close(col: int) -> None:
        group = open_groups.pop(col, None)
        if group and group[1] > group[0]:
            v_ranges.append((col, group[0], group[1]))

    h_ranges: List[Tuple[int, int, int]] = []
    for r, row in enumerate(layout.rows):
        c = 0
        for cell in row.cells:
            if cell.v_merge == "continue" and c in open_groups:
                open_groups[c][1] = r
            else:
                close(c)
                if cell.v_merge == "restart":
                    open_groups[c] = [r, r]
                full_width = cell.span == layout.column_count
                _write_cell(
                    table,
                    r,
                    c,
                    cell.text,
                    bold=cell.bold,
                    center=cell.center,
                    size_pt=TITLE_SIZE_PT if full_width else BODY_SIZE_PT,
                )
                if cell.span > 1:
                    h_ranges.append((r, c, c + cell.span - 1))
            c += cell.span

    for col in list(open_groups):
        close(col)

    # widths before merging: a merged cell takes the sum of its columns
    for col, width_cm in enumerate(layout.column_widths):
        for column_cell in table.columns[col].cells:
            column_cell.width = Cm(width_cm)

    for r, first, last in h_ranges:
        table.cell(r, first).merge(table.cell(r, last))
    for col, first, last in v_ranges:
        table.cell(first, col).merge(table.cell(last, col))

    for note in layout.notes:
        _add_text_paragraph(document, note, size_pt=NOTE_SIZE_PT)

    return table


def render_docx(billing_doc: BillingDocument) -> bytes:
    """
    BillingDocument -> .docx bytes.

    Statements of one page are separated by a "=====" line; pages are
    separated by page breaks (none after the last page). The summary table
    starts on a new page.
    """
    document = Document()
    configure_document_styles(document)

    pages = billing_doc.pages
    for page_idx, page in enumerate(pages):
        for st_idx, statement in enumerate(page.statements):
            if st_idx > 0:
                document.add_paragraph(SEPARATOR)
            add_statement_table(document, statement.table)
        if page_idx < len(pages) - 1:
            document.add_page_break()

    if billing_doc.summary is not None:
        if pages:
            document.add_page_break()
        add_statement_table(document, billing_doc.summary)

    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()
