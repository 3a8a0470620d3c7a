"""
Layout - abstract statement tables and pagination.

Nothing here knows about DOCX or XLSX; renderers translate the tables.
"""

from .composer import compose_statement, compose_summary
from .pagination import build_document, paginate
from .table import BillingDocument, Cell, ComposedStatement, Page, StatementTable, TableRow

__all__ = [
    "BillingDocument",
    "Cell",
    "ComposedStatement",
    "Page",
    "StatementTable",
    "TableRow",
    "build_document",
    "compose_statement",
    "compose_summary",
    "paginate",
]
