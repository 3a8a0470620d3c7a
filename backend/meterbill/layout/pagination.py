from __future__ import annotations

from typing import List, Optional, Sequence

from ..billing.models import validate_per_page
from .table import BillingDocument, ComposedStatement, Page, StatementTable


def paginate(statements: Sequence[ComposedStatement], per_page: int) -> List[Page]:
    """
    Split statements into pages of `per_page`, keeping input order.

    10 statements, per_page=4 -> pages of 4, 4, 2.
    Raises ConfigError for per_page <= 0.
    """
    validate_per_page(per_page)
    return [
        Page(number=n, statements=tuple(statements[start:start + per_page]))
        for n, start in enumerate(range(0, len(statements), per_page), start=1)
    ]


def build_document(
    statements: Sequence[ComposedStatement],
    per_page: int,
    *,
    summary: Optional[StatementTable] = None,
) -> BillingDocument:
    return BillingDocument(
        pages=tuple(paginate(statements, per_page)),
        per_page=per_page,
        summary=summary,
    )
