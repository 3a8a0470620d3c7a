from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from ..billing.fees import compute_bill
from ..billing.models import GenerateOptions, MerchantBill
from ..billing.records import parse_records
from ..billing.schema import detect_schema
from ..layout.composer import compose_statement, compose_summary
from ..layout.pagination import build_document
from ..layout.table import BillingDocument, ComposedStatement
from .table_reader import DecodedTable, read_table, read_table_bytes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    bills: List[MerchantBill]
    document: BillingDocument


def build_billing_document(table: DecodedTable, options: Optional[GenerateOptions] = None) -> PipelineResult:
    """
    Decoded rows -> BillingDocument.

      header -> schema (once)
      row -> MerchantBill -> computed MerchantBill -> StatementTable (per row)
      statements -> pages (+ summary table)

    Fail-fast: any BillingError aborts the whole document.
    """
    options = options or GenerateOptions()

    schema = detect_schema(table.header)
    raw_bills = parse_records(table.rows, schema, first_row_number=table.first_row_number)
    bills = [compute_bill(b) for b in raw_bills]

    statements = [ComposedStatement(bill=b, table=compose_statement(b, options)) for b in bills]
    document = build_document(statements, options.per_page, summary=compose_summary(bills))

    logger.info(
        "%s: %d merchant(s), %d page(s) of up to %d",
        table.source or "<table>",
        len(bills),
        len(document.pages),
        options.per_page,
    )
    return PipelineResult(bills=bills, document=document)


class PipelineOrchestrator:
    """
    Thin wrapper around the pipeline functions: file -> decoded table -> document.
    """

    def __init__(self, options: Optional[GenerateOptions] = None) -> None:
        self.options = options or GenerateOptions()

    def process_table(self, table: DecodedTable) -> PipelineResult:
        return build_billing_document(table, self.options)

    def process_file(self, path: Union[str, Path]) -> PipelineResult:
        return self.process_table(read_table(path))

    def process_bytes(self, data: bytes, filename: str) -> PipelineResult:
        return self.process_table(read_table_bytes(data, filename))
