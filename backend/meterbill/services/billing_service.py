# backend/meterbill/services/billing_service.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional, Union

from ..billing.models import GenerateOptions
from ..core.errors import BillingError
from ..excel.renderer import render_xlsx
from ..layout.table import BillingDocument
from ..normalize.dates import billing_month_label
from ..pipeline.orchestrator import PipelineResult, build_billing_document
from ..pipeline.table_reader import DecodedTable, read_table, read_table_bytes
from ..word.renderer import render_docx

logger = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@dataclass(frozen=True)
class OutputFormat:
    suffix: str
    media_type: str
    render: Callable[[BillingDocument], bytes]


OUTPUT_FORMATS: Dict[str, OutputFormat] = {
    "docx": OutputFormat(".docx", DOCX_MEDIA_TYPE, render_docx),
    "xlsx": OutputFormat(".xlsx", XLSX_MEDIA_TYPE, render_xlsx),
}


@dataclass(frozen=True)
class GeneratedFile:
    filename: str
    media_type: str
    content: bytes
    merchant_count: int
    page_count: int


class BillingService:
    """
    Facade for the deterministic pipeline:
      - decode (.xlsx / .csv)
      - rows -> BillingDocument
      - BillingDocument -> .docx / .xlsx bytes

    Used by both the HTTP upload endpoint and the CLI.
    """

    def __init__(self, default_format: str = "docx") -> None:
        self._default_format = self._resolve_format(default_format)

    @staticmethod
    def _resolve_format(fmt: str) -> str:
        key = (fmt or "").strip().lower().lstrip(".")
        if key not in OUTPUT_FORMATS:
            raise BillingError(
                code="output_format",
                message=f"不支持的输出格式: {fmt}（可选: {', '.join(OUTPUT_FORMATS)}）",
                details={"output_format": fmt},
                stage="render",
            )
        return key

    def output_filename(self, options: GenerateOptions, fmt: str) -> str:
        month = billing_month_label(options.generation_date())
        return f"{month}抄表计费通知单{OUTPUT_FORMATS[fmt].suffix}"

    # -----------------------------
    # Pipeline: table -> document -> bytes
    # -----------------------------
    def build(self, table: DecodedTable, options: GenerateOptions) -> PipelineResult:
        return build_billing_document(table, options)

    def generate_from_table(
        self,
        table: DecodedTable,
        options: GenerateOptions,
        *,
        fmt: Optional[str] = None,
    ) -> GeneratedFile:
        key = self._resolve_format(fmt) if fmt else self._default_format
        result = self.build(table, options)
        content = OUTPUT_FORMATS[key].render(result.document)

        logger.info(
            "generated %s for %s: %d merchant(s), %d page(s), %d bytes",
            key,
            table.source or "<table>",
            len(result.bills),
            len(result.document.pages),
            len(content),
        )
        return GeneratedFile(
            filename=self.output_filename(options, key),
            media_type=OUTPUT_FORMATS[key].media_type,
            content=content,
            merchant_count=len(result.bills),
            page_count=len(result.document.pages),
        )

    def generate_from_bytes(
        self,
        data: bytes,
        filename: str,
        options: GenerateOptions,
        *,
        fmt: Optional[str] = None,
    ) -> GeneratedFile:
        logger.info("received file: %s (%d bytes)", filename, len(data))
        return self.generate_from_table(read_table_bytes(data, filename), options, fmt=fmt)

    def generate_from_path(
        self,
        path: Union[str, Path],
        options: GenerateOptions,
        *,
        fmt: Optional[str] = None,
    ) -> GeneratedFile:
        return self.generate_from_table(read_table(path), options, fmt=fmt)

    def write(self, generated: GeneratedFile, out_path: Path) -> Path:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_bytes(generated.content)
        return out_path
