from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Union

from openpyxl import load_workbook

from ..core.errors import BillingError, UnsupportedFormatError

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".xlsx", ".csv")

# Excel "Save as CSV" on a Chinese Windows writes GBK
_CSV_ENCODINGS = ("utf-8-sig", "gb18030")


@dataclass
class DecodedTable:
    header: List[str]
    rows: List[List[Any]] = field(default_factory=list)
    source: str = ""
    first_row_number: int = 2   # 1-based sheet row of rows[0]


def _is_empty(row: List[Any]) -> bool:
    return all(v is None or (isinstance(v, str) and not v.strip()) for v in row)


def _split(raw_rows: List[List[Any]], source: str) -> DecodedTable:
    """First non-empty row is the header; data rows keep their sheet numbering."""
    header_idx = next((i for i, r in enumerate(raw_rows) if not _is_empty(r)), None)
    if header_idx is None:
        raise BillingError(
            code="empty_table",
            message=f"文件中缺少表头行: {source}",
            details={"source": source},
            stage="decode",
        )
    header = ["" if v is None else str(v).strip() for v in raw_rows[header_idx]]
    return DecodedTable(
        header=header,
        rows=raw_rows[header_idx + 1:],
        source=source,
        first_row_number=header_idx + 2,
    )


def _read_xlsx(data: bytes, source: str) -> DecodedTable:
    wb = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    try:
        ws = wb.worksheets[0]
        raw_rows = [list(r) for r in ws.iter_rows(values_only=True)]
    finally:
        wb.close()
    logger.debug("xlsx %s: %d raw rows", source, len(raw_rows))
    return _split(raw_rows, source)


def _decode_text(data: bytes, source: str) -> str:
    for enc in _CSV_ENCODINGS:
        try:
            return data.decode(enc)
        except UnicodeDecodeError:
            continue
    raise BillingError(
        code="decode",
        message=f"无法识别CSV文件编码: {source}",
        details={"source": source},
        stage="decode",
    )


def _read_csv(data: bytes, source: str) -> DecodedTable:
    text = _decode_text(data, source)
    raw_rows = [list(r) for r in csv.reader(io.StringIO(text))]
    logger.debug("csv %s: %d raw rows", source, len(raw_rows))
    return _split(raw_rows, source)


def read_table_bytes(data: bytes, filename: str) -> DecodedTable:
    """Decode an uploaded .xlsx / .csv into header + rows (first sheet only)."""
    suffix = Path(filename or "").suffix.lower()
    if suffix == ".xlsx":
        return _read_xlsx(data, filename)
    if suffix == ".csv":
        return _read_csv(data, filename)
    raise UnsupportedFormatError(filename)


def read_table(path: Union[str, Path]) -> DecodedTable:
    p = Path(path)
    if p.suffix.lower() not in SUPPORTED_SUFFIXES:
        raise UnsupportedFormatError(p.name)
    return read_table_bytes(p.read_bytes(), p.name)
