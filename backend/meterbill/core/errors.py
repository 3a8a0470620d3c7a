from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class BillingError(Exception):
    """
    An error that is safe and useful to show directly in UI.

    Every failure of the billing pipeline is one of these: the whole document
    is rejected rather than rendered with a partially wrong statement.
    """
    code: str
    message: str
    details: Optional[dict[str, Any]] = None
    stage: Optional[str] = None

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.stage:
            out["stage"] = self.stage
        if self.details:
            out["details"] = self.details
        return out


class SchemaError(BillingError):
    """Mandatory columns are missing from the header row."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(
            code="schema",
            message="缺少必需列: " + "、".join(missing),
            details={"missing_columns": list(missing)},
            stage="schema",
        )
        self.missing = list(missing)


class FieldParseError(BillingError):
    """A numeric field holds something that is not a number."""

    def __init__(self, row: int, column: str, value: Any, reason: str = "不是有效数字") -> None:
        super().__init__(
            code="field_parse",
            message=f"第{row}行「{column}」{reason}: {value!r}",
            details={"row": row, "column": column, "value": str(value)},
            stage="parse",
        )
        self.row = row
        self.column = column
        self.value = value


class ComputationError(BillingError):
    """Economically invalid input (non-finite value, negative unit price)."""

    def __init__(self, message: str, *, row: Optional[int] = None, field_name: Optional[str] = None) -> None:
        details: dict[str, Any] = {}
        if row is not None:
            details["row"] = row
        if field_name is not None:
            details["field"] = field_name
        super().__init__(code="computation", message=message, details=details or None, stage="compute")
        self.row = row
        self.field_name = field_name


class ConfigError(BillingError):
    """Invalid generation options."""

    def __init__(self, message: str, *, option: Optional[str] = None) -> None:
        super().__init__(
            code="config",
            message=message,
            details={"option": option} if option else None,
            stage="config",
        )
        self.option = option


class UnsupportedFormatError(BillingError):
    def __init__(self, filename: str) -> None:
        super().__init__(
            code="unsupported_format",
            message=f"不支持的文件格式: {filename}（仅支持 .xlsx / .csv）",
            details={"filename": filename},
            stage="decode",
        )
        self.filename = filename


__all__ = [
    "BillingError",
    "SchemaError",
    "FieldParseError",
    "ComputationError",
    "ConfigError",
    "UnsupportedFormatError",
]

