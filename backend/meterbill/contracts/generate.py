from __future__ import annotations

from typing import Annotated, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

from ..billing.models import DEFAULT_PER_PAGE, GenerateOptions
from ..normalize.dates import normalize_meter_date

OptionalText = Optional[Annotated[str, StringConstraints(strip_whitespace=True, max_length=200)]]


class GenerateForm(BaseModel):
    """
    Generation parameters as submitted by the upload form (all text fields).

    Empty strings mean "not set". per_page is range-checked when converted to
    GenerateOptions, so a non-positive value surfaces as a ConfigError.
    """

    model_config = ConfigDict(extra="forbid")

    custom_title: OptionalText = Field(default=None, description="默认：yyyy年MM月抄表计费通知单")
    per_page: int = Field(default=DEFAULT_PER_PAGE, description="每页表格数量")
    meter_reader: OptionalText = Field(default=None, description="抄表人")
    meter_date: OptionalText = Field(default=None, description="抄表日期，如 2025年08月16日")
    output_format: Literal["docx", "xlsx"] = "docx"

    @field_validator("custom_title", "meter_reader", "meter_date", mode="after")
    @classmethod
    def _empty_to_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @field_validator("per_page", mode="before")
    @classmethod
    def _blank_per_page(cls, v: object) -> object:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_PER_PAGE
        return v

    def to_options(self) -> GenerateOptions:
        return GenerateOptions(
            custom_title=self.custom_title,
            per_page=self.per_page,
            meter_reader=self.meter_reader,
            meter_date=normalize_meter_date(self.meter_date),
        )
