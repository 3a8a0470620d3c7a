"""
Billing core - schema detection, record parsing and fee computation.

Two phases: the schema is built once from the header row, then every data
row is parsed against it and computed independently of the others.
"""

from .fees import compute_bill, compute_bills
from .models import (
    DEFAULT_PER_PAGE,
    ElectricityMeter,
    GenerateOptions,
    MerchantBill,
    MeterColumnSpec,
    TableSchema,
)
from .records import parse_record, parse_records
from .schema import detect_schema

__all__ = [
    "DEFAULT_PER_PAGE",
    "ElectricityMeter",
    "GenerateOptions",
    "MerchantBill",
    "MeterColumnSpec",
    "TableSchema",
    "compute_bill",
    "compute_bills",
    "detect_schema",
    "parse_record",
    "parse_records",
]
