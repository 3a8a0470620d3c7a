"""
Pipeline - Data transformation and orchestration layer.

Components:
- table_reader: decode .xlsx / .csv uploads into header + rows
- orchestrator: rows -> computed bills -> composed, paginated BillingDocument
"""

from .orchestrator import PipelineOrchestrator, PipelineResult, build_billing_document
from .table_reader import DecodedTable, read_table, read_table_bytes

__all__ = [
    "DecodedTable",
    "PipelineOrchestrator",
    "PipelineResult",
    "build_billing_document",
    "read_table",
    "read_table_bytes",
]
