"""
Services layer - Business logic orchestration.

Coordinates table decoding, the billing pipeline and document rendering for
the HTTP and command-line entry points.
"""

from .billing_service import BillingService, GeneratedFile, OUTPUT_FORMATS

__all__ = [
    "BillingService",
    "GeneratedFile",
    "OUTPUT_FORMATS",
]
