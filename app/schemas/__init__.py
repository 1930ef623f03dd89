"""
app/schemas package marker.
"""

from app.schemas.compliance import (
    ComplianceReportResponse,
    EntryReportRequestModel,
    PrecomputedReportRequestModel,
)

__all__ = [
    "ComplianceReportResponse",
    "EntryReportRequestModel",
    "PrecomputedReportRequestModel",
]
