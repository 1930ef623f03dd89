"""
app/domain package marker.
"""

from app.domain.compliance import (
    EntryDayInput,
    EntryReportRequest,
    FieldViolation,
    HistoryDay,
    PrecomputedReportRequest,
    ReportInputs,
)

__all__ = [
    "EntryDayInput",
    "EntryReportRequest",
    "FieldViolation",
    "HistoryDay",
    "PrecomputedReportRequest",
    "ReportInputs",
]
