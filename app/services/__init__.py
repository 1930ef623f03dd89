"""
app/services package marker.
"""

from app.services.compliance_report_service import (
    ComplianceReportService,
    build_narrator_adapter,
    get_compliance_report_service,
)

__all__ = [
    "ComplianceReportService",
    "build_narrator_adapter",
    "get_compliance_report_service",
]
