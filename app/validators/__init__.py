"""
app/validators package marker.
"""

from app.validators.compliance_validator import ComplianceInputValidator

__all__ = [
    "ComplianceInputValidator",
]
