"""
Protocol completeness and consistency checks.

These run alongside the classifier and never change a determination.
"""

from irbscreen.checks.consistency import (
    ConsistencyIssue,
    IssueSeverity,
    check_consistency,
    issue_count,
)
from irbscreen.checks.requirements import (
    WIZARD_STEPS,
    MissingField,
    WizardStep,
    is_step_complete,
    missing_fields,
)

__all__ = [
    "ConsistencyIssue",
    "IssueSeverity",
    "check_consistency",
    "issue_count",
    "WIZARD_STEPS",
    "MissingField",
    "WizardStep",
    "is_step_complete",
    "missing_fields",
]
