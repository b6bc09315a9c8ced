"""
Review screening API routes.

Provides endpoints for:
- Review-level classification
- Cross-field consistency checks
- Per-step required fields
- Submission document selection and checklist

The request body of every endpoint is the wizard's formData object.
"""

import logging
from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Query

from irbscreen.checks import WIZARD_STEPS, IssueSeverity, check_consistency, issue_count, missing_fields
from irbscreen.documents import build_checklist, review_guidance, select_documents
from irbscreen.schemas import ProtocolSnapshot
from irbscreen.screening import ReviewType, classify_review

logger = logging.getLogger(__name__)

router = APIRouter()

_STEP_IDS = frozenset(s.id for s in WIZARD_STEPS)


@router.post("/classify")
async def classify(snapshot: ProtocolSnapshot) -> dict[str, Any]:
    """
    Determine the IRB review level for a protocol.

    The determination is advisory and carries a confidence value,
    reasons with regulatory citations, flags and recommendations.
    """
    result = classify_review(snapshot)
    logger.info(f"Classified protocol as {result.type.value}")
    return result.to_dict()


@router.post("/consistency")
async def consistency(
    snapshot: ProtocolSnapshot,
    today: Optional[date] = Query(None, description="Reference date for date checks"),
) -> dict[str, Any]:
    """Report contradictions between answers."""
    issues = check_consistency(snapshot, today=today)
    return {
        "issues": [issue.to_dict() for issue in issues],
        "errorCount": issue_count(issues, IssueSeverity.ERROR),
        "warningCount": issue_count(issues, IssueSeverity.WARNING),
    }


@router.post("/requirements/{step}")
async def requirements(step: int, snapshot: ProtocolSnapshot) -> dict[str, Any]:
    """List required fields that are still empty for a wizard step."""
    if step not in _STEP_IDS:
        raise HTTPException(status_code=404, detail=f"Unknown wizard step: {step}")

    missing = missing_fields(step, snapshot)
    return {
        "step": step,
        "missing": [field.to_dict() for field in missing],
        "complete": not missing,
    }


@router.post("/documents")
async def documents(
    snapshot: ProtocolSnapshot,
    review_type: Optional[ReviewType] = Query(
        None,
        alias="reviewType",
        description="Review determination to prepare for (classified from the answers if omitted)",
    ),
) -> dict[str, Any]:
    """Select submission documents and build the submission checklist."""
    if review_type is None:
        review_type = classify_review(snapshot).type

    return {
        "reviewType": review_type.value,
        "documents": [doc.to_dict() for doc in select_documents(review_type, snapshot)],
        "guidance": review_guidance(review_type).to_dict(),
        "checklist": [item.to_dict() for item in build_checklist(snapshot, review_type)],
    }
