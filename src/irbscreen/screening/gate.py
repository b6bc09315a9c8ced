"""
Applicability gate.

Decides whether screening can proceed at all: both pre-screening
questions must be answered, and the activity must be human-subjects
research. Research-ness is checked strictly before human-subjects-ness.
"""

from typing import Optional

from irbscreen.schemas.protocol import ProtocolSnapshot
from irbscreen.screening.disclaimer import generate_disclaimer
from irbscreen.screening.types import (
    Priority,
    Recommendation,
    RecommendationType,
    ReviewResult,
    ReviewType,
)

CONFIDENCE_INSUFFICIENT = 0.0
CONFIDENCE_NOT_RESEARCH = 0.9
CONFIDENCE_NOT_HUMAN_SUBJECTS = 0.85

INSUFFICIENT_INFO_REASON = "Complete the Pre-Screening section to determine review type."

_NOT_RESEARCH_REASONS = (
    "Activity does not meet the federal definition of research (systematic investigation "
    "designed to develop or contribute to generalizable knowledge).",
    "IRB review is not required. However, consult your IRB office if uncertain.",
)

_NOT_RESEARCH_RECOMMENDATIONS = (
    Recommendation(
        type=RecommendationType.COMPLIANCE,
        priority=Priority.MEDIUM,
        title="Confirm Non-Research Status",
        body="Confirm with your IRB administrator that your activity qualifies as non-research "
        "(e.g., quality improvement, program evaluation, classroom exercise).",
    ),
    Recommendation(
        type=RecommendationType.COMPLIANCE,
        priority=Priority.MEDIUM,
        title="Publication May Require Review",
        body="If you plan to publish or present findings, IRB review may be needed.",
    ),
)

_NOT_HUMAN_SUBJECTS_REASONS = (
    "Research does not involve human subjects as defined by 45 CFR 46.102(e).",
    "IRB review is not required for this activity.",
)

_NOT_HUMAN_SUBJECTS_RECOMMENDATIONS = (
    Recommendation(
        type=RecommendationType.COMPLIANCE,
        priority=Priority.MEDIUM,
        title="Verify No Human Subjects",
        body="Verify that no living individuals are involved through intervention, interaction, "
        "or collection of identifiable information.",
    ),
    Recommendation(
        type=RecommendationType.COMPLIANCE,
        priority=Priority.MEDIUM,
        title="Consult Your IRB Administrator",
        body="Consult your IRB administrator if you are uncertain.",
    ),
)


def evaluate_applicability(snapshot: ProtocolSnapshot) -> Optional[ReviewResult]:
    """
    Run the applicability gate.

    Returns:
        A terminal ReviewResult, or None when screening should continue
        to the hard-trigger and category stages.
    """
    prescreening = snapshot.prescreening

    if not prescreening.is_research.is_answered or not prescreening.involves_human_subjects.is_answered:
        return ReviewResult(
            type=ReviewType.INSUFFICIENT_INFO,
            reasons=[INSUFFICIENT_INFO_REASON],
            confidence=CONFIDENCE_INSUFFICIENT,
            disclaimer=generate_disclaimer(ReviewType.INSUFFICIENT_INFO),
        )

    if prescreening.is_research.is_no:
        return ReviewResult(
            type=ReviewType.NOT_RESEARCH,
            reasons=list(_NOT_RESEARCH_REASONS),
            recommendations=list(_NOT_RESEARCH_RECOMMENDATIONS),
            confidence=CONFIDENCE_NOT_RESEARCH,
            disclaimer=generate_disclaimer(ReviewType.NOT_RESEARCH),
        )

    if prescreening.involves_human_subjects.is_no:
        return ReviewResult(
            type=ReviewType.NOT_HUMAN_SUBJECTS,
            reasons=list(_NOT_HUMAN_SUBJECTS_REASONS),
            recommendations=list(_NOT_HUMAN_SUBJECTS_RECOMMENDATIONS),
            confidence=CONFIDENCE_NOT_HUMAN_SUBJECTS,
            disclaimer=generate_disclaimer(ReviewType.NOT_HUMAN_SUBJECTS),
        )

    return None
