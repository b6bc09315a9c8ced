"""
IRB review-level classifier.

Stages run in strict precedence order:

1. Applicability gate (insufficient info / not research / not human subjects)
2. Full-board hard triggers
3. Exempt categories
4. Expedited categories
5. Full-board default

Recommendations are generated after the determination and never change
it. The classifier is a pure function of the snapshot and is called on
every wizard edit.
"""

import logging
from typing import Any, Mapping

from irbscreen.schemas.protocol import ProtocolSnapshot
from irbscreen.screening.disclaimer import generate_disclaimer
from irbscreen.screening.exempt import check_exempt_categories
from irbscreen.screening.expedited import check_expedited_categories
from irbscreen.screening.gate import evaluate_applicability
from irbscreen.screening.recommendations import generate_recommendations
from irbscreen.screening.triggers import check_full_board_triggers
from irbscreen.screening.types import CategoryResult, ReviewResult, ReviewType

logger = logging.getLogger(__name__)

# Hard-trigger results are principled; the unmatched default is conservative
CONFIDENCE_FULL_BOARD_TRIGGERED = 0.9
CONFIDENCE_FULL_BOARD_DEFAULT = 0.75

DEFAULT_FULL_BOARD_REASONS = (
    "Research does not qualify for exempt or expedited review based on answers provided.",
    "Full Board review is required.",
)


def _categorized(
    snapshot: ProtocolSnapshot,
    review_type: ReviewType,
    match: CategoryResult,
) -> ReviewResult:
    return ReviewResult(
        type=review_type,
        category=match.category,
        category_label=match.label,
        reasons=list(match.reasons),
        recommendations=generate_recommendations(snapshot, review_type),
        confidence=match.confidence,
        flags=list(match.flags),
        disclaimer=generate_disclaimer(review_type),
    )


def classify_review(snapshot: ProtocolSnapshot) -> ReviewResult:
    """
    Determine the IRB review level for a protocol snapshot.

    Args:
        snapshot: Protocol answers (read-only)

    Returns:
        Exactly one ReviewResult. Never raises for a parsed snapshot.
    """
    gated = evaluate_applicability(snapshot)
    if gated is not None:
        logger.debug(f"Gate determination: {gated.type.value}")
        return gated

    triggers = check_full_board_triggers(snapshot)
    if triggers.triggered:
        logger.debug(f"Full board triggered: {len(triggers.reasons)} trigger(s)")
        return ReviewResult(
            type=ReviewType.FULL_BOARD,
            reasons=list(triggers.reasons),
            recommendations=generate_recommendations(snapshot, ReviewType.FULL_BOARD),
            confidence=CONFIDENCE_FULL_BOARD_TRIGGERED,
            flags=list(triggers.flags),
            disclaimer=generate_disclaimer(ReviewType.FULL_BOARD),
        )

    exempt = check_exempt_categories(snapshot)
    if exempt.qualifies:
        logger.debug(f"Exempt category {exempt.category}")
        return _categorized(snapshot, ReviewType.EXEMPT, exempt)

    expedited = check_expedited_categories(snapshot)
    if expedited.qualifies:
        logger.debug(f"Expedited category {expedited.category}")
        return _categorized(snapshot, ReviewType.EXPEDITED, expedited)

    logger.debug("No category matched, defaulting to full board")
    return ReviewResult(
        type=ReviewType.FULL_BOARD,
        reasons=list(DEFAULT_FULL_BOARD_REASONS),
        recommendations=generate_recommendations(snapshot, ReviewType.FULL_BOARD),
        confidence=CONFIDENCE_FULL_BOARD_DEFAULT,
        disclaimer=generate_disclaimer(ReviewType.FULL_BOARD),
    )


def classify_form_data(form_data: Mapping[str, Any]) -> ReviewResult:
    """Parse the wizard's formData and classify it."""
    return classify_review(ProtocolSnapshot.from_form_data(form_data))
