"""
Rules-based IRB review screening.

Provides:
- Applicability gate (research / human subjects)
- Full-board hard triggers
- Exempt (45 CFR 46.104(d)) and expedited (45 CFR 46.110) category matching
- Advisory recommendations

The determination is advisory. Every result carries a confidence value
and a disclaimer.
"""

from irbscreen.screening.classifier import classify_form_data, classify_review
from irbscreen.screening.exempt import check_exempt_categories
from irbscreen.screening.expedited import check_expedited_categories
from irbscreen.screening.gate import evaluate_applicability
from irbscreen.screening.recommendations import generate_recommendations
from irbscreen.screening.triggers import check_full_board_triggers
from irbscreen.screening.types import (
    CategoryResult,
    Flag,
    FlagSeverity,
    Priority,
    Recommendation,
    RecommendationType,
    ReviewResult,
    ReviewType,
    TriggerResult,
)

__all__ = [
    "classify_review",
    "classify_form_data",
    "evaluate_applicability",
    "check_full_board_triggers",
    "check_exempt_categories",
    "check_expedited_categories",
    "generate_recommendations",
    "CategoryResult",
    "Flag",
    "FlagSeverity",
    "Priority",
    "Recommendation",
    "RecommendationType",
    "ReviewResult",
    "ReviewType",
    "TriggerResult",
]
