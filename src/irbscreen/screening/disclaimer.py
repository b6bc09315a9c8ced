"""Advisory disclaimer attached to every screening result."""

from irbscreen.screening.types import ReviewType

BASE_DISCLAIMER = (
    "This determination is an automated, rules-based pre-screening provided for "
    "informational purposes. It is not a regulatory determination."
)


def generate_disclaimer(review_type: ReviewType) -> str:
    msg = BASE_DISCLAIMER
    if review_type.requires_submission:
        msg += " The IRB, not the investigator, makes the final determination of review level."
    elif review_type in (ReviewType.NOT_RESEARCH, ReviewType.NOT_HUMAN_SUBJECTS):
        msg += " Confirm with your IRB office before proceeding without review."
    return msg
