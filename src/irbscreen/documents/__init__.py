"""
Submission document selection and checklist.
"""

from irbscreen.documents.selector import (
    ChecklistItem,
    DocumentSpec,
    ReviewGuidance,
    build_checklist,
    review_guidance,
    select_documents,
)

__all__ = [
    "ChecklistItem",
    "DocumentSpec",
    "ReviewGuidance",
    "build_checklist",
    "review_guidance",
    "select_documents",
]
