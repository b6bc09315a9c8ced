"""
Submission document selection.

Decides which templates an IRB submission needs for a determination,
what the investigator should expect from each review path, and which
checklist items are already covered by the answers. Rendering the
template text is done elsewhere.
"""

from dataclasses import dataclass
from typing import Any, Optional

from irbscreen.schemas.protocol import MethodType, ProtocolSnapshot
from irbscreen.screening.types import ReviewType


@dataclass(frozen=True)
class DocumentSpec:
    """A document template to render for the submission."""

    key: str
    title: str
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "title": self.title, "description": self.description}


@dataclass(frozen=True)
class ReviewGuidance:
    """What to expect from a review path."""

    label: str
    description: str
    timeframe: str
    attachments: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "description": self.description,
            "timeframe": self.timeframe,
            "attachments": list(self.attachments),
        }


@dataclass(frozen=True)
class ChecklistItem:
    """
    One submission checklist line.

    done is True or False when the answers settle it, None when it has to
    be confirmed by hand.
    """

    label: str
    done: Optional[bool]

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "done": self.done}


PROTOCOL_DESCRIPTION = DocumentSpec(
    key="protocol",
    title="Protocol Description",
    description="Comprehensive research protocol for IRB submission. Describes your study design, "
    "procedures, risks, benefits, and data management.",
)
EXEMPT_CONSENT_SHEET = DocumentSpec(
    key="consent_exempt",
    title="Exempt Consent Information Sheet",
    description="For exempt research. A one-page information sheet describing the study. "
    "No participant signature required.",
)
FULL_CONSENT_FORM = DocumentSpec(
    key="consent_full",
    title="Full Informed Consent Form",
    description="Complete consent form with all required elements per 45 CFR 46.116, "
    "including participant signature lines.",
)
PARENTAL_PERMISSION_FORM = DocumentSpec(
    key="parent_permission",
    title="Parental/Guardian Permission Form",
    description="Written permission from a parent or guardian for each participating minor.",
)
CHILD_ASSENT_FORM = DocumentSpec(
    key="child_assent",
    title="Child Assent Form",
    description="Age-appropriate assent form for minors capable of providing assent.",
)

_NO_REVIEW_ATTACHMENTS: tuple[str, ...] = ()

REVIEW_GUIDANCE: dict[ReviewType, ReviewGuidance] = {
    ReviewType.EXEMPT: ReviewGuidance(
        label="Exempt Review",
        description="Exempt research still requires IRB review and determination. It is NOT exempt from "
        "the IRB process. The IRB (not the investigator) makes the final determination of exempt status.",
        timeframe="Typically 1-2 weeks for initial review",
        attachments=(
            "Protocol description",
            "Exempt consent information sheet (no signature required)",
            "Recruitment materials",
            "Survey/interview instruments",
        ),
    ),
    ReviewType.EXPEDITED: ReviewGuidance(
        label="Expedited Review",
        description="Expedited review is conducted by the IRB Chair or designated reviewer (not the full "
        "board). Approval can be faster than full board review.",
        timeframe="Typically 2-4 weeks",
        attachments=(
            "Protocol description",
            "Full informed consent form (with signatures)",
            "Recruitment materials",
            "Survey/interview instruments",
            "Data collection tools",
            "CITI certificates for all investigators",
        ),
    ),
    ReviewType.FULL_BOARD: ReviewGuidance(
        label="Full Board Review",
        description="Full Board review requires review by a quorum of the full IRB committee at a scheduled "
        "meeting. This provides the most thorough review for higher-risk research.",
        timeframe="Typically 4-8 weeks (dependent on meeting schedule)",
        attachments=(
            "Protocol description (detailed)",
            "Full informed consent form (with signatures)",
            "Parental permission form (if children)",
            "Child assent form (if applicable)",
            "Recruitment materials",
            "Survey/interview instruments",
            "Data collection tools",
            "CITI certificates for all investigators",
            "Site authorization letter (if applicable)",
            "Adverse event monitoring plan",
            "DSMB charter (if applicable)",
        ),
    ),
    ReviewType.NOT_RESEARCH: ReviewGuidance(
        label="IRB Review Not Required",
        description="Based on your answers, this activity does not meet the federal definition of research. "
        "IRB review is not required.",
        timeframe="N/A",
        attachments=_NO_REVIEW_ATTACHMENTS,
    ),
    ReviewType.NOT_HUMAN_SUBJECTS: ReviewGuidance(
        label="IRB Review Not Required",
        description="Based on your answers, this research does not involve human subjects as defined by "
        "federal regulations. IRB review may not be required.",
        timeframe="N/A",
        attachments=_NO_REVIEW_ATTACHMENTS,
    ),
    ReviewType.INSUFFICIENT_INFO: ReviewGuidance(
        label="More Information Needed",
        description="Complete the earlier sections to receive a review type determination.",
        timeframe="N/A",
        attachments=_NO_REVIEW_ATTACHMENTS,
    ),
}


def review_guidance(review_type: ReviewType) -> ReviewGuidance:
    return REVIEW_GUIDANCE[review_type]


def select_documents(review_type: ReviewType, snapshot: ProtocolSnapshot) -> list[DocumentSpec]:
    """
    Select the document templates a submission needs.

    Args:
        review_type: Final review determination
        snapshot: Protocol answers

    Returns:
        Templates in presentation order; empty when no submission is needed
    """
    if not review_type.requires_submission:
        return []

    documents = [PROTOCOL_DESCRIPTION]
    if review_type == ReviewType.EXEMPT:
        documents.append(EXEMPT_CONSENT_SHEET)
    else:
        documents.append(FULL_CONSENT_FORM)

    if snapshot.subjects.includes_minors.is_yes:
        documents.append(PARENTAL_PERMISSION_FORM)
        if snapshot.consent.assent_required.is_yes:
            documents.append(CHILD_ASSENT_FORM)
    return documents


def build_checklist(snapshot: ProtocolSnapshot, review_type: ReviewType) -> list[ChecklistItem]:
    """
    Build the submission checklist.

    Fixed items come first, followed by items that only apply to some
    protocols (minors, blood draws, deception, waivers and so on).
    """
    prescreening = snapshot.prescreening
    subjects = snapshot.subjects
    procedures = snapshot.procedures
    consent = snapshot.consent

    if procedures.uses_method(MethodType.SURVEY, MethodType.INTERVIEW):
        instrument_done: Optional[bool] = bool(
            procedures.survey_topics.strip() or procedures.interview_topics.strip()
        )
    else:
        instrument_done = None

    items = [
        ChecklistItem("CITI training certificate (PI)", prescreening.has_citi_training.is_yes),
        ChecklistItem(
            "CITI training certificate (Faculty Advisor)",
            not prescreening.is_student_researcher.is_yes or bool(snapshot.researcher.advisor_email.strip()),
        ),
        ChecklistItem("Protocol description", bool(snapshot.study.study_purpose.strip())),
        ChecklistItem(
            "Recruitment materials (flyers, email scripts, social media posts)",
            len(subjects.recruitment_method) > 0,
        ),
        ChecklistItem("Survey / interview instrument", instrument_done),
    ]

    if review_type == ReviewType.EXEMPT:
        items.append(ChecklistItem("Exempt consent information sheet (NO signature line)", None))
    else:
        items.append(ChecklistItem("Full informed consent form (with signature lines)", None))

    if subjects.includes_minors.is_yes:
        items.append(ChecklistItem("Parental/Guardian Permission Form", not consent.parent_permission_required.is_no))
        if consent.assent_required.is_yes:
            items.append(ChecklistItem("Child Assent Form", True))
    if procedures.involves_blood_draw.is_yes:
        items.append(
            ChecklistItem("Blood draw protocol details (amounts, frequency)", bool(procedures.blood_draw_amount))
        )
    if procedures.involves_deception.is_yes:
        items.append(ChecklistItem("Debriefing script", procedures.deception_debriefing.is_yes))
    if procedures.involves_randomization.is_yes:
        items.append(
            ChecklistItem(
                "Randomization procedure description", bool(procedures.randomization_description.strip())
            )
        )
    if snapshot.data.hipaa_applicable.is_yes:
        items.append(ChecklistItem("HIPAA Authorization form or Waiver of Authorization request", None))
    if snapshot.study.is_multi_site.is_yes:
        items.append(ChecklistItem("Site Authorization letter(s)", None))
    if consent.waiver_of_consent.is_yes:
        items.append(ChecklistItem("Written justification for Waiver of Consent", bool(consent.waiver_basis.strip())))
    if consent.waiver_of_documentation.is_yes:
        items.append(
            ChecklistItem("Written justification for Waiver of Documentation", bool(consent.waiver_doc_basis.strip()))
        )
    return items
