"""
Recommendation generator.

A flat list of independent advisory rules, run after the determination.
Each rule contributes at most one recommendation, and no rule suppresses
another. Emission order follows rule order so output is deterministic.
"""

from typing import Callable, Optional

from irbscreen.schemas.protocol import ProtocolSnapshot
from irbscreen.screening.types import Priority, Recommendation, RecommendationType, ReviewType

RecommendationRule = Callable[[ProtocolSnapshot, ReviewType], Optional[Recommendation]]

_DEIDENTIFY = Recommendation(
    type=RecommendationType.EXPEDITE,
    priority=Priority.HIGH,
    title="Consider De-identification",
    body="If you collect no identifiable information, you may qualify for Exempt or Expedited review. "
    "Evaluate whether your research question can be answered without linking data to individuals.",
)

_REVIEW_EXEMPT = Recommendation(
    type=RecommendationType.EXPEDITE,
    priority=Priority.MEDIUM,
    title="Review Exempt Categories",
    body="Full Board may not be required. Work with your Faculty Advisor to review whether your "
    "methodology qualifies for Exempt Category 2 (surveys/interviews of public behavior) or Expedited Category 7.",
)

_CITI = Recommendation(
    type=RecommendationType.COMPLIANCE,
    priority=Priority.HIGH,
    title="CITI Training",
    body="Ensure all investigators and research staff have current CITI training (valid for 3 years). "
    "For student research, both PI and Faculty Advisor must have active certifications.",
)

_MINORS = Recommendation(
    type=RecommendationType.PROTECTION,
    priority=Priority.HIGH,
    title="Parental Permission & Child Assent",
    body="Research involving minors requires both written parental permission AND age-appropriate child "
    "assent (if child is capable of providing it). Prepare separate assent and permission forms.",
)

_PREGNANT = Recommendation(
    type=RecommendationType.PROTECTION,
    priority=Priority.HIGH,
    title="Pregnant Women Disclosure",
    body="45 CFR 46 Subpart B applies. Your consent form must disclose known/unknown risks to the fetus "
    "and pregnancy. If risk to fetus is unknown, include standard OHRP language.",
)

_COGNITIVE = Recommendation(
    type=RecommendationType.PROTECTION,
    priority=Priority.HIGH,
    title="LAR / Capacity Assessment",
    body="Research with cognitively impaired subjects requires Legally Authorized Representative (LAR) "
    "consent and/or assessment of the subject's decision-making capacity. Describe your capacity assessment process.",
)

_STUDENTS = Recommendation(
    type=RecommendationType.PROTECTION,
    priority=Priority.MEDIUM,
    title="Student Coercion Prevention",
    body="When recruiting UB students, explicitly state in the consent form that participation will not "
    "affect grades, standing, or any other academic benefits. For extra credit, provide an equivalent "
    "alternative activity.",
)

_ENCRYPT = Recommendation(
    type=RecommendationType.COMPLIANCE,
    priority=Priority.HIGH,
    title="Encrypt Identifiable Data",
    body="UB IRB requires that all electronic files linking participant identity to data be encrypted. "
    "Use BitLocker (Windows) or FileVault 2 (Mac), or store on UB secure network drives.",
)

_WAIVER_OF_DOCUMENTATION = Recommendation(
    type=RecommendationType.COMPLIANCE,
    priority=Priority.MEDIUM,
    title="Waiver of Documentation Requirements",
    body="A waiver of signed consent documentation requires the IRB to determine that: (1) the only link "
    "between subject and research is the consent form and the principal risk is breach of confidentiality, "
    "OR (2) research involves minimal risk with no non-research written consent requirement.",
)

_DECEPTION = Recommendation(
    type=RecommendationType.COMPLIANCE,
    priority=Priority.HIGH,
    title="Deception Protocol Requirements",
    body="Deception studies require: (1) a debriefing plan with specific script, (2) justification that "
    "research cannot be conducted without deception, and (3) IRB-approved debriefing materials. "
    "Include all three in your submission.",
)

_RECORDING = Recommendation(
    type=RecommendationType.COMPLIANCE,
    priority=Priority.MEDIUM,
    title="Recording Consent Language",
    body="Your consent form must include a separate recording section with checkboxes allowing "
    "participants to consent or decline recording while still participating in the study (if applicable).",
)


def _deidentify(snapshot: ProtocolSnapshot, review_type: ReviewType) -> Optional[Recommendation]:
    return _DEIDENTIFY if review_type == ReviewType.FULL_BOARD else None


def _review_exempt(snapshot: ProtocolSnapshot, review_type: ReviewType) -> Optional[Recommendation]:
    subjects = snapshot.subjects
    if (
        review_type == ReviewType.FULL_BOARD
        and not subjects.includes_prisoners.is_yes
        and not subjects.includes_minors.is_yes
    ):
        return _REVIEW_EXEMPT
    return None


def _citi(snapshot: ProtocolSnapshot, review_type: ReviewType) -> Optional[Recommendation]:
    return _CITI


def _minors(snapshot: ProtocolSnapshot, review_type: ReviewType) -> Optional[Recommendation]:
    return _MINORS if snapshot.subjects.includes_minors.is_yes else None


def _pregnant(snapshot: ProtocolSnapshot, review_type: ReviewType) -> Optional[Recommendation]:
    return _PREGNANT if snapshot.subjects.includes_pregnant_women.is_yes else None


def _cognitive(snapshot: ProtocolSnapshot, review_type: ReviewType) -> Optional[Recommendation]:
    return _COGNITIVE if snapshot.subjects.includes_cognitively_impaired.is_yes else None


def _students(snapshot: ProtocolSnapshot, review_type: ReviewType) -> Optional[Recommendation]:
    return _STUDENTS if snapshot.subjects.includes_ub_students.is_yes else None


def _encrypt(snapshot: ProtocolSnapshot, review_type: ReviewType) -> Optional[Recommendation]:
    data = snapshot.data
    if data.collects_identifiers.is_yes and not data.data_encrypted.is_yes:
        return _ENCRYPT
    return None


def _participant_count(snapshot: ProtocolSnapshot, review_type: ReviewType) -> Optional[Recommendation]:
    total = snapshot.subjects.total_participants
    if total <= 0:
        return None
    return Recommendation(
        type=RecommendationType.CONSISTENCY,
        priority=Priority.LOW,
        title="Verify Participant Count Consistency",
        body=f"You've indicated {total} total participants. Ensure this number is used consistently "
        "throughout your protocol description, consent form, and any recruitment materials.",
    )


def _waiver_of_documentation(snapshot: ProtocolSnapshot, review_type: ReviewType) -> Optional[Recommendation]:
    return _WAIVER_OF_DOCUMENTATION if snapshot.consent.waiver_of_documentation.is_yes else None


def _deception(snapshot: ProtocolSnapshot, review_type: ReviewType) -> Optional[Recommendation]:
    return _DECEPTION if snapshot.procedures.involves_deception.is_yes else None


def _recording(snapshot: ProtocolSnapshot, review_type: ReviewType) -> Optional[Recommendation]:
    return _RECORDING if snapshot.procedures.involves_recording.is_yes else None


RECOMMENDATION_RULES: tuple[RecommendationRule, ...] = (
    _deidentify,
    _review_exempt,
    _citi,
    _minors,
    _pregnant,
    _cognitive,
    _students,
    _encrypt,
    _participant_count,
    _waiver_of_documentation,
    _deception,
    _recording,
)


def generate_recommendations(snapshot: ProtocolSnapshot, review_type: ReviewType) -> list[Recommendation]:
    """
    Generate advisory recommendations for a determination.

    Args:
        snapshot: Protocol answers
        review_type: Final review type

    Returns:
        All applicable recommendations, in rule order
    """
    recommendations = []
    for rule in RECOMMENDATION_RULES:
        recommendation = rule(snapshot, review_type)
        if recommendation is not None:
            recommendations.append(recommendation)
    return recommendations
