"""
Cross-field consistency checks.

Detects internal contradictions and incomplete cross-references between
wizard sections. Checks are independent of the review determination and
of each other; every applicable issue is reported.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Optional

from irbscreen.schemas.protocol import ProtocolSnapshot, RiskLevel

logger = logging.getLogger(__name__)

# Federal guideline for minimal-risk venipuncture, per 8-week period
BLOOD_DRAW_LIMIT_ML = 550
ASSENT_AGE = 7
MIN_COMPENSATION_DETAIL_CHARS = 20


class IssueSeverity(str, Enum):
    """Severity of a consistency issue."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class ConsistencyIssue:
    """A contradiction or gap between answers."""

    severity: IssueSeverity
    section: str
    field: str
    title: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity.value,
            "section": self.section,
            "field": self.field,
            "title": self.title,
            "message": self.message,
        }


def _error(section: str, field: str, title: str, message: str) -> ConsistencyIssue:
    return ConsistencyIssue(IssueSeverity.ERROR, section, field, title, message)


def _warning(section: str, field: str, title: str, message: str) -> ConsistencyIssue:
    return ConsistencyIssue(IssueSeverity.WARNING, section, field, title, message)


def _check_ages(snapshot: ProtocolSnapshot) -> list[ConsistencyIssue]:
    subjects = snapshot.subjects
    if subjects.total_participants <= 0:
        return []

    issues = []
    min_age, max_age = subjects.min_age, subjects.max_age
    if min_age is not None and max_age is not None and min_age > max_age:
        issues.append(
            _error(
                "subjects",
                "minAge",
                "Age Range Conflict",
                f"Minimum age ({min_age}) is greater than maximum age ({max_age}). Correct the age range.",
            )
        )
    if min_age is not None and min_age < 18 and subjects.includes_minors.is_no:
        issues.append(
            _error(
                "subjects",
                "includesMinors",
                "Minor Age Conflict",
                f"Minimum age is {min_age} but you indicated no minors will be included. "
                "Reconcile or set minimum age to 18.",
            )
        )
    if min_age is not None and min_age >= 18 and subjects.includes_minors.is_yes:
        issues.append(
            _warning(
                "subjects",
                "includesMinors",
                "Minor Inclusion Mismatch",
                f"You indicated minors will participate but minimum age is {min_age} (18+). Verify your age range.",
            )
        )
    return issues


def _check_blood_draw(snapshot: ProtocolSnapshot) -> list[ConsistencyIssue]:
    procedures = snapshot.procedures
    if not procedures.involves_blood_draw.is_yes:
        return []

    issues = []
    amount = procedures.blood_draw_amount
    if amount is not None and amount > BLOOD_DRAW_LIMIT_ML:
        issues.append(
            _error(
                "procedures",
                "bloodDrawAmount",
                "Blood Draw Volume Exceeds Federal Limit",
                f"{amount:g} mL exceeds the federal guideline of {BLOOD_DRAW_LIMIT_ML} mL per 8-week period "
                "for minimal-risk research. Revise or plan for full board review.",
            )
        )
    if not amount or not procedures.blood_draw_frequency.strip():
        issues.append(
            _warning(
                "procedures",
                "bloodDrawAmount",
                "Blood Draw Details Incomplete",
                "Specify the amount (mL) and frequency of blood draws. Both are required for IRB review.",
            )
        )
    return issues


def _check_recording(snapshot: ProtocolSnapshot) -> list[ConsistencyIssue]:
    consent = snapshot.consent
    if not snapshot.procedures.involves_recording.is_yes or consent.consent_required.is_no:
        return []
    if "record" in consent.consent_process.lower():
        return []
    return [
        _warning(
            "consent",
            "consentProcess",
            "Recording Not Addressed in Consent",
            "You indicated recordings will be made, but the consent process description does not mention "
            "recordings. Add a recording-specific consent section.",
        )
    ]


def _check_deception(snapshot: ProtocolSnapshot) -> list[ConsistencyIssue]:
    procedures = snapshot.procedures
    if procedures.involves_deception.is_yes and procedures.deception_debriefing.is_no:
        return [
            _error(
                "procedures",
                "deceptionDebriefing",
                "Deception Without Debriefing",
                "Research involving deception requires a debriefing plan unless the IRB waives this "
                "requirement. Describe your debriefing procedure.",
            )
        ]
    return []


def _youngest_minor_age(age_range: str) -> Optional[int]:
    head = age_range.split("-")[0].strip()
    return int(head) if head.isdigit() else None


def _check_minors(snapshot: ProtocolSnapshot) -> list[ConsistencyIssue]:
    subjects, consent = snapshot.subjects, snapshot.consent
    if not subjects.includes_minors.is_yes:
        return []

    issues = []
    youngest = _youngest_minor_age(subjects.minor_age_range)
    if consent.assent_required.is_no and youngest is not None and youngest >= ASSENT_AGE:
        issues.append(
            _warning(
                "consent",
                "assentRequired",
                "Child Assent May Be Required",
                f"Children ages {ASSENT_AGE} and older are generally capable of providing assent. "
                "Verify that assent is not required or document your justification.",
            )
        )
    if consent.parent_permission_required.is_no:
        issues.append(
            _error(
                "consent",
                "parentPermissionRequired",
                "Parental Permission Required for Minors",
                "Research involving minors requires parental or guardian permission unless the IRB grants a "
                "specific waiver (rare for non-emergency research).",
            )
        )
    return issues


def _check_data(snapshot: ProtocolSnapshot) -> list[ConsistencyIssue]:
    data = snapshot.data
    issues = []
    if data.collects_identifiers.is_yes and data.data_encrypted.is_no:
        issues.append(
            _error(
                "data",
                "dataEncrypted",
                "Identifiable Data Not Encrypted",
                "UB IRB requires electronic files linking participant identity to research data to be "
                "encrypted. Describe your encryption method (e.g., BitLocker, FileVault 2).",
            )
        )
    if data.anonymous_data.is_yes and data.collects_identifiers.is_yes:
        issues.append(
            _error(
                "data",
                "anonymousData",
                "Anonymous vs. Identifiable Contradiction",
                "You indicated data is anonymous but also that identifiers will be collected. Data cannot be "
                "both fully anonymous and identifiable. Correct one of these answers.",
            )
        )
    return issues


def _check_investigators(snapshot: ProtocolSnapshot, today: date) -> list[ConsistencyIssue]:
    prescreening = snapshot.prescreening
    issues = []

    expiry = prescreening.citi_expiry_date
    if expiry is not None:
        proposed_start = snapshot.study.start_date or today
        if expiry < proposed_start:
            issues.append(
                _error(
                    "prescreening",
                    "citiExpiryDate",
                    "CITI Training Will Be Expired at Study Start",
                    f"Your CITI training expires on {expiry.isoformat()}, before your proposed start date. "
                    "Renew training before submitting.",
                )
            )

    if prescreening.is_student_researcher.is_yes and prescreening.has_faculty_advisor.is_no:
        issues.append(
            _error(
                "prescreening",
                "hasFacultyAdvisor",
                "Faculty Advisor Required for Student Research",
                "UB IRB requires student researchers to have a faculty advisor who is responsible for human "
                "subject protection. You must identify a faculty advisor before submitting.",
            )
        )
    return issues


def _check_risks(snapshot: ProtocolSnapshot) -> list[ConsistencyIssue]:
    risks = snapshot.risks
    issues = []
    if risks.risk_level is not None and risks.risk_level != RiskLevel.NONE and not risks.risk_minimization.strip():
        issues.append(
            _warning(
                "risks",
                "riskMinimization",
                "Risk Minimization Not Described",
                "You identified risks to participants but did not describe how risks will be minimized. "
                "IRB reviewers require this information.",
            )
        )
    if risks.risk_level == RiskLevel.GREATER and not risks.adverse_event_plan.strip():
        issues.append(
            _warning(
                "risks",
                "adverseEventPlan",
                "Adverse Event Plan Needed",
                "Greater-than-minimal-risk research requires a plan for monitoring, reporting, and managing "
                "adverse events.",
            )
        )
    return issues


def _check_study_dates(snapshot: ProtocolSnapshot, today: date) -> list[ConsistencyIssue]:
    start, end = snapshot.study.start_date, snapshot.study.end_date
    if start is None or end is None:
        return []

    issues = []
    if end <= start:
        issues.append(
            _error("study", "endDate", "Study End Date Before Start Date", "End date must be after the start date.")
        )
    if start < today:
        issues.append(
            _warning(
                "study",
                "startDate",
                "Start Date in the Past",
                "Research cannot begin before receiving IRB approval. Set a start date that allows time for "
                "IRB review.",
            )
        )
    return issues


def _check_consent_waiver(snapshot: ProtocolSnapshot) -> list[ConsistencyIssue]:
    consent = snapshot.consent
    if consent.waiver_of_consent.is_yes and not consent.waiver_basis.strip():
        return [
            _error(
                "consent",
                "waiverBasis",
                "Waiver of Consent Justification Missing",
                "If requesting a waiver of informed consent, you must provide the regulatory basis and justification.",
            )
        ]
    return []


def _check_prisoners(snapshot: ProtocolSnapshot) -> list[ConsistencyIssue]:
    if not snapshot.subjects.includes_prisoners.is_yes:
        return []
    return [
        _warning(
            "subjects",
            "includesPrisoners",
            "Subpart C Prisoner Protections Required",
            "45 CFR 46 Subpart C requires that prisoner research demonstrate subjects are not being coerced, "
            "adequate monitoring is in place, and the research offers only minimal risk or direct benefit. "
            "Address these in your protocol.",
        )
    ]


def _check_compensation(snapshot: ProtocolSnapshot) -> list[ConsistencyIssue]:
    subjects = snapshot.subjects
    if not subjects.compensation_offered.is_yes:
        return []
    if len(subjects.compensation_details.strip()) >= MIN_COMPENSATION_DETAIL_CHARS:
        return []
    return [
        _warning(
            "subjects",
            "compensationDetails",
            "Compensation Details Incomplete",
            "Describe the compensation amount, schedule, and how it will be prorated for early withdrawal. "
            "IRB reviewers will look for this.",
        )
    ]


def check_consistency(snapshot: ProtocolSnapshot, today: Optional[date] = None) -> list[ConsistencyIssue]:
    """
    Run all consistency checks.

    Args:
        snapshot: Protocol answers
        today: Reference date for date checks (defaults to the current date)

    Returns:
        Issues in a fixed order, empty if the answers are consistent
    """
    today = today or date.today()

    issues: list[ConsistencyIssue] = []
    issues.extend(_check_ages(snapshot))
    issues.extend(_check_blood_draw(snapshot))
    issues.extend(_check_recording(snapshot))
    issues.extend(_check_deception(snapshot))
    issues.extend(_check_minors(snapshot))
    issues.extend(_check_data(snapshot))
    issues.extend(_check_investigators(snapshot, today))
    issues.extend(_check_risks(snapshot))
    issues.extend(_check_study_dates(snapshot, today))
    issues.extend(_check_consent_waiver(snapshot))
    issues.extend(_check_prisoners(snapshot))
    issues.extend(_check_compensation(snapshot))

    if issues:
        logger.debug(f"Consistency check found {len(issues)} issue(s)")
    return issues


def issue_count(issues: list[ConsistencyIssue], severity: Optional[IssueSeverity] = None) -> int:
    """Count issues, optionally only those of one severity."""
    if severity is None:
        return len(issues)
    return sum(1 for issue in issues if issue.severity == severity)
