"""
Required fields per wizard step.

Used to show soft completion warnings before the investigator moves on.
An answered No counts as filled; blank text, unanswered questions, empty
selections and missing numbers do not.
"""

from dataclasses import dataclass
from typing import Any, Callable

from irbscreen.schemas.protocol import Answer, ProtocolSnapshot


@dataclass(frozen=True)
class WizardStep:
    id: int
    key: str
    title: str
    short: str


WIZARD_STEPS: tuple[WizardStep, ...] = (
    WizardStep(1, "prescreening", "Pre-Screening", "Screening"),
    WizardStep(2, "researcher", "Researcher Info", "Researcher"),
    WizardStep(3, "study", "Study Overview", "Overview"),
    WizardStep(4, "subjects", "Research Subjects", "Subjects"),
    WizardStep(5, "procedures", "Procedures", "Procedures"),
    WizardStep(6, "risks", "Risk & Safety", "Risks"),
    WizardStep(7, "data", "Data & Privacy", "Data"),
    WizardStep(8, "consent", "Informed Consent", "Consent"),
    WizardStep(9, "review", "Review Determination", "Review"),
    WizardStep(10, "documents", "Documents", "Docs"),
)


@dataclass(frozen=True)
class MissingField:
    """A required answer that is not yet provided."""

    field: str
    label: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "label": self.label}


def is_filled(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, Answer):
        return value.is_answered
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (tuple, list, set, frozenset)):
        return len(value) > 0
    return True


def _prescreening(snapshot: ProtocolSnapshot) -> list[MissingField]:
    ps = snapshot.prescreening
    missing = []
    if not is_filled(ps.is_research):
        missing.append(MissingField("isResearch", "Answer whether this activity is research"))
    # Human-subjects question only matters once the activity is research
    if ps.is_research.is_yes and not is_filled(ps.involves_human_subjects):
        missing.append(MissingField("involvesHumanSubjects", "Answer whether human subjects are involved"))
    if not is_filled(ps.has_citi_training):
        missing.append(MissingField("hasCITITraining", "Confirm CITI training status"))
    if ps.has_citi_training.is_yes and not is_filled(ps.citi_expiry_date):
        missing.append(MissingField("citiExpiryDate", "CITI training expiration date"))
    return missing


def _researcher(snapshot: ProtocolSnapshot) -> list[MissingField]:
    r = snapshot.researcher
    missing = [
        MissingField(field, label)
        for field, label, value in (
            ("piFirstName", "PI first name", r.pi_first_name),
            ("piLastName", "PI last name", r.pi_last_name),
            ("piEmail", "PI email address", r.pi_email),
            ("piDepartment", "PI department", r.pi_department),
        )
        if not is_filled(value)
    ]
    if snapshot.prescreening.is_student_researcher.is_yes and not is_filled(r.advisor_email):
        missing.append(MissingField("advisorEmail", "Faculty advisor email"))
    return missing


def _study(snapshot: ProtocolSnapshot) -> list[MissingField]:
    s = snapshot.study
    missing = []
    if not is_filled(s.title):
        missing.append(MissingField("title", "Study title"))
    if not is_filled(s.study_purpose):
        missing.append(MissingField("studyPurpose", "Study purpose / specific aims"))
    return missing


def _subjects(snapshot: ProtocolSnapshot) -> list[MissingField]:
    s = snapshot.subjects
    missing = []
    if not is_filled(s.subject_population):
        missing.append(MissingField("subjectPopulation", "Target population description"))
    if s.total_participants <= 0:
        missing.append(MissingField("totalParticipants", "Estimated number of subjects"))
    return missing


def _procedures(snapshot: ProtocolSnapshot) -> list[MissingField]:
    if not is_filled(snapshot.procedures.method_types):
        return [MissingField("methodTypes", "At least one data collection method")]
    return []


def _risks(snapshot: ProtocolSnapshot) -> list[MissingField]:
    if not is_filled(snapshot.risks.risk_level):
        return [MissingField("riskLevel", "Risk level assessment")]
    return []


def _data(snapshot: ProtocolSnapshot) -> list[MissingField]:
    if not is_filled(snapshot.data.data_storage_location):
        return [MissingField("dataStorageLocation", "Data storage location / security measures")]
    return []


def _consent(snapshot: ProtocolSnapshot) -> list[MissingField]:
    if not is_filled(snapshot.consent.consent_process):
        return [MissingField("consentProcess", "Consent process description")]
    return []


def _none(snapshot: ProtocolSnapshot) -> list[MissingField]:
    return []


STEP_CHECKS: dict[int, Callable[[ProtocolSnapshot], list[MissingField]]] = {
    1: _prescreening,
    2: _researcher,
    3: _study,
    4: _subjects,
    5: _procedures,
    6: _risks,
    7: _data,
    8: _consent,
    # Review and document steps have nothing to gate on
    9: _none,
    10: _none,
}


def missing_fields(step: int, snapshot: ProtocolSnapshot) -> list[MissingField]:
    """
    List required fields that are not yet filled for a wizard step.

    Args:
        step: 1-indexed wizard step
        snapshot: Protocol answers

    Returns:
        Missing fields; empty means the step is complete or unknown
    """
    check = STEP_CHECKS.get(step)
    if check is None:
        return []
    return check(snapshot)


def is_step_complete(step: int, snapshot: ProtocolSnapshot) -> bool:
    return not missing_fields(step, snapshot)
