"""
Protocol snapshot schemas.

A snapshot is the complete set of wizard answers at one point in time.
It is parsed from the wizard's camelCase JSON and is immutable once
built, so screening code can read it without copying.

Every yes/no question is an explicit three-value answer. "Not yet
answered" is never the same thing as "answered no".
"""

from datetime import date
from enum import Enum
from typing import Annotated, Any, Callable, Mapping, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class Answer(str, Enum):
    """Answer to a yes/no wizard question."""

    YES = "yes"
    NO = "no"
    UNANSWERED = "unanswered"

    @property
    def is_yes(self) -> bool:
        return self is Answer.YES

    @property
    def is_no(self) -> bool:
        return self is Answer.NO

    @property
    def is_answered(self) -> bool:
        return self is not Answer.UNANSWERED

    @classmethod
    def parse(cls, value: Any) -> Any:
        """Map wizard values (true/false/null, "yes"/"no") onto an Answer."""
        if value is None:
            return cls.UNANSWERED
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            return cls.YES if value else cls.NO
        if isinstance(value, str):
            text = value.strip().lower()
            if text in ("yes", "true", "y"):
                return cls.YES
            if text in ("no", "false", "n"):
                return cls.NO
            if text in ("", "unanswered", "null"):
                return cls.UNANSWERED
        # Anything else is a shape error for pydantic to report
        return value


class RiskLevel(str, Enum):
    """
    Investigator's self-assessed risk level.

    Values outside this set are kept as plain strings and count as
    neither minimal nor greater.
    """

    NONE = "none"
    MINIMAL = "minimal"
    MINOR = "minor"
    GREATER = "greater"


class MethodType(str, Enum):
    """Data collection methods the screening rules recognise."""

    SURVEY = "survey"
    INTERVIEW = "interview"
    FOCUS_GROUP = "focus_group"
    OBSERVATION_PUBLIC = "observation_public"
    OBSERVATION_LAB = "observation_lab"
    EDUCATIONAL_ASSESSMENT = "educational_assessment"
    BEHAVIORAL_INTERVENTION = "behavioral_intervention"
    COGNITIVE_TEST = "cognitive_test"
    PHYSIOLOGICAL = "physiological"
    CLINICAL_PROCEDURE = "clinical_procedure"
    TASTE_FOOD = "taste_food"
    SECONDARY_DATA = "secondary_data"
    OTHER = "other"


class IdentifierType(str, Enum):
    """Participant identifiers the screening rules recognise."""

    NAME = "name"
    EMAIL = "email"
    PHONE = "phone"
    ADDRESS = "address"
    DOB = "dob"
    SSN = "ssn"
    MRN = "mrn"
    ID_NUMBER = "id_number"
    IP = "ip"
    LOCATION = "location"
    PHOTO = "photo"
    VOICE = "voice"
    BIOMETRIC = "biometric"
    INSTITUTION = "institution"
    OTHER = "other"


def _to_text(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _to_number(value: Any) -> Any:
    """Empty or non-numeric input becomes None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
        return int(number) if number.is_integer() else number
    return value


def _to_optional_int(value: Any) -> Any:
    number = _to_number(value)
    if isinstance(number, float):
        return int(number)
    return number


def _to_count(value: Any) -> Any:
    number = _to_optional_int(value)
    return 0 if number is None else number


def _to_date(value: Any) -> Any:
    """ISO date strings; blank or unparseable input becomes None."""
    if value is None or isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return value


def _in_vocabulary(enum_cls: type[Enum], value: Any) -> Any:
    """Recognised strings become enum members; anything else is left as is."""
    if isinstance(value, str) and not isinstance(value, enum_cls):
        try:
            return enum_cls(value)
        except ValueError:
            return value
    return value


def _to_risk_level(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return _in_vocabulary(RiskLevel, value)


def _to_items(value: Any) -> Any:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,) if value.strip() else ()
    if isinstance(value, (set, frozenset)):
        return tuple(sorted(value, key=str))
    return value


def _vocabulary_items(enum_cls: type[Enum]) -> Callable[[Any], Any]:
    def convert(value: Any) -> Any:
        items = _to_items(value)
        if isinstance(items, (list, tuple)):
            return tuple(_in_vocabulary(enum_cls, item) for item in items)
        return items

    return convert


TriState = Annotated[Answer, BeforeValidator(Answer.parse)]
Text = Annotated[str, BeforeValidator(_to_text)]
OptionalInt = Annotated[Optional[int], BeforeValidator(_to_optional_int)]
OptionalNumber = Annotated[Optional[float], BeforeValidator(_to_number)]
Count = Annotated[int, BeforeValidator(_to_count)]
OptionalDate = Annotated[Optional[date], BeforeValidator(_to_date)]
Items = Annotated[tuple[str, ...], BeforeValidator(_to_items)]

MethodTypes = Annotated[tuple[Union[MethodType, str], ...], BeforeValidator(_vocabulary_items(MethodType))]
IdentifierTypes = Annotated[
    tuple[Union[IdentifierType, str], ...], BeforeValidator(_vocabulary_items(IdentifierType))
]


class _Section(BaseModel):
    """Common config: camelCase aliases, immutable, tolerant of extra keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class Prescreening(_Section):
    """Step 1: is this human-subjects research at all."""

    is_research: TriState = Answer.UNANSWERED
    involves_human_subjects: TriState = Answer.UNANSWERED
    is_student_researcher: TriState = Answer.UNANSWERED
    has_faculty_advisor: TriState = Answer.UNANSWERED
    has_citi_training: TriState = Field(default=Answer.UNANSWERED, alias="hasCITITraining")
    citi_completion_date: OptionalDate = None
    citi_expiry_date: OptionalDate = None


class Researcher(_Section):
    """Step 2: investigator contact details."""

    pi_first_name: Text = ""
    pi_last_name: Text = ""
    pi_email: Text = ""
    pi_phone: Text = ""
    pi_department: Text = ""
    advisor_first_name: Text = ""
    advisor_last_name: Text = ""
    advisor_email: Text = ""


class Study(_Section):
    """Step 3: study overview."""

    title: Text = ""
    short_title: Text = ""
    study_purpose: Text = ""
    start_date: OptionalDate = None
    end_date: OptionalDate = None
    is_multi_site: TriState = Answer.UNANSWERED


class Subjects(_Section):
    """Step 4: who participates."""

    total_participants: Count = 0
    min_age: OptionalInt = None
    max_age: OptionalInt = None
    includes_minors: TriState = Answer.UNANSWERED
    minor_age_range: Text = ""
    includes_prisoners: TriState = Answer.UNANSWERED
    includes_pregnant_women: TriState = Answer.UNANSWERED
    includes_cognitively_impaired: TriState = Answer.UNANSWERED
    includes_ub_students: TriState = Field(default=Answer.UNANSWERED, alias="includesUBStudents")
    includes_ub_employees: TriState = Field(default=Answer.UNANSWERED, alias="includesUBEmployees")
    includes_economically_disadvantaged: TriState = Answer.UNANSWERED
    subject_population: Text = ""
    recruitment_method: Items = ()
    inclusion_criteria: Text = ""
    exclusion_criteria: Text = ""
    compensation_offered: TriState = Answer.UNANSWERED
    compensation_details: Text = ""


class Procedures(_Section):
    """Step 5: what is done to or with participants."""

    method_types: MethodTypes = ()
    survey_topics: Text = ""
    interview_topics: Text = ""
    observation_context: Text = ""
    involves_deception: TriState = Answer.UNANSWERED
    deception_description: Text = ""
    deception_debriefing: TriState = Answer.UNANSWERED
    involves_recording: TriState = Answer.UNANSWERED
    recording_types: Items = ()
    involves_blood_draw: TriState = Answer.UNANSWERED
    blood_draw_amount: OptionalNumber = None
    blood_draw_frequency: Text = ""
    involves_randomization: TriState = Answer.UNANSWERED
    randomization_description: Text = ""
    uses_existing_data: TriState = Answer.UNANSWERED
    existing_data_description: Text = ""
    existing_data_identifiable: TriState = Answer.UNANSWERED
    data_source_publicly_available: TriState = Answer.UNANSWERED

    def uses_method(self, *methods: MethodType) -> bool:
        """True if any of the given methods is selected."""
        return any(m in self.method_types for m in methods)


class Risks(_Section):
    """Step 6: risk assessment and narratives."""

    risk_level: Annotated[Optional[Union[RiskLevel, str]], BeforeValidator(_to_risk_level)] = None
    physical_risks: Text = ""
    psychological_risks: Text = ""
    privacy_risks: Text = ""
    social_risks: Text = ""
    legal_risks: Text = ""
    economic_risks: Text = ""
    other_risks: Text = ""
    risk_minimization: Text = ""
    adverse_event_plan: Text = ""


class Data(_Section):
    """Step 7: identifiers, storage and security."""

    collects_identifiers: TriState = Answer.UNANSWERED
    identifier_types: IdentifierTypes = ()
    data_storage_location: Items = ()
    data_encrypted: TriState = Answer.UNANSWERED
    anonymous_data: TriState = Answer.UNANSWERED
    coded_data: TriState = Answer.UNANSWERED
    hipaa_applicable: TriState = Answer.UNANSWERED


class Consent(_Section):
    """Step 8: informed consent plan."""

    consent_required: TriState = Answer.UNANSWERED
    waiver_of_consent: TriState = Answer.UNANSWERED
    waiver_basis: Text = ""
    documented_consent: TriState = Answer.UNANSWERED
    waiver_of_documentation: TriState = Answer.UNANSWERED
    waiver_doc_basis: Text = ""
    assent_required: TriState = Answer.UNANSWERED
    parent_permission_required: TriState = Answer.UNANSWERED
    consent_process: Text = ""


class ProtocolSnapshot(_Section):
    """All wizard sections for one protocol."""

    prescreening: Prescreening = Field(default_factory=Prescreening)
    researcher: Researcher = Field(default_factory=Researcher)
    study: Study = Field(default_factory=Study)
    subjects: Subjects = Field(default_factory=Subjects)
    procedures: Procedures = Field(default_factory=Procedures)
    risks: Risks = Field(default_factory=Risks)
    data: Data = Field(default_factory=Data)
    consent: Consent = Field(default_factory=Consent)

    @model_validator(mode="before")
    @classmethod
    def _drop_null_sections(cls, values: Any) -> Any:
        if isinstance(values, Mapping):
            return {k: v for k, v in values.items() if v is not None}
        return values

    @classmethod
    def from_form_data(cls, form_data: Mapping[str, Any]) -> "ProtocolSnapshot":
        """Build a snapshot from the wizard's formData object."""
        return cls.model_validate(form_data)
