"""
Expedited category matcher (45 CFR 46.110(b)(1)).

Evaluated only when no exempt category matched. Categories use the
regulation's own numbering. Collecting identifiers is what moves a
survey study from exempt Category 2 up to expedited Category 4 or 7,
so the identifier checks here complement the disqualifier in the
exempt matcher.
"""

from irbscreen.schemas.protocol import MethodType, ProtocolSnapshot, RiskLevel
from irbscreen.screening.rules import CategoryRule, match_first
from irbscreen.screening.types import CategoryResult, Flag, FlagSeverity

NONINVASIVE_METHODS = (
    MethodType.SURVEY,
    MethodType.INTERVIEW,
    MethodType.OBSERVATION_PUBLIC,
    MethodType.COGNITIVE_TEST,
)

INDIVIDUAL_CHARACTERISTICS_METHODS = (MethodType.SURVEY, MethodType.INTERVIEW)


def _is_minimal_risk(snapshot: ProtocolSnapshot) -> bool:
    return snapshot.risks.risk_level == RiskLevel.MINIMAL


# Category 2: blood collection from healthy adults


def _blood_applies(snapshot: ProtocolSnapshot) -> bool:
    subjects = snapshot.subjects
    return (
        snapshot.procedures.involves_blood_draw.is_yes
        and subjects.min_age is not None
        and subjects.min_age >= 18
        and not subjects.includes_minors.is_yes
        and not subjects.includes_prisoners.is_yes
        and _is_minimal_risk(snapshot)
    )


def _blood_build(snapshot: ProtocolSnapshot) -> CategoryResult:
    return CategoryResult(
        qualifies=True,
        category=2,
        label="Category 2 — Blood Collection (Venipuncture)",
        reasons=[
            "Research involves blood samples by finger stick, heel stick, or venipuncture from healthy adults.",
            "45 CFR 46.110(b)(1), Category 2",
        ],
        confidence=0.8,
        flags=[
            Flag(
                FlagSeverity.LOW,
                "Specify the amount and frequency of blood draws in your protocol. Limits: ≤550 mL in 8 weeks.",
            )
        ],
    )


# Category 4: noninvasive procedures with identifiers or a vulnerable population


def _noninvasive_applies(snapshot: ProtocolSnapshot) -> bool:
    subjects = snapshot.subjects
    if not (
        snapshot.procedures.uses_method(*NONINVASIVE_METHODS)
        and _is_minimal_risk(snapshot)
        and not subjects.includes_prisoners.is_yes
    ):
        return False
    return (
        snapshot.data.collects_identifiers.is_yes
        or subjects.includes_minors.is_yes
        or subjects.includes_pregnant_women.is_yes
        or subjects.includes_cognitively_impaired.is_yes
    )


def _noninvasive_build(snapshot: ProtocolSnapshot) -> CategoryResult:
    subjects = snapshot.subjects
    flags = []
    if subjects.includes_minors.is_yes:
        flags.append(Flag(FlagSeverity.MEDIUM, "Children require parental permission and child assent."))
    if subjects.includes_pregnant_women.is_yes:
        flags.append(
            Flag(FlagSeverity.MEDIUM, "Pregnant women require additional consent disclosures about fetal risk.")
        )
    return CategoryResult(
        qualifies=True,
        category=4,
        label="Category 4 — Noninvasive Procedures (Vulnerable Population or Identifiable)",
        reasons=[
            "Research involves noninvasive data collection with identifiable information or vulnerable populations.",
            "Qualifies for Expedited review as minimal risk research.",
            "45 CFR 46.110(b)(1), Category 4",
        ],
        confidence=0.78,
        flags=flags,
    )


# Category 5: existing identifiable records


def _existing_records_applies(snapshot: ProtocolSnapshot) -> bool:
    procedures = snapshot.procedures
    return procedures.uses_existing_data.is_yes and procedures.existing_data_identifiable.is_yes


def _existing_records_build(snapshot: ProtocolSnapshot) -> CategoryResult:
    return CategoryResult(
        qualifies=True,
        category=5,
        label="Category 5 — Existing Records (Identifiable)",
        reasons=[
            "Research involves collection/study of data from materials already collected for non-research purposes.",
            "Identifiable data requires Expedited review.",
            "45 CFR 46.110(b)(1), Category 5",
        ],
        confidence=0.75,
        flags=[
            Flag(FlagSeverity.MEDIUM, "Describe how you will access and protect identifiable existing records.")
        ],
    )


# Category 6: voice, video, digital or image recordings


def _recording_applies(snapshot: ProtocolSnapshot) -> bool:
    return (
        snapshot.procedures.involves_recording.is_yes
        and _is_minimal_risk(snapshot)
        and not snapshot.subjects.includes_prisoners.is_yes
    )


def _recording_build(snapshot: ProtocolSnapshot) -> CategoryResult:
    return CategoryResult(
        qualifies=True,
        category=6,
        label="Category 6 — Voice / Video / Image Recordings",
        reasons=[
            "Research involves collection of data from voice, video, digital, or image recordings.",
            "45 CFR 46.110(b)(1), Category 6",
        ],
        confidence=0.82,
        flags=[
            Flag(
                FlagSeverity.LOW,
                "Your consent form must disclose recording and describe how recordings will be stored, "
                "used, and destroyed.",
            )
        ],
    )


# Category 7: individual or group characteristics with identifiers


def _characteristics_applies(snapshot: ProtocolSnapshot) -> bool:
    return (
        snapshot.procedures.uses_method(*INDIVIDUAL_CHARACTERISTICS_METHODS)
        and snapshot.data.collects_identifiers.is_yes
        and _is_minimal_risk(snapshot)
    )


def _characteristics_build(snapshot: ProtocolSnapshot) -> CategoryResult:
    return CategoryResult(
        qualifies=True,
        category=7,
        label="Category 7 — Research on Individual Characteristics or Behavior",
        reasons=[
            "Research on individual or group characteristics, behavior, or factors affecting health using "
            "surveys or interviews with identifiable data.",
            "45 CFR 46.110(b)(1), Category 7",
        ],
        confidence=0.75,
        flags=[
            Flag(FlagSeverity.MEDIUM, "Ensure strong data security procedures given identifiable data collection."),
            Flag(
                FlagSeverity.LOW,
                "Consider whether de-identification is feasible to potentially qualify for Exempt status.",
            ),
        ],
    )


EXPEDITED_RULES: tuple[CategoryRule, ...] = (
    CategoryRule("expedited-2-blood", _blood_applies, _blood_build),
    CategoryRule("expedited-4-noninvasive", _noninvasive_applies, _noninvasive_build),
    CategoryRule("expedited-5-existing-records", _existing_records_applies, _existing_records_build),
    CategoryRule("expedited-6-recording", _recording_applies, _recording_build),
    CategoryRule("expedited-7-characteristics", _characteristics_applies, _characteristics_build),
)


def check_expedited_categories(snapshot: ProtocolSnapshot) -> CategoryResult:
    """Return the first applicable expedited category, or a non-qualifying result."""
    return match_first(EXPEDITED_RULES, snapshot)
