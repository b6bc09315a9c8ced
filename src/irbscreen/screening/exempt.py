"""
Exempt category matcher (45 CFR 46.104(d)).

Categories are checked in a fixed order reflecting how narrow each one
is. Category 2 (surveys/interviews/public observation) carries its own
override: it is disqualified when critical identifiers are collected or
the survey topics mention a sensitive subject. A disqualified Category 2
ends exempt matching for the protocol.

The sensitive-topic scan is a literal keyword match over the free-text
survey topics. It both under- and over-triggers; keep it literal so the
determination stays reproducible and auditable.
"""

import re

from irbscreen.schemas.protocol import IdentifierType, MethodType, ProtocolSnapshot, RiskLevel
from irbscreen.screening.rules import CategoryRule, match_first
from irbscreen.screening.types import CategoryResult, Flag, FlagSeverity

SENSITIVE_TOPICS = (
    "sexual",
    "drug",
    "illegal",
    "abuse",
    "criminal",
    "immigration",
    "mental health",
    "financial distress",
)

SENSITIVE_TOPIC_PATTERN = re.compile("|".join(re.escape(t) for t in SENSITIVE_TOPICS), re.IGNORECASE)

# Only these identifier types disqualify Category 2.
# TODO: confirm with the IRB office whether email/institution identifiers should also disqualify.
CRITICAL_IDENTIFIERS = frozenset({IdentifierType.NAME, IdentifierType.SSN, IdentifierType.ID_NUMBER})

SURVEY_METHODS = (MethodType.SURVEY, MethodType.INTERVIEW, MethodType.OBSERVATION_PUBLIC)


def mentions_sensitive_topic(text: str) -> bool:
    """Literal keyword scan for sensitive survey topics."""
    return SENSITIVE_TOPIC_PATTERN.search(text or "") is not None


def collects_critical_identifiers(snapshot: ProtocolSnapshot) -> bool:
    data = snapshot.data
    return data.collects_identifiers.is_yes and any(t in CRITICAL_IDENTIFIERS for t in data.identifier_types)


def _no_minors_or_prisoners(snapshot: ProtocolSnapshot) -> bool:
    subjects = snapshot.subjects
    return not subjects.includes_minors.is_yes and not subjects.includes_prisoners.is_yes


# Category 1: normal educational practices


def _educational_applies(snapshot: ProtocolSnapshot) -> bool:
    return (
        snapshot.procedures.uses_method(MethodType.EDUCATIONAL_ASSESSMENT)
        and _no_minors_or_prisoners(snapshot)
        and snapshot.risks.risk_level != RiskLevel.GREATER
    )


def _educational_build(snapshot: ProtocolSnapshot) -> CategoryResult:
    flags = []
    if snapshot.subjects.includes_ub_students.is_yes:
        flags.append(
            Flag(
                FlagSeverity.MEDIUM,
                "Research with UB students requires extra care to ensure voluntariness. Power "
                "dynamics between instructor and students may affect free consent.",
            )
        )
    return CategoryResult(
        qualifies=True,
        category=1,
        label="Category 1 — Normal Educational Practices",
        reasons=[
            "Research involves normal educational practices, instructional strategies, or "
            "curricula in established educational settings.",
            "45 CFR 46.104(d)(1)",
        ],
        confidence=0.85,
        flags=flags,
    )


# Category 2: surveys, interviews, observation of public behavior


def _survey_applies(snapshot: ProtocolSnapshot) -> bool:
    return snapshot.procedures.uses_method(*SURVEY_METHODS) and _no_minors_or_prisoners(snapshot)


def _survey_build(snapshot: ProtocolSnapshot) -> CategoryResult:
    if collects_critical_identifiers(snapshot) or mentions_sensitive_topic(snapshot.procedures.survey_topics):
        return CategoryResult.no_match(
            ["Identifiable data with sensitive topics may not qualify for Category 2 exemption."]
        )
    return CategoryResult(
        qualifies=True,
        category=2,
        label="Category 2 — Surveys / Interviews / Observation",
        reasons=[
            "Research involves educational tests, surveys, interviews, or observation of public behavior.",
            "Disclosure of responses would not reasonably place subjects at risk of harm.",
            "45 CFR 46.104(d)(2)",
        ],
        confidence=0.82,
        flags=[
            Flag(
                FlagSeverity.LOW,
                "Ensure no sensitive topics (sexual behavior, drug use, illegal activity, etc.) are "
                "covered that could expose participants to harm.",
            )
        ],
    )


# Category 3: benign behavioral interventions, adults only


def _behavioral_applies(snapshot: ProtocolSnapshot) -> bool:
    min_age = snapshot.subjects.min_age
    return (
        snapshot.procedures.uses_method(MethodType.BEHAVIORAL_INTERVENTION)
        and min_age is not None
        and min_age >= 18
        and _no_minors_or_prisoners(snapshot)
        and not snapshot.data.collects_identifiers.is_yes
    )


def _behavioral_build(snapshot: ProtocolSnapshot) -> CategoryResult:
    return CategoryResult(
        qualifies=True,
        category=3,
        label="Category 3 — Benign Behavioral Interventions",
        reasons=[
            "Research involves only benign behavioral interventions with adult subjects.",
            "No identifiable information will be retained or recorded.",
            "45 CFR 46.104(d)(3)",
        ],
        confidence=0.78,
    )


# Category 4: secondary research; publicly available is tried before de-identified


def _public_data_applies(snapshot: ProtocolSnapshot) -> bool:
    procedures = snapshot.procedures
    return procedures.uses_existing_data.is_yes and procedures.data_source_publicly_available.is_yes


def _public_data_build(snapshot: ProtocolSnapshot) -> CategoryResult:
    return CategoryResult(
        qualifies=True,
        category=4,
        label="Category 4 — Secondary Research (Publicly Available Data)",
        reasons=[
            "Research uses existing data, documents, or specimens that are publicly available.",
            "45 CFR 46.104(d)(4)(i)",
        ],
        confidence=0.9,
    )


def _deidentified_data_applies(snapshot: ProtocolSnapshot) -> bool:
    procedures = snapshot.procedures
    return procedures.uses_existing_data.is_yes and procedures.existing_data_identifiable.is_no


def _deidentified_data_build(snapshot: ProtocolSnapshot) -> CategoryResult:
    return CategoryResult(
        qualifies=True,
        category=4,
        label="Category 4 — Secondary Research (De-identified Data)",
        reasons=[
            "Research uses existing data/biospecimens that cannot be linked to identifiable individuals.",
            "Data is recorded such that subjects cannot be identified.",
            "45 CFR 46.104(d)(4)(ii)",
        ],
        confidence=0.85,
        flags=[
            Flag(
                FlagSeverity.LOW,
                "Confirm that no code exists linking the data to individuals, or that you cannot access the key.",
            )
        ],
    )


# Category 6: taste and food quality


def _taste_applies(snapshot: ProtocolSnapshot) -> bool:
    return (
        snapshot.procedures.uses_method(MethodType.TASTE_FOOD)
        and snapshot.risks.risk_level == RiskLevel.MINIMAL
    )


def _taste_build(snapshot: ProtocolSnapshot) -> CategoryResult:
    return CategoryResult(
        qualifies=True,
        category=6,
        label="Category 6 — Taste and Food Quality Evaluation",
        reasons=[
            "Research involves taste and food quality evaluation with wholesome foods, not a controlled substance.",
            "45 CFR 46.104(d)(6)",
        ],
        confidence=0.9,
    )


EXEMPT_RULES: tuple[CategoryRule, ...] = (
    CategoryRule("exempt-1-educational", _educational_applies, _educational_build),
    CategoryRule("exempt-2-survey", _survey_applies, _survey_build),
    CategoryRule("exempt-3-behavioral", _behavioral_applies, _behavioral_build),
    CategoryRule("exempt-4-public-data", _public_data_applies, _public_data_build),
    CategoryRule("exempt-4-deidentified-data", _deidentified_data_applies, _deidentified_data_build),
    CategoryRule("exempt-6-taste", _taste_applies, _taste_build),
)


def check_exempt_categories(snapshot: ProtocolSnapshot) -> CategoryResult:
    """Return the first applicable exempt category, or a non-qualifying result."""
    return match_first(EXEMPT_RULES, snapshot)
