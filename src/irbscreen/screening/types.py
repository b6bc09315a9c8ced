"""
Result types for IRB review screening.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ReviewType(str, Enum):
    """Review level determination."""

    NOT_RESEARCH = "NOT_RESEARCH"
    NOT_HUMAN_SUBJECTS = "NOT_HUMAN_SUBJECTS"
    EXEMPT = "EXEMPT"
    EXPEDITED = "EXPEDITED"
    FULL_BOARD = "FULL_BOARD"
    INSUFFICIENT_INFO = "INSUFFICIENT_INFO"

    @property
    def is_categorized(self) -> bool:
        """Exempt and expedited determinations name a regulatory category."""
        return self in (ReviewType.EXEMPT, ReviewType.EXPEDITED)

    @property
    def requires_submission(self) -> bool:
        return self in (ReviewType.EXEMPT, ReviewType.EXPEDITED, ReviewType.FULL_BOARD)


class FlagSeverity(str, Enum):
    """
    Flag severity.

    high/medium/low correspond to error/warning/info in the wizard.
    """

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def level(self) -> str:
        return {"high": "error", "medium": "warning", "low": "info"}[self.value]


class RecommendationType(str, Enum):
    """Kinds of advisory recommendations."""

    EXPEDITE = "expedite"
    COMPLIANCE = "compliance"
    PROTECTION = "protection"
    CONSISTENCY = "consistency"


class Priority(str, Enum):
    """Recommendation priority."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class Flag:
    """An advisory flag attached to a determination."""

    severity: FlagSeverity
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"severity": self.severity.value, "message": self.message}


@dataclass(frozen=True)
class Recommendation:
    """An actionable advisory. Never changes the determination."""

    type: RecommendationType
    priority: Priority
    title: str
    body: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "priority": self.priority.value,
            "title": self.title,
            "body": self.body,
        }


@dataclass
class TriggerResult:
    """Outcome of the full-board hard-trigger check."""

    reasons: list[str] = field(default_factory=list)
    flags: list[Flag] = field(default_factory=list)

    @property
    def triggered(self) -> bool:
        return bool(self.reasons)


@dataclass
class CategoryResult:
    """
    Outcome of an exempt or expedited category matcher.

    A non-qualifying result may still carry reasons, e.g. when the
    survey/interview category applied but was disqualified.
    """

    qualifies: bool
    category: Optional[int] = None
    label: Optional[str] = None
    reasons: list[str] = field(default_factory=list)
    confidence: float = 0.0
    flags: list[Flag] = field(default_factory=list)

    @classmethod
    def no_match(cls, reasons: Optional[list[str]] = None) -> "CategoryResult":
        return cls(qualifies=False, reasons=list(reasons or []))


@dataclass
class ReviewResult:
    """Complete screening determination for one snapshot."""

    type: ReviewType
    category: Optional[int] = None
    category_label: Optional[str] = None
    reasons: list[str] = field(default_factory=list)
    recommendations: list[Recommendation] = field(default_factory=list)
    confidence: float = 0.0
    flags: list[Flag] = field(default_factory=list)
    disclaimer: str = ""

    def __post_init__(self) -> None:
        if self.category is not None and not self.type.is_categorized:
            raise ValueError(f"{self.type.value} determinations carry no category")

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "category": self.category,
            "categoryLabel": self.category_label,
            "reasons": list(self.reasons),
            "recommendations": [r.to_dict() for r in self.recommendations],
            "confidence": self.confidence,
            "flags": [f.to_dict() for f in self.flags],
            "disclaimer": self.disclaimer,
        }
