"""
Pydantic schemas for protocol snapshots.
"""

from irbscreen.schemas.protocol import (
    Answer,
    Consent,
    Data,
    IdentifierType,
    MethodType,
    Prescreening,
    Procedures,
    ProtocolSnapshot,
    Researcher,
    RiskLevel,
    Risks,
    Study,
    Subjects,
)

__all__ = [
    "Answer",
    "Consent",
    "Data",
    "IdentifierType",
    "MethodType",
    "Prescreening",
    "Procedures",
    "ProtocolSnapshot",
    "Researcher",
    "RiskLevel",
    "Risks",
    "Study",
    "Subjects",
]
