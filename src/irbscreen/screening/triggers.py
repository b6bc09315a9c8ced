"""
Full-board hard triggers.

Each trigger is legally non-waivable and is evaluated independently.
Every trigger that fires contributes its reason and flag, so the caller
can present all concerns rather than the first one found.
"""

from irbscreen.schemas.protocol import ProtocolSnapshot, RiskLevel
from irbscreen.screening.types import Flag, FlagSeverity, TriggerResult


def check_full_board_triggers(snapshot: ProtocolSnapshot) -> TriggerResult:
    """
    Evaluate all hard triggers.

    Args:
        snapshot: Protocol answers

    Returns:
        TriggerResult with one reason and one flag per fired trigger
    """
    subjects = snapshot.subjects
    procedures = snapshot.procedures
    result = TriggerResult()

    # Subpart C: prisoners can never be exempted or expedited
    if subjects.includes_prisoners.is_yes:
        result.reasons.append(
            "Research involves prisoners as subjects (45 CFR 46 Subpart C requires Full Board review)."
        )
        result.flags.append(
            Flag(
                FlagSeverity.HIGH,
                "Prisoner research requires Full Board review and specific protections under Subpart C.",
            )
        )

    if snapshot.risks.risk_level == RiskLevel.GREATER:
        result.reasons.append(
            "Research involves greater than minimal risk to participants (45 CFR 46.102(j))."
        )
        result.flags.append(
            Flag(FlagSeverity.HIGH, "Greater-than-minimal-risk research requires Full Board review.")
        )

    if procedures.involves_deception.is_yes and procedures.deception_debriefing.is_no:
        result.reasons.append("Research involves deception without planned debriefing.")
        result.flags.append(
            Flag(FlagSeverity.HIGH, "Deception studies without debriefing require Full Board review.")
        )

    return result
