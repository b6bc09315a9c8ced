"""
Ordered category rules.

Category matchers are an explicit ordered list of (predicate, builder)
pairs evaluated in a single pass. The first rule whose predicate applies
decides the outcome, and its builder may still disqualify. Order is
load-bearing: do not sort, dedupe or evaluate these as a set.
"""

import logging
from dataclasses import dataclass
from typing import Callable

from irbscreen.schemas.protocol import ProtocolSnapshot
from irbscreen.screening.types import CategoryResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoryRule:
    """One regulatory category check."""

    name: str
    applies: Callable[[ProtocolSnapshot], bool]
    build: Callable[[ProtocolSnapshot], CategoryResult]


def match_first(rules: tuple[CategoryRule, ...], snapshot: ProtocolSnapshot) -> CategoryResult:
    """
    Evaluate rules in order and return the outcome of the first that applies.

    Args:
        rules: Ordered category rules
        snapshot: Protocol answers

    Returns:
        The applying rule's result (qualifying or disqualified), or a
        non-qualifying result if no rule applies
    """
    for rule in rules:
        if rule.applies(snapshot):
            result = rule.build(snapshot)
            if not result.qualifies:
                logger.debug(f"Rule {rule.name} applied but disqualified")
            return result
    return CategoryResult.no_match()
