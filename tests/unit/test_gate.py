"""
Unit tests for the applicability gate.
"""

import pytest

from irbscreen.schemas.protocol import Answer, Prescreening, ProtocolSnapshot
from irbscreen.screening.gate import (
    CONFIDENCE_NOT_HUMAN_SUBJECTS,
    CONFIDENCE_NOT_RESEARCH,
    INSUFFICIENT_INFO_REASON,
    evaluate_applicability,
)
from irbscreen.screening.types import Priority, RecommendationType, ReviewType


def _snapshot(is_research: Answer, human_subjects: Answer) -> ProtocolSnapshot:
    return ProtocolSnapshot(
        prescreening=Prescreening(is_research=is_research, involves_human_subjects=human_subjects)
    )


class TestEvaluateApplicability:
    """Tests for the research / human-subjects gate."""

    @pytest.mark.parametrize(
        "is_research,human_subjects",
        [
            (Answer.UNANSWERED, Answer.YES),
            (Answer.YES, Answer.UNANSWERED),
            (Answer.UNANSWERED, Answer.UNANSWERED),
            (Answer.NO, Answer.UNANSWERED),
        ],
    )
    def test_insufficient_info(self, is_research, human_subjects):
        """Either question unanswered stops screening."""
        result = evaluate_applicability(_snapshot(is_research, human_subjects))

        assert result is not None
        assert result.type == ReviewType.INSUFFICIENT_INFO
        assert result.confidence == 0.0
        assert result.reasons == [INSUFFICIENT_INFO_REASON]
        assert result.recommendations == []

    def test_not_research(self):
        """Not research takes priority over not human subjects."""
        result = evaluate_applicability(_snapshot(Answer.NO, Answer.NO))

        assert result.type == ReviewType.NOT_RESEARCH
        assert result.confidence == CONFIDENCE_NOT_RESEARCH
        assert len(result.recommendations) == 2
        assert all(r.type == RecommendationType.COMPLIANCE for r in result.recommendations)
        assert all(r.priority == Priority.MEDIUM for r in result.recommendations)

    def test_not_human_subjects(self):
        """Research without human subjects is not reviewable."""
        result = evaluate_applicability(_snapshot(Answer.YES, Answer.NO))

        assert result.type == ReviewType.NOT_HUMAN_SUBJECTS
        assert result.confidence == CONFIDENCE_NOT_HUMAN_SUBJECTS
        assert "45 CFR 46.102(e)" in result.reasons[0]

    def test_continue(self):
        """Human-subjects research passes the gate."""
        assert evaluate_applicability(_snapshot(Answer.YES, Answer.YES)) is None

    def test_gate_results_have_no_category(self):
        """Gate outcomes never name a category."""
        for answers in [(Answer.UNANSWERED, Answer.YES), (Answer.NO, Answer.YES), (Answer.YES, Answer.NO)]:
            result = evaluate_applicability(_snapshot(*answers))
            assert result.category is None
            assert result.category_label is None
            assert result.flags == []
