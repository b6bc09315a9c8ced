"""
Tests for submission document selection and the submission checklist.
"""

import pytest

from irbscreen.documents import build_checklist, review_guidance, select_documents
from irbscreen.screening import ReviewType


def _keys(documents):
    return [d.key for d in documents]


def _checklist(snapshot, review_type):
    return {item.label: item.done for item in build_checklist(snapshot, review_type)}


class TestSelectDocuments:
    """Tests for template selection."""

    def test_exempt(self, exempt_survey):
        """Exempt protocols get the information sheet, not the full consent form."""
        assert _keys(select_documents(ReviewType.EXEMPT, exempt_survey)) == ["protocol", "consent_exempt"]

    @pytest.mark.parametrize("review_type", [ReviewType.EXPEDITED, ReviewType.FULL_BOARD])
    def test_full_consent(self, exempt_survey, review_type):
        """Expedited and full board protocols get the full consent form."""
        assert _keys(select_documents(review_type, exempt_survey)) == ["protocol", "consent_full"]

    def test_minors_with_assent(self, make_snapshot):
        """Minors add parental permission, and child assent when required."""
        snapshot = make_snapshot(subjects={"includesMinors": True}, consent={"assentRequired": True})

        assert _keys(select_documents(ReviewType.EXPEDITED, snapshot)) == [
            "protocol",
            "consent_full",
            "parent_permission",
            "child_assent",
        ]

    def test_minors_without_assent(self, make_snapshot):
        """Without assent only the parental permission form is added."""
        snapshot = make_snapshot(subjects={"includesMinors": True}, consent={"assentRequired": False})

        assert _keys(select_documents(ReviewType.FULL_BOARD, snapshot))[-1] == "parent_permission"

    @pytest.mark.parametrize(
        "review_type",
        [ReviewType.NOT_RESEARCH, ReviewType.NOT_HUMAN_SUBJECTS, ReviewType.INSUFFICIENT_INFO],
    )
    def test_no_submission(self, make_snapshot, review_type):
        """Non-reviewable outcomes need no documents."""
        snapshot = make_snapshot(subjects={"includesMinors": True})

        assert select_documents(review_type, snapshot) == []


class TestReviewGuidance:
    """Tests for review-path guidance."""

    @pytest.mark.parametrize("review_type", list(ReviewType))
    def test_every_type_has_guidance(self, review_type):
        """Each review type has a label, description and timeframe."""
        guidance = review_guidance(review_type)

        assert guidance.label
        assert guidance.description
        assert guidance.timeframe

    def test_full_board_attachments(self):
        """Full board lists the adverse event plan among its attachments."""
        guidance = review_guidance(ReviewType.FULL_BOARD)

        assert guidance.label == "Full Board Review"
        assert "Adverse event monitoring plan" in guidance.attachments
        assert len(guidance.attachments) == 11

    def test_not_research_has_no_attachments(self):
        """Outcomes without review need nothing attached."""
        data = review_guidance(ReviewType.NOT_RESEARCH).to_dict()

        assert data["timeframe"] == "N/A"
        assert data["attachments"] == []


class TestBuildChecklist:
    """Tests for the submission checklist."""

    def test_exempt_survey(self, exempt_survey):
        """The exempt survey has the fixed items with the exempt consent variant."""
        checklist = _checklist(exempt_survey, ReviewType.EXEMPT)

        assert checklist == {
            "CITI training certificate (PI)": True,
            "CITI training certificate (Faculty Advisor)": True,
            "Protocol description": True,
            "Recruitment materials (flyers, email scripts, social media posts)": True,
            "Survey / interview instrument": True,
            "Exempt consent information sheet (NO signature line)": None,
        }

    def test_blank_snapshot(self, blank_snapshot):
        """Nothing answered means nothing done, and no instrument is expected."""
        items = build_checklist(blank_snapshot, ReviewType.FULL_BOARD)

        assert [(i.label, i.done) for i in items] == [
            ("CITI training certificate (PI)", False),
            ("CITI training certificate (Faculty Advisor)", True),
            ("Protocol description", False),
            ("Recruitment materials (flyers, email scripts, social media posts)", False),
            ("Survey / interview instrument", None),
            ("Full informed consent form (with signature lines)", None),
        ]

    def test_student_needs_advisor_email(self, make_snapshot):
        """Student researchers need an advisor on record for the advisor certificate."""
        snapshot = make_snapshot(prescreening={"isStudentResearcher": True})

        assert _checklist(snapshot, ReviewType.EXEMPT)["CITI training certificate (Faculty Advisor)"] is False

    def test_instrument_missing_topics(self, make_snapshot):
        """Surveys without topic descriptions leave the instrument undone."""
        snapshot = make_snapshot(procedures={"surveyTopics": ""})

        assert _checklist(snapshot, ReviewType.EXEMPT)["Survey / interview instrument"] is False

    def test_conditional_items(self, make_snapshot):
        """Conditional items follow the protocol's answers."""
        snapshot = make_snapshot(
            subjects={"includesMinors": True},
            consent={
                "assentRequired": True,
                "parentPermissionRequired": False,
                "waiverOfConsent": True,
                "waiverBasis": "46.116(f)",
                "waiverOfDocumentation": True,
            },
            procedures={
                "involvesBloodDraw": True,
                "bloodDrawAmount": 10,
                "involvesDeception": True,
                "deceptionDebriefing": True,
                "involvesRandomization": True,
            },
            data={"hipaaApplicable": True},
            study={"isMultiSite": True},
        )

        items = build_checklist(snapshot, ReviewType.FULL_BOARD)

        assert [(i.label, i.done) for i in items[6:]] == [
            ("Parental/Guardian Permission Form", False),
            ("Child Assent Form", True),
            ("Blood draw protocol details (amounts, frequency)", True),
            ("Debriefing script", True),
            ("Randomization procedure description", False),
            ("HIPAA Authorization form or Waiver of Authorization request", None),
            ("Site Authorization letter(s)", None),
            ("Written justification for Waiver of Consent", True),
            ("Written justification for Waiver of Documentation", False),
        ]

    def test_parent_permission_unanswered_counts_done(self, make_snapshot):
        """Parental permission is only flagged when explicitly declined."""
        snapshot = make_snapshot(subjects={"includesMinors": True})

        assert _checklist(snapshot, ReviewType.EXPEDITED)["Parental/Guardian Permission Form"] is True
