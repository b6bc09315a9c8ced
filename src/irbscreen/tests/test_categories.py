"""
Tests for the exempt and expedited category matchers.
"""

import pytest

from irbscreen.screening import check_exempt_categories, check_expedited_categories
from irbscreen.screening.exempt import EXEMPT_RULES
from irbscreen.screening.expedited import EXPEDITED_RULES
from irbscreen.screening.types import FlagSeverity


class TestExemptCategories:
    """Tests for 45 CFR 46.104(d) matching."""

    def test_rule_order(self):
        """Categories are tried narrowest first; public data before de-identified."""
        assert [rule.name for rule in EXEMPT_RULES] == [
            "exempt-1-educational",
            "exempt-2-survey",
            "exempt-3-behavioral",
            "exempt-4-public-data",
            "exempt-4-deidentified-data",
            "exempt-6-taste",
        ]

    def test_educational_practice(self, make_snapshot):
        """Educational assessment is Category 1 and wins over the survey category."""
        snapshot = make_snapshot(
            procedures={"methodTypes": ["educational_assessment", "survey"]},
            subjects={"includesUBStudents": True},
        )

        result = check_exempt_categories(snapshot)

        assert result.qualifies
        assert result.category == 1
        assert result.confidence == 0.85
        assert result.reasons[-1] == "45 CFR 46.104(d)(1)"
        assert [f.severity for f in result.flags] == [FlagSeverity.MEDIUM]

    def test_educational_practice_excluded_at_greater_risk(self, make_snapshot):
        """Category 1 does not apply to greater-than-minimal-risk studies."""
        snapshot = make_snapshot(
            procedures={"methodTypes": ["educational_assessment"]},
            risks={"riskLevel": "greater"},
        )

        assert not check_exempt_categories(snapshot).qualifies

    def test_survey_category(self, exempt_survey):
        """Survey without identifiers or sensitive topics is Category 2."""
        result = check_exempt_categories(exempt_survey)

        assert result.qualifies
        assert result.category == 2
        assert result.confidence == 0.82
        assert [f.severity for f in result.flags] == [FlagSeverity.LOW]

    @pytest.mark.parametrize("identifier", ["name", "ssn", "id_number"])
    def test_critical_identifier_disqualifies_survey(self, make_snapshot, identifier):
        """Names, SSNs and ID numbers disqualify Category 2."""
        snapshot = make_snapshot(data={"collectsIdentifiers": True, "identifierTypes": [identifier]})

        result = check_exempt_categories(snapshot)

        assert not result.qualifies
        assert result.reasons == [
            "Identifiable data with sensitive topics may not qualify for Category 2 exemption."
        ]

    @pytest.mark.parametrize("identifier", ["email", "institution", "phone"])
    def test_other_identifiers_keep_survey_exempt(self, make_snapshot, identifier):
        """Identifiers outside the critical set do not disqualify Category 2."""
        snapshot = make_snapshot(data={"collectsIdentifiers": True, "identifierTypes": [identifier]})

        assert check_exempt_categories(snapshot).category == 2

    def test_identifier_types_ignored_when_not_collecting(self, make_snapshot):
        """Leftover identifier selections count only when identifiers are collected."""
        snapshot = make_snapshot(data={"collectsIdentifiers": False, "identifierTypes": ["name"]})

        assert check_exempt_categories(snapshot).category == 2

    def test_sensitive_topic_disqualifies_survey(self, make_snapshot):
        """A sensitive keyword in the survey topics disqualifies Category 2."""
        snapshot = make_snapshot(procedures={"surveyTopics": "History of Substance ABUSE"})

        assert not check_exempt_categories(snapshot).qualifies

    def test_disqualified_survey_stops_exempt_matching(self, make_snapshot):
        """Later exempt categories are not tried once Category 2 is disqualified."""
        snapshot = make_snapshot(
            procedures={
                "surveyTopics": "immigration status",
                "usesExistingData": True,
                "dataSourcePubliclyAvailable": True,
            }
        )

        result = check_exempt_categories(snapshot)

        assert not result.qualifies
        assert result.category is None

    def test_minors_block_survey(self, make_snapshot):
        """Surveys of minors are not exempt under Category 2."""
        snapshot = make_snapshot(subjects={"includesMinors": True, "minAge": 12})

        assert not check_exempt_categories(snapshot).qualifies

    def test_benign_behavioral_intervention(self, make_snapshot):
        """Adult behavioral intervention without identifiers is Category 3."""
        snapshot = make_snapshot(procedures={"methodTypes": ["behavioral_intervention"]})

        result = check_exempt_categories(snapshot)

        assert result.category == 3
        assert result.confidence == 0.78

    def test_behavioral_intervention_requires_known_adult_age(self, make_snapshot):
        """Category 3 needs a minimum age of at least 18 on record."""
        snapshot = make_snapshot(
            procedures={"methodTypes": ["behavioral_intervention"]},
            subjects={"minAge": ""},
        )

        assert not check_exempt_categories(snapshot).qualifies

    def test_public_data_preferred_over_deidentified(self, make_snapshot):
        """Publicly available data matches before the de-identified branch."""
        snapshot = make_snapshot(
            procedures={
                "methodTypes": ["secondary_data"],
                "usesExistingData": True,
                "dataSourcePubliclyAvailable": True,
                "existingDataIdentifiable": False,
            }
        )

        result = check_exempt_categories(snapshot)

        assert result.category == 4
        assert result.confidence == 0.9
        assert "45 CFR 46.104(d)(4)(i)" in result.reasons

    def test_deidentified_data(self, make_snapshot):
        """De-identified existing data is Category 4 with a key-access flag."""
        snapshot = make_snapshot(
            procedures={
                "methodTypes": ["secondary_data"],
                "usesExistingData": True,
                "existingDataIdentifiable": False,
            }
        )

        result = check_exempt_categories(snapshot)

        assert result.category == 4
        assert result.confidence == 0.85
        assert "45 CFR 46.104(d)(4)(ii)" in result.reasons
        assert "cannot access the key" in result.flags[0].message

    def test_unanswered_identifiability_is_not_deidentified(self, make_snapshot):
        """Only an explicit No counts as de-identified."""
        snapshot = make_snapshot(procedures={"methodTypes": ["secondary_data"], "usesExistingData": True})

        assert not check_exempt_categories(snapshot).qualifies

    def test_taste_evaluation(self, make_snapshot):
        """Taste and food evaluation at minimal risk is Category 6."""
        snapshot = make_snapshot(procedures={"methodTypes": ["taste_food"]})

        result = check_exempt_categories(snapshot)

        assert result.category == 6
        assert result.confidence == 0.9

    def test_no_match(self, make_snapshot):
        """Unmatched protocols do not qualify and carry no reasons."""
        snapshot = make_snapshot(procedures={"methodTypes": ["physiological"]})

        result = check_exempt_categories(snapshot)

        assert not result.qualifies
        assert result.reasons == []


class TestExpeditedCategories:
    """Tests for 45 CFR 46.110(b)(1) matching."""

    def test_rule_order(self):
        """Categories keep the regulation's numbering and order."""
        assert [rule.name for rule in EXPEDITED_RULES] == [
            "expedited-2-blood",
            "expedited-4-noninvasive",
            "expedited-5-existing-records",
            "expedited-6-recording",
            "expedited-7-characteristics",
        ]

    def test_blood_collection(self, make_snapshot):
        """Minimal-risk blood draw from adults is Category 2."""
        snapshot = make_snapshot(
            procedures={"methodTypes": ["physiological"], "involvesBloodDraw": True, "bloodDrawAmount": 20}
        )

        result = check_expedited_categories(snapshot)

        assert result.category == 2
        assert result.confidence == 0.8
        assert result.reasons[-1] == "45 CFR 46.110(b)(1), Category 2"

    def test_blood_collection_requires_minimal_risk(self, make_snapshot):
        """Category 2 needs the minimal risk level specifically."""
        snapshot = make_snapshot(
            procedures={"methodTypes": ["physiological"], "involvesBloodDraw": True},
            risks={"riskLevel": "minor"},
        )

        assert not check_expedited_categories(snapshot).qualifies

    def test_noninvasive_with_identifiers(self, make_snapshot):
        """Identifiable survey data is Category 4 before Category 7."""
        snapshot = make_snapshot(data={"collectsIdentifiers": True, "identifierTypes": ["name"]})

        result = check_expedited_categories(snapshot)

        assert result.category == 4
        assert result.confidence == 0.78
        assert result.flags == []

    def test_noninvasive_vulnerable_population_flags(self, make_snapshot):
        """Minors and pregnant women each add a protection flag."""
        snapshot = make_snapshot(
            procedures={"methodTypes": ["cognitive_test"]},
            subjects={"includesMinors": True, "includesPregnantWomen": True, "minAge": 10},
        )

        result = check_expedited_categories(snapshot)

        assert result.category == 4
        assert [f.severity for f in result.flags] == [FlagSeverity.MEDIUM, FlagSeverity.MEDIUM]

    def test_existing_identifiable_records(self, make_snapshot):
        """Identifiable existing data is Category 5."""
        snapshot = make_snapshot(
            procedures={
                "methodTypes": ["secondary_data"],
                "usesExistingData": True,
                "existingDataIdentifiable": True,
            }
        )

        result = check_expedited_categories(snapshot)

        assert result.category == 5
        assert result.confidence == 0.75

    def test_recording(self, make_snapshot):
        """Minimal-risk recordings are Category 6 with a consent flag."""
        snapshot = make_snapshot(procedures={"methodTypes": ["focus_group"], "involvesRecording": True})

        result = check_expedited_categories(snapshot)

        assert result.category == 6
        assert result.confidence == 0.82
        assert "consent form must disclose recording" in result.flags[0].message

    def test_individual_characteristics(self, make_snapshot):
        """Category 7 applies when Category 4 is blocked by prisoners."""
        snapshot = make_snapshot(
            data={"collectsIdentifiers": True, "identifierTypes": ["name"]},
            subjects={"includesPrisoners": True},
        )

        result = check_expedited_categories(snapshot)

        assert result.category == 7
        assert result.confidence == 0.75
        assert [f.severity for f in result.flags] == [FlagSeverity.MEDIUM, FlagSeverity.LOW]

    def test_no_match(self, exempt_survey):
        """A protocol with no expedited features does not qualify."""
        assert not check_expedited_categories(exempt_survey).qualifies
