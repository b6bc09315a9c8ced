"""
Pytest configuration and shared fixtures for IRB Screen tests.
"""

import copy
from typing import Any, Callable

import pytest

from irbscreen.schemas.protocol import ProtocolSnapshot


def _exempt_survey_form() -> dict[str, Any]:
    """Adult course-feedback survey with no identifiers (exempt Category 2)."""
    return {
        "prescreening": {
            "isResearch": True,
            "involvesHumanSubjects": True,
            "isStudentResearcher": False,
            "hasCITITraining": True,
            "citiExpiryDate": "2030-01-01",
        },
        "researcher": {
            "piFirstName": "Dana",
            "piLastName": "Okafor",
            "piEmail": "dokafor@bridgeport.edu",
            "piDepartment": "Education",
        },
        "study": {
            "title": "Course Preference Survey",
            "studyPurpose": "Understand which course formats students prefer.",
        },
        "subjects": {
            "totalParticipants": 120,
            "minAge": 18,
            "maxAge": 65,
            "includesMinors": False,
            "includesPrisoners": False,
            "includesPregnantWomen": False,
            "includesCognitivelyImpaired": False,
            "includesUBStudents": False,
            "subjectPopulation": "Adult continuing-education students",
            "recruitmentMethod": ["email"],
        },
        "procedures": {
            "methodTypes": ["survey"],
            "surveyTopics": "course preferences",
            "involvesDeception": False,
            "involvesRecording": False,
            "involvesBloodDraw": False,
            "usesExistingData": False,
        },
        "risks": {
            "riskLevel": "minimal",
            "riskMinimization": "Surveys are anonymous and optional.",
        },
        "data": {
            "collectsIdentifiers": False,
            "identifierTypes": [],
            "dataStorageLocation": ["ub_network"],
            "dataEncrypted": True,
        },
        "consent": {
            "consentRequired": True,
            "consentProcess": "Information sheet shown before the survey.",
        },
    }


@pytest.fixture
def exempt_survey_form() -> dict[str, Any]:
    """Wizard formData for a protocol that qualifies for exempt Category 2."""
    return _exempt_survey_form()


@pytest.fixture
def make_form() -> Callable[..., dict[str, Any]]:
    """
    Factory for formData based on the exempt survey protocol.

    Keyword arguments are section names mapped to field overrides, e.g.
    make_form(risks={"riskLevel": "greater"}).
    """

    def _make(**sections: dict[str, Any]) -> dict[str, Any]:
        form = copy.deepcopy(_exempt_survey_form())
        for section, overrides in sections.items():
            form.setdefault(section, {}).update(overrides)
        return form

    return _make


@pytest.fixture
def make_snapshot(make_form) -> Callable[..., ProtocolSnapshot]:
    """Factory for parsed snapshots, with the same overrides as make_form."""

    def _make(**sections: dict[str, Any]) -> ProtocolSnapshot:
        return ProtocolSnapshot.from_form_data(make_form(**sections))

    return _make


@pytest.fixture
def exempt_survey(make_snapshot) -> ProtocolSnapshot:
    """Parsed exempt Category 2 survey protocol."""
    return make_snapshot()


@pytest.fixture
def blank_snapshot() -> ProtocolSnapshot:
    """Snapshot of a wizard nobody has touched yet."""
    return ProtocolSnapshot()
