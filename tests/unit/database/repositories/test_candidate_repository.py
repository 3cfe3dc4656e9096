"""Tests for CandidateProfileRepository mapping parsed resumes to profiles."""
import uuid

import pytest
from unittest.mock import MagicMock

from core.exceptions import NotFoundError
from core.matcher.models import CandidateSkill
from database.models import Candidate, ParsedResumeData
from database.repositories.candidate import CandidateProfileRepository, profile_from_resume


def make_resume(**overrides):
    data = dict(
        summary="Data engineer",
        skills=[{"name": "Python", "yearsOfExperience": 4}, {"name": "Spark"}, "SQL", {"years": 2}],
        experience=[{"title": "Engineer", "company": "Acme", "description": "ETL pipelines"}],
        education=[{"degree": "MSc", "fieldOfStudy": "Statistics"}],
    )
    data.update(overrides)
    return ParsedResumeData(**data)


class TestProfileFromResume:

    def test_maps_jsonb_payloads(self):
        profile = profile_from_resume("c-1", make_resume())

        assert profile.id == "c-1"
        assert profile.summary == "Data engineer"
        assert profile.skills == (
            CandidateSkill("Python", 4.0),
            CandidateSkill("Spark", None),
            CandidateSkill("SQL", None),
        )
        assert profile.experience[0].company == "Acme"
        assert profile.education[0].field_of_study == "Statistics"

    def test_snake_case_keys_accepted(self):
        resume = make_resume(
            skills=[{"name": "Go", "years_of_experience": "3"}],
            education=[{"degree": "BSc", "field_of_study": "Physics"}],
        )

        profile = profile_from_resume("c-1", resume)

        assert profile.skills == (CandidateSkill("Go", 3.0),)
        assert profile.education[0].field_of_study == "Physics"

    def test_missing_resume_gives_empty_profile(self):
        profile = profile_from_resume("c-1", None)

        assert profile.summary == ""
        assert profile.skills == ()

    def test_null_payloads(self):
        profile = profile_from_resume("c-1", make_resume(skills=None, experience=None, education=None, summary=None))

        assert profile.skills == profile.experience == profile.education == ()
        assert profile.summary == ""


class TestCandidateProfileRepository:

    @pytest.fixture
    def session(self):
        return MagicMock()

    def test_get_uses_latest_resume(self, session):
        candidate_id = uuid.uuid4()
        candidate = Candidate(id=candidate_id, email="a@b.c", first_name="A", last_name="B")
        candidate.parsed_resumes = [make_resume(summary="latest"), make_resume(summary="older")]
        session.execute.return_value.scalar_one_or_none.return_value = candidate

        profile = CandidateProfileRepository(session).get(str(candidate_id))

        assert profile.id == str(candidate_id)
        assert profile.summary == "latest"

    def test_unknown_candidate_raises(self, session):
        session.execute.return_value.scalar_one_or_none.return_value = None

        with pytest.raises(NotFoundError):
            CandidateProfileRepository(session).get(str(uuid.uuid4()))

    def test_malformed_id_raises_not_found_without_query(self, session):
        with pytest.raises(NotFoundError):
            CandidateProfileRepository(session).get("not-a-uuid")
        session.execute.assert_not_called()
