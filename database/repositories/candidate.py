import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from core.exceptions import NotFoundError
from core.matcher.models import CandidateEducation, CandidateExperience, CandidateProfile, CandidateSkill
from database.models import Candidate, ParsedResumeData
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


def _first(entry: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = entry.get(key)
        if value is not None:
            return value
    return default


def _entries(payload: Optional[Iterable[Any]]) -> List[Dict[str, Any]]:
    """JSONB list entries as dicts; bare strings become {'name': value}."""
    entries = []
    for entry in payload or []:
        if isinstance(entry, dict):
            entries.append(entry)
        elif isinstance(entry, str):
            entries.append({'name': entry})
    return entries


def _years(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def profile_from_resume(candidate_id: str, resume: Optional[ParsedResumeData]) -> CandidateProfile:
    """Map parsed resume JSONB onto an immutable CandidateProfile."""
    if resume is None:
        return CandidateProfile(id=candidate_id)

    skills = tuple(
        CandidateSkill(
            name=str(_first(s, 'name', default='')),
            years_of_experience=_years(_first(s, 'yearsOfExperience', 'years_of_experience', 'years'))
        )
        for s in _entries(resume.skills)
        if _first(s, 'name')
    )
    experience = tuple(
        CandidateExperience(
            title=str(_first(e, 'title', 'name', default='')),
            company=str(_first(e, 'company', default='')),
            description=str(_first(e, 'description', default=''))
        )
        for e in _entries(resume.experience)
    )
    education = tuple(
        CandidateEducation(
            degree=str(_first(e, 'degree', 'name', default='')),
            field_of_study=str(_first(e, 'fieldOfStudy', 'field_of_study', 'field', default=''))
        )
        for e in _entries(resume.education)
    )

    return CandidateProfile(
        id=candidate_id,
        summary=resume.summary or "",
        skills=skills,
        experience=experience,
        education=education
    )


class CandidateProfileRepository(BaseRepository):
    def get(self, candidate_id: Any) -> CandidateProfile:
        """Get a candidate profile built from the latest parsed resume.

        Raises:
            NotFoundError: If the candidate does not exist
        """
        candidate_uuid = self.parse_id("Candidate", candidate_id)
        stmt = (
            select(Candidate)
            .options(selectinload(Candidate.parsed_resumes))
            .where(Candidate.id == candidate_uuid)
        )
        candidate = self.db.execute(stmt).scalar_one_or_none()
        if candidate is None:
            raise NotFoundError("Candidate", candidate_id)

        resume = candidate.parsed_resumes[0] if candidate.parsed_resumes else None
        if resume is None:
            logger.warning(f"Candidate {candidate_id} has no parsed resume data")

        return profile_from_resume(str(candidate.id), resume)
