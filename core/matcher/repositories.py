#!/usr/bin/env python3
"""
Read-only lookup contracts the matcher depends on.

Implemented by the SQLAlchemy repositories in database.repositories and by
in-memory doubles in tests.
"""
from typing import Any, Protocol, runtime_checkable

from core.matcher.models import CandidateProfile, JobRequirementSet


@runtime_checkable
class CandidateRepository(Protocol):
    """Protocol for resolving candidate profiles."""

    def get(self, candidate_id: Any) -> CandidateProfile:
        """
        Get a candidate profile by id.

        Raises:
            NotFoundError: If the candidate does not exist
        """
        ...


@runtime_checkable
class RequirementRepository(Protocol):
    """Protocol for resolving the requirement hierarchy of a job variant."""

    def get_for_job(self, job_ref: Any) -> JobRequirementSet:
        """
        Get family, template and variant requirements for a job variant.

        Raises:
            NotFoundError: If the job variant does not exist
        """
        ...
