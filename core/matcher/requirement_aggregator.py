#!/usr/bin/env python3
"""
Requirement Aggregator - Flatten the job hierarchy into one requirement list.

Requirements come from three levels (family -> template -> variant). A more
specific level overrides a less specific one when the normalized description
(trimmed, case-folded) is identical. Near-duplicates with different wording
are kept as distinct requirements.
"""
from typing import Any, Dict, Iterable, List
import logging

from core.exceptions import RequirementValidationError
from core.matcher.models import JobRequirementSet, Requirement, RequirementCategory
from core.matcher.repositories import RequirementRepository
from core.utils import normalize_description

logger = logging.getLogger(__name__)

MIN_DESCRIPTION_LENGTH = 3
MIN_WEIGHT = 1
MAX_WEIGHT = 10


def validate_requirement(requirement: Requirement) -> None:
    """
    Check a requirement record is usable for scoring.

    Raises:
        RequirementValidationError: On empty/short description, missing
            category, or weight outside [1, 10]
    """
    description = requirement.description
    if not isinstance(description, str) or len(description.strip()) < MIN_DESCRIPTION_LENGTH:
        raise RequirementValidationError(
            requirement.id, f"description must be at least {MIN_DESCRIPTION_LENGTH} characters"
        )

    if not isinstance(requirement.category, RequirementCategory):
        raise RequirementValidationError(
            requirement.id, f"unknown category {requirement.category!r}"
        )

    weight = requirement.weight
    if isinstance(weight, bool) or not isinstance(weight, int) or not MIN_WEIGHT <= weight <= MAX_WEIGHT:
        raise RequirementValidationError(
            requirement.id, f"weight must be an integer in [{MIN_WEIGHT}, {MAX_WEIGHT}], got {weight!r}"
        )


def aggregate_requirements(*levels: Iterable[Requirement]) -> List[Requirement]:
    """
    Deduplicate requirements across levels, later levels winning.

    Invalid requirements are logged and excluded.

    Args:
        levels: Requirement lists ordered least to most specific

    Returns:
        Deduplicated requirement list
    """
    unique: Dict[str, Requirement] = {}
    excluded = 0

    for level in levels:
        for requirement in level:
            try:
                validate_requirement(requirement)
            except RequirementValidationError as e:
                logger.warning(f"Excluding requirement from scoring: {e}")
                excluded += 1
                continue

            key = normalize_description(requirement.description)
            if key in unique:
                logger.debug(
                    f"Requirement '{requirement.description}' ({requirement.origin_level.value}) "
                    f"overrides {unique[key].origin_level.value}-level definition"
                )
                # Re-insert so the surviving entry sits where the override was declared
                del unique[key]
            unique[key] = requirement

    if excluded:
        logger.info(f"Excluded {excluded} invalid requirement(s)")

    return list(unique.values())


class RequirementAggregator:
    """Resolve a job reference to its deduplicated requirement list."""

    def __init__(self, repository: RequirementRepository):
        self.repository = repository

    def load(self, job_ref: Any) -> JobRequirementSet:
        """
        Fetch the requirement hierarchy for a job.

        Raises:
            NotFoundError: If the job reference cannot be resolved
        """
        return self.repository.get_for_job(job_ref)

    @staticmethod
    def aggregate(requirement_set: JobRequirementSet) -> List[Requirement]:
        return aggregate_requirements(
            requirement_set.family_requirements,
            requirement_set.template_requirements,
            requirement_set.variant_requirements,
        )

    def get_requirements(self, job_ref: Any) -> List[Requirement]:
        """Fetch and aggregate the requirements for a job."""
        requirement_set = self.load(job_ref)
        requirements = self.aggregate(requirement_set)
        logger.debug(f"Aggregated {len(requirements)} requirements for job {job_ref}")
        return requirements
