#!/usr/bin/env python3
"""
Matcher Models - Data structures for candidate/job fit scoring.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Any, Optional, Tuple


class RequirementType(str, Enum):
    SKILL = "skill"
    EXPERIENCE = "experience"
    EDUCATION = "education"
    CERTIFICATION = "certification"
    OTHER = "other"


class RequirementCategory(str, Enum):
    MUST = "must"
    SHOULD = "should"
    NICE = "nice"


class OriginLevel(str, Enum):
    """Level of the job hierarchy a requirement was defined at (least to most specific)."""
    FAMILY = "family"
    TEMPLATE = "template"
    VARIANT = "variant"


DEFAULT_REQUIREMENT_WEIGHT = 5


@dataclass(frozen=True)
class Requirement:
    """A weighted, categorized job requirement."""
    id: str
    description: str
    category: Optional[RequirementCategory]
    weight: int = DEFAULT_REQUIREMENT_WEIGHT
    type: Optional[RequirementType] = None
    alternatives: Tuple[str, ...] = ()
    origin_level: OriginLevel = OriginLevel.VARIANT

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'type': self.type.value if self.type else None,
            'category': self.category.value if self.category else None,
            'description': self.description,
            'weight': self.weight,
            'alternatives': list(self.alternatives),
            'originLevel': self.origin_level.value,
        }


@dataclass(frozen=True)
class CandidateSkill:
    name: str
    years_of_experience: Optional[float] = None


@dataclass(frozen=True)
class CandidateExperience:
    title: str
    company: str = ""
    description: str = ""


@dataclass(frozen=True)
class CandidateEducation:
    degree: str
    field_of_study: str = ""


@dataclass(frozen=True)
class CandidateProfile:
    """Read-only candidate profile used as scoring input."""
    id: str
    summary: str = ""
    skills: Tuple[CandidateSkill, ...] = ()
    experience: Tuple[CandidateExperience, ...] = ()
    education: Tuple[CandidateEducation, ...] = ()


@dataclass(frozen=True)
class JobRequirementSet:
    """Requirements of a job variant at each level of the job hierarchy."""
    job_id: str
    family_requirements: Tuple[Requirement, ...] = ()
    template_requirements: Tuple[Requirement, ...] = ()
    variant_requirements: Tuple[Requirement, ...] = ()
    title: Optional[str] = None
    description: Optional[str] = None


@dataclass
class RequirementMatch:
    """Result of matching a single requirement."""
    requirement: Requirement
    matched: bool
    confidence: float
    evidence: List[str] = field(default_factory=list)
    explanation: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'requirement': self.requirement.to_dict(),
            'matched': self.matched,
            'confidence': self.confidence,
            'evidence': list(self.evidence),
            'explanation': self.explanation,
        }


@dataclass(frozen=True)
class ScoreBreakdown:
    must_have_score: int
    should_have_score: int
    nice_to_have_score: int

    def to_dict(self) -> Dict[str, int]:
        return {
            'mustHaveScore': self.must_have_score,
            'shouldHaveScore': self.should_have_score,
            'niceToHaveScore': self.nice_to_have_score,
        }


@dataclass
class MatchResult:
    """Complete fit score of one candidate against one job variant."""
    candidate_id: str
    job_variant_id: str
    fit_score: int
    breakdown: ScoreBreakdown
    strengths: List[str] = field(default_factory=list)
    gaps: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    detailed_analysis: List[RequirementMatch] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'candidateId': self.candidate_id,
            'jobVariantId': self.job_variant_id,
            'fitScore': self.fit_score,
            'breakdown': self.breakdown.to_dict(),
            'strengths': list(self.strengths),
            'gaps': list(self.gaps),
            'recommendations': list(self.recommendations),
            'detailedAnalysis': [m.to_dict() for m in self.detailed_analysis],
        }


@dataclass(frozen=True)
class ShortlistOptions:
    """Options for shortlisting candidates for a job."""
    min_fit_score: int = 60
    max_results: int = 50

    def __post_init__(self):
        if not 0 <= self.min_fit_score <= 100:
            raise ValueError(f"min_fit_score must be in [0, 100], got {self.min_fit_score}")
        if self.max_results <= 0:
            raise ValueError(f"max_results must be positive, got {self.max_results}")


@dataclass
class ShortlistResult:
    """Ranked shortlist plus bookkeeping about the bulk run."""
    job_variant_id: str
    matches: List[MatchResult] = field(default_factory=list)
    prefiltered: int = 0
    skipped_errors: int = 0
    skipped_missing: int = 0

    @property
    def skipped(self) -> int:
        return self.skipped_errors + self.skipped_missing

    def to_dict(self) -> Dict[str, Any]:
        return {
            'jobVariantId': self.job_variant_id,
            'matches': [m.to_dict() for m in self.matches],
            'prefiltered': self.prefiltered,
            'skippedErrors': self.skipped_errors,
            'skippedMissing': self.skipped_missing,
        }


@dataclass(frozen=True)
class VectorMatch:
    """One hit from a vector index query."""
    entity_id: str
    raw_score: float
