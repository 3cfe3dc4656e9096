"""Matcher Module - Candidate/job fit matching and shortlisting."""
from core.matcher.models import (
    Requirement, RequirementCategory, RequirementType, OriginLevel,
    CandidateProfile, CandidateSkill, CandidateExperience, CandidateEducation,
    JobRequirementSet, RequirementMatch, ScoreBreakdown, MatchResult,
    ShortlistOptions, ShortlistResult, VectorMatch
)
from core.matcher.service import MatcherService
from core.matcher.embedding_client import EmbeddingClient
from core.matcher.requirement_aggregator import RequirementAggregator
from core.matcher.requirement_matcher import RequirementMatcher
from core.matcher.similarity import SimilarityCalculator
from core.matcher.vector_index import VectorIndex, InMemoryVectorIndex

__all__ = [
    'MatcherService', 'EmbeddingClient', 'RequirementAggregator',
    'RequirementMatcher', 'SimilarityCalculator', 'VectorIndex', 'InMemoryVectorIndex',
    'Requirement', 'RequirementCategory', 'RequirementType', 'OriginLevel',
    'CandidateProfile', 'CandidateSkill', 'CandidateExperience', 'CandidateEducation',
    'JobRequirementSet', 'RequirementMatch', 'ScoreBreakdown', 'MatchResult',
    'ShortlistOptions', 'ShortlistResult', 'VectorMatch'
]
