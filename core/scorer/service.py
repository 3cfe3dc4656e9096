#!/usr/bin/env python3
"""
Scoring Service - Exact fit scoring of one candidate against a requirement list.

Pipeline per candidate:
1. Confidence per requirement (RequirementMatcher, hybrid semantic + keyword)
2. MUST/SHOULD/NICE category scores and the weighted overall fit score
3. Evidence and explanation per requirement
4. Strengths, gaps and recommendations

Either the whole MatchResult is produced or the first error propagates;
no partial result is ever returned.
"""

from typing import List, Optional
import logging

from core.config_loader import MatchingPolicy
from core.matcher.explainability import explain_requirement, extract_insights, find_evidence
from core.matcher.models import (
    CandidateProfile, MatchResult, Requirement, RequirementCategory,
    RequirementMatch, ScoreBreakdown
)
from core.matcher.requirement_matcher import RequirementMatcher, build_candidate_text
from core.scorer import fit_score
from core.utils import round_half_up

logger = logging.getLogger(__name__)


class ScoringService:
    """
    Service for exact candidate scoring.

    Stateless apart from its policy; the RequirementMatcher passed per call
    carries the per-run embedding cache.
    """

    def __init__(self, policy: Optional[MatchingPolicy] = None):
        self.policy = policy or MatchingPolicy()

    def analyze_requirements(
        self,
        profile: CandidateProfile,
        requirements: List[Requirement],
        matcher: RequirementMatcher
    ) -> List[RequirementMatch]:
        """
        Score, evidence and explain every requirement for a candidate.

        Args:
            profile: Candidate profile
            requirements: Aggregated requirements
            matcher: RequirementMatcher bound to this run's embedding client

        Returns:
            One RequirementMatch per requirement, in requirement order
        """
        candidate_text = build_candidate_text(profile)
        analysis = []

        for requirement in requirements:
            confidence = matcher.score(candidate_text, requirement)
            matched = matcher.is_matched(confidence)
            evidence = find_evidence(profile, requirement, self.policy.max_evidence)
            analysis.append(RequirementMatch(
                requirement=requirement,
                matched=matched,
                confidence=confidence,
                evidence=evidence,
                explanation=explain_requirement(requirement, matched, confidence, evidence)
            ))

        return analysis

    def score_candidate(
        self,
        profile: CandidateProfile,
        requirements: List[Requirement],
        matcher: RequirementMatcher,
        job_variant_id: str
    ) -> MatchResult:
        """Calculate the full MatchResult of a candidate for a job variant.

        Raises:
            ProviderError: If an embedding cannot be generated
        """
        detailed_analysis = self.analyze_requirements(profile, requirements, matcher)

        by_category = {category: [] for category in RequirementCategory}
        for analysis in detailed_analysis:
            by_category[analysis.requirement.category].append((analysis.requirement, analysis.confidence))

        must_score = fit_score.category_score(by_category[RequirementCategory.MUST])
        should_score = fit_score.category_score(by_category[RequirementCategory.SHOULD])
        nice_score = fit_score.category_score(by_category[RequirementCategory.NICE])

        fit = fit_score.overall_fit_score(must_score, should_score, nice_score, self.policy)
        strengths, gaps, recommendations = extract_insights(detailed_analysis, self.policy)

        logger.debug(
            f"Candidate {profile.id} vs job {job_variant_id}: fit={fit}, "
            f"must={must_score:.1f}, should={should_score:.1f}, nice={nice_score:.1f}"
        )

        return MatchResult(
            candidate_id=profile.id,
            job_variant_id=job_variant_id,
            fit_score=fit,
            breakdown=ScoreBreakdown(
                must_have_score=round_half_up(must_score),
                should_have_score=round_half_up(should_score),
                nice_to_have_score=round_half_up(nice_score),
            ),
            strengths=strengths,
            gaps=gaps,
            recommendations=recommendations,
            detailed_analysis=detailed_analysis
        )
