#!/usr/bin/env python3
"""Test ScoringService assembling a MatchResult."""
import pytest

from core.config_loader import MatchingPolicy
from core.exceptions import ProviderError
from core.matcher.embedding_client import EmbeddingClient
from core.matcher.models import RequirementCategory
from core.matcher.requirement_matcher import RequirementMatcher, build_candidate_text
from core.scorer.service import ScoringService
from tests.mocks.matcher_mocks import (
    StubEmbeddingProvider, make_requirement, python_engineer_profile, unit_vector, vector_with_cosine
)


@pytest.fixture
def profile():
    return python_engineer_profile()


def make_matcher(provider, policy=None):
    return RequirementMatcher(EmbeddingClient(provider), policy=policy)


class TestScoringService:

    def test_breakdown_and_fit_score(self, profile):
        provider = StubEmbeddingProvider()
        requirements = [
            make_requirement("r1", "Python", weight=6),
            make_requirement("r2", "Golang", weight=4),
            make_requirement("r3", "AWS", RequirementCategory.SHOULD),
        ]

        result = ScoringService().score_candidate(profile, requirements, make_matcher(provider), "job-1")

        # must: (0.8 * 6 + 0 * 4) / 10 = 0.48
        assert result.breakdown.must_have_score == 48
        assert result.breakdown.should_have_score == 80
        assert result.breakdown.nice_to_have_score == 100
        assert result.fit_score == 63  # 28.8 + 24 + 10 = 62.8
        assert result.candidate_id == "cand-1"
        assert result.job_variant_id == "job-1"
        assert result.gaps == ["Missing: Golang"]
        assert [a.requirement.id for a in result.detailed_analysis] == ["r1", "r2", "r3"]

    def test_semantic_confidence_used(self, profile):
        provider = StubEmbeddingProvider(vectors={
            build_candidate_text(profile): unit_vector(0),
            "Cloud-native backend design": vector_with_cosine(0.85),
        })
        requirements = [make_requirement("r1", "Cloud-native backend design")]

        result = ScoringService().score_candidate(profile, requirements, make_matcher(provider), "job-1")

        analysis = result.detailed_analysis[0]
        assert analysis.confidence == pytest.approx(0.85)
        assert analysis.matched is True
        assert result.strengths == ["Strong in Cloud-native backend design"]
        assert analysis.explanation.startswith('Strong match (85% confidence)')

    def test_evidence_attached(self, profile):
        result = ScoringService().score_candidate(
            profile, [make_requirement("r1", "Python")], make_matcher(StubEmbeddingProvider()), "job-1"
        )

        assert result.detailed_analysis[0].evidence == [
            "Skill: Python (5 years)",
            "Experience: Senior Engineer at Acme",
        ]

    def test_max_evidence_from_policy(self, profile):
        policy = MatchingPolicy(max_evidence=1)
        provider = StubEmbeddingProvider()

        result = ScoringService(policy).score_candidate(
            profile, [make_requirement("r1", "Python")], make_matcher(provider, policy), "job-1"
        )

        assert result.detailed_analysis[0].evidence == ["Skill: Python (5 years)"]

    def test_provider_error_propagates_without_partial_result(self, profile):
        provider = StubEmbeddingProvider(fail_on=["Kubernetes"])
        requirements = [make_requirement("r1", "Python"), make_requirement("r2", "Kubernetes")]

        with pytest.raises(ProviderError):
            ScoringService().score_candidate(profile, requirements, make_matcher(provider), "job-1")
