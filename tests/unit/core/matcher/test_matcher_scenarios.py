#!/usr/bin/env python3
"""End-to-end scoring scenarios through MatcherService.match_candidate_to_job."""
import json

import pytest

from core.exceptions import NotFoundError, ProviderError
from core.matcher.embedding_client import EmbeddingClient
from core.matcher.models import (
    CandidateProfile, CandidateSkill, JobRequirementSet, OriginLevel, RequirementCategory
)
from core.matcher.service import MatcherService
from core.matcher.vector_index import InMemoryVectorIndex
from core.utils import round_half_up
from tests.mocks.matcher_mocks import (
    InMemoryCandidateRepository, InMemoryRequirementRepository, StubEmbeddingProvider,
    make_requirement, python_engineer_profile
)


def build_service(profiles, jobs, provider=None):
    provider = provider or StubEmbeddingProvider()
    service = MatcherService(
        candidates=InMemoryCandidateRepository(profiles),
        requirements=InMemoryRequirementRepository(jobs),
        embeddings=EmbeddingClient(provider),
        vector_index=InMemoryVectorIndex()
    )
    return service, provider


class TestScenarios:

    def test_scenario_a_keyword_match_on_single_must_requirement(self):
        candidate = CandidateProfile(id="cand-a", skills=(CandidateSkill("JavaScript"),))
        job = JobRequirementSet(
            job_id="job-a",
            variant_requirements=(make_requirement("r1", "JavaScript proficiency", weight=8),)
        )
        service, _ = build_service([candidate], [job])

        result = service.match_candidate_to_job("cand-a", "job-a")

        analysis = result.detailed_analysis[0]
        assert analysis.matched is True
        assert analysis.confidence == pytest.approx(0.8)
        assert result.breakdown.must_have_score == 80
        assert result.breakdown.should_have_score == 100
        assert result.breakdown.nice_to_have_score == 100
        assert result.fit_score == round_half_up(80 * 0.6 + 100 * 0.3 + 100 * 0.1)
        assert result.fit_score >= result.breakdown.must_have_score * 0.6
        assert result.strengths == ["Strong in JavaScript proficiency"]
        assert result.gaps == []

    def test_scenario_b_unrelated_skill_is_a_gap(self):
        candidate = CandidateProfile(id="cand-b", skills=(CandidateSkill("Java", 4),))
        job = JobRequirementSet(
            job_id="job-b",
            variant_requirements=(make_requirement("r1", "Python"),)
        )
        service, _ = build_service([candidate], [job])

        result = service.match_candidate_to_job("cand-b", "job-b")

        analysis = result.detailed_analysis[0]
        assert analysis.matched is False
        assert analysis.confidence < 0.7
        assert result.gaps == ["Missing: Python"]
        assert result.recommendations == ["Consider training or certification in Python"]
        assert result.breakdown.must_have_score == 0
        assert result.fit_score == 40
        assert analysis.explanation.endswith("No direct evidence found in candidate profile.")

    def test_scenario_c_variant_requirement_overrides_family(self):
        candidate = CandidateProfile(id="cand-c", skills=(CandidateSkill("React", 2),))
        job = JobRequirementSet(
            job_id="job-c",
            family_requirements=(make_requirement("fam", "React experience", RequirementCategory.SHOULD,
                                                  weight=3, origin_level=OriginLevel.FAMILY),),
            variant_requirements=(make_requirement("var", "react experience", RequirementCategory.MUST,
                                                   weight=9, origin_level=OriginLevel.VARIANT),)
        )
        service, _ = build_service([candidate], [job])

        result = service.match_candidate_to_job("cand-c", "job-c")

        assert len(result.detailed_analysis) == 1
        requirement = result.detailed_analysis[0].requirement
        assert requirement.weight == 9
        assert requirement.origin_level == OriginLevel.VARIANT


class TestMatchCandidateToJob:

    def test_no_requirements_scores_100(self):
        service, provider = build_service([python_engineer_profile()], [JobRequirementSet(job_id="empty")])

        result = service.match_candidate_to_job("cand-1", "empty")

        assert result.fit_score == 100
        assert result.detailed_analysis == []
        assert provider.calls == []

    def test_single_requirement_category_score_independent_of_weight(self):
        scores = set()
        for weight in (1, 5, 10):
            job = JobRequirementSet(
                job_id="job",
                variant_requirements=(make_requirement("r1", "Python Django", RequirementCategory.SHOULD, weight=weight),)
            )
            service, _ = build_service([python_engineer_profile()], [job])
            scores.add(service.match_candidate_to_job("cand-1", "job").breakdown.should_have_score)

        # one of two keywords matched: 0.5 * 0.8 damping
        assert scores == {40}

    def test_deterministic_output(self):
        job = JobRequirementSet(
            job_id="job",
            variant_requirements=(
                make_requirement("r1", "Python"),
                make_requirement("r2", "AWS", RequirementCategory.SHOULD),
                make_requirement("r3", "Kubernetes"),
                make_requirement("r4", "Computer Science degree", RequirementCategory.NICE),
            )
        )
        first, _ = build_service([python_engineer_profile()], [job])
        second, _ = build_service([python_engineer_profile()], [job])

        a = json.dumps(first.match_candidate_to_job("cand-1", "job").to_dict(), sort_keys=True)
        b = json.dumps(second.match_candidate_to_job("cand-1", "job").to_dict(), sort_keys=True)

        assert a == b

    def test_unknown_candidate_raises_before_scoring(self):
        job = JobRequirementSet(job_id="job", variant_requirements=(make_requirement("r1", "Python"),))
        service, provider = build_service([], [job])

        with pytest.raises(NotFoundError):
            service.match_candidate_to_job("ghost", "job")
        assert provider.calls == []

    def test_unknown_job_raises_before_scoring(self):
        service, provider = build_service([python_engineer_profile()], [])

        with pytest.raises(NotFoundError):
            service.match_candidate_to_job("cand-1", "ghost-job")
        assert provider.calls == []

    def test_provider_error_is_hard_failure(self):
        job = JobRequirementSet(job_id="job", variant_requirements=(make_requirement("r1", "Python"),))
        service, _ = build_service(
            [python_engineer_profile()], [job], provider=StubEmbeddingProvider(fail_all=True)
        )

        with pytest.raises(ProviderError):
            service.match_candidate_to_job("cand-1", "job")

    def test_result_serializes_with_camel_case_keys(self):
        job = JobRequirementSet(job_id="job", variant_requirements=(make_requirement("r1", "Python"),))
        service, _ = build_service([python_engineer_profile()], [job])

        data = service.match_candidate_to_job("cand-1", "job").to_dict()

        assert data["candidateId"] == "cand-1"
        assert data["jobVariantId"] == "job"
        assert set(data["breakdown"]) == {"mustHaveScore", "shouldHaveScore", "niceToHaveScore"}
        assert data["detailedAnalysis"][0]["requirement"]["category"] == "must"
        json.dumps(data)
