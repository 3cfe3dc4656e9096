#!/usr/bin/env python3
"""
Matcher Service - Candidate/job fit matching and shortlisting.

Two entry points:
1. match_candidate_to_job: exact scoring of one candidate (hard failure on any error)
2. find_matching_candidates: two-stage shortlist
   - Stage 1: vector pre-filter of the candidate pool with one composite job embedding
   - Stage 2: exact scoring (ScoringService) of the pre-filtered set only

Collaborators are passed in explicitly; nothing is looked up from a registry.
"""
from concurrent.futures import ThreadPoolExecutor
from typing import Any, List, Optional, Tuple
import logging

from core.config_loader import MatchingPolicy, ShortlistConfig
from core.exceptions import NotFoundError, ProviderError, is_skippable
from core.matcher.embedding_client import EmbeddingClient
from core.matcher.models import (
    CandidateProfile, JobRequirementSet, MatchResult, Requirement,
    RequirementCategory, ShortlistOptions, ShortlistResult, VectorMatch
)
from core.matcher.repositories import CandidateRepository, RequirementRepository
from core.matcher.requirement_aggregator import RequirementAggregator
from core.matcher.requirement_matcher import RequirementMatcher
from core.matcher.similarity import SimilarityCalculator
from core.matcher.vector_index import VectorIndex
from core.scorer import fit_score
from core.scorer.service import ScoringService
from core.utils import similarity_from_raw_score

logger = logging.getLogger(__name__)

_CATEGORY_HEADINGS = (
    (RequirementCategory.MUST, "Must Have Requirements"),
    (RequirementCategory.SHOULD, "Should Have Requirements"),
    (RequirementCategory.NICE, "Nice to Have Requirements"),
)


def build_job_document(requirement_set: JobRequirementSet, requirements: List[Requirement]) -> str:
    """
    Build the synthetic job document embedded for the vector pre-filter.

    Title, description, then requirement descriptions grouped by category,
    one paragraph each.
    """
    parts = []

    if requirement_set.title:
        parts.append(f"Job Title: {requirement_set.title}")

    if requirement_set.description:
        parts.append(f"Job Description: {requirement_set.description}")

    groups = fit_score.group_by_category(requirements)
    for category, heading in _CATEGORY_HEADINGS:
        if groups[category]:
            parts.append(f"{heading}: {', '.join(r.description for r in groups[category])}")

    return "\n\n".join(parts)


def build_candidate_document(profile: CandidateProfile) -> str:
    """Build the candidate document stored in the vector index."""
    parts = []

    if profile.summary:
        parts.append(f"Summary: {profile.summary}")

    if profile.skills:
        parts.append(f"Skills: {', '.join(s.name for s in profile.skills)}")

    if profile.experience:
        entries = []
        for exp in profile.experience:
            entry = f"{exp.title} at {exp.company}" if exp.company else exp.title
            if exp.description:
                entry += f": {exp.description}"
            entries.append(entry)
        parts.append(f"Experience: {'; '.join(entries)}")

    return "\n\n".join(parts)


class MatcherService:
    """
    Service for candidate/job fit matching.

    Stateless per invocation: every call opens its own embedding scope, so
    concurrent calls for different candidates or jobs share nothing mutable.
    """

    def __init__(
        self,
        candidates: CandidateRepository,
        requirements: RequirementRepository,
        embeddings: EmbeddingClient,
        vector_index: VectorIndex,
        policy: Optional[MatchingPolicy] = None,
        shortlist_config: Optional[ShortlistConfig] = None
    ):
        """
        Initialize matcher service with dependencies.

        Args:
            candidates: CandidateRepository for profile lookups
            requirements: RequirementRepository for job requirement lookups
            embeddings: EmbeddingClient (provider + optional process-wide cache)
            vector_index: VectorIndex holding candidate embeddings
            policy: MatchingPolicy with scoring constants
            shortlist_config: ShortlistConfig with pre-filter settings
        """
        self.candidates = candidates
        self.aggregator = RequirementAggregator(requirements)
        self.embeddings = embeddings
        self.vector_index = vector_index
        self.policy = policy or MatchingPolicy()
        self.shortlist_config = shortlist_config or ShortlistConfig()
        self.similarity_calc = SimilarityCalculator()
        self.scoring_service = ScoringService(self.policy)

    def _requirement_matcher(self, embeddings: EmbeddingClient) -> RequirementMatcher:
        return RequirementMatcher(
            embedding_client=embeddings,
            similarity_calc=self.similarity_calc,
            policy=self.policy
        )

    def match_candidate_to_job(self, candidate_id: Any, job_variant_id: Any) -> MatchResult:
        """
        Match a single candidate against a job variant.

        Args:
            candidate_id: Candidate to score
            job_variant_id: Job variant to score against

        Returns:
            Complete MatchResult

        Raises:
            NotFoundError: If the candidate or job cannot be resolved (before any scoring)
            ProviderError: If embedding generation fails (no degraded scoring)
        """
        logger.info(f"Matching candidate {candidate_id} to job {job_variant_id}")

        profile = self.candidates.get(candidate_id)
        requirements = self.aggregator.get_requirements(job_variant_id)

        embeddings = self.embeddings.scoped()
        try:
            result = self.scoring_service.score_candidate(
                profile, requirements, self._requirement_matcher(embeddings), str(job_variant_id)
            )
        except ProviderError as e:
            logger.error(f"Error matching candidate {candidate_id} to job {job_variant_id}: {e}")
            raise

        logger.info(
            f"Candidate {candidate_id} fit for job {job_variant_id}: {result.fit_score} "
            f"({len(requirements)} requirements, {embeddings.provider_calls} embedding calls)"
        )
        return result

    def generate_job_embedding(
        self,
        requirement_set: JobRequirementSet,
        requirements: List[Requirement],
        embeddings: Optional[EmbeddingClient] = None
    ) -> List[float]:
        """Embed the composite job document used for the vector pre-filter."""
        embeddings = embeddings or self.embeddings
        return embeddings.embed(build_job_document(requirement_set, requirements))

    def _prefilter(self, job_embedding: List[float], job_variant_id: str, options: ShortlistOptions) -> List[VectorMatch]:
        limit = options.max_results * self.shortlist_config.prefilter_multiplier
        try:
            hits = self.vector_index.query(
                job_embedding,
                job_id=job_variant_id,
                limit=limit,
                min_similarity=self.shortlist_config.prefilter_min_similarity
            )
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(f"Vector index query failed for job {job_variant_id}: {e}") from e

        if hits:
            best = similarity_from_raw_score(hits[0].raw_score, self.vector_index.score_offset)
            logger.debug(f"Stage 1: {len(hits)} candidates pre-filtered (best similarity {best:.3f})")
        return hits

    def _load_profiles(
        self,
        hits: List[VectorMatch],
        shortlist: ShortlistResult
    ) -> List[CandidateProfile]:
        """Load pre-filtered profiles on the calling thread; repositories may be bound to one session."""
        profiles = []
        for hit in hits:
            try:
                profiles.append(self.candidates.get(hit.entity_id))
            except Exception as e:
                if not is_skippable(e):
                    raise
                if isinstance(e, NotFoundError):
                    logger.warning(f"Skipping candidate {hit.entity_id}: {e}")
                    shortlist.skipped_missing += 1
                else:
                    logger.warning(f"Skipping candidate {hit.entity_id} after load error: {e}")
                    shortlist.skipped_errors += 1
        return profiles

    def _score_profile(
        self,
        profile: CandidateProfile,
        requirements: List[Requirement],
        matcher: RequirementMatcher,
        job_variant_id: str
    ) -> Tuple[Optional[MatchResult], Optional[BaseException]]:
        """Score one loaded candidate, returning skippable errors instead of raising."""
        try:
            result = self.scoring_service.score_candidate(profile, requirements, matcher, job_variant_id)
        except Exception as e:
            if not is_skippable(e):
                raise
            return None, e
        return result, None

    def find_matching_candidates(
        self,
        job_variant_id: Any,
        options: Optional[ShortlistOptions] = None
    ) -> ShortlistResult:
        """
        Find the best matching candidates for a job variant.

        Candidates whose scoring fails with a provider error (or whose profile
        vanished since indexing) are logged and skipped; the counts are
        reported on the ShortlistResult.

        Args:
            job_variant_id: Job variant to shortlist for
            options: ShortlistOptions (min_fit_score, max_results)

        Returns:
            ShortlistResult with matches sorted by fit_score (highest first)

        Raises:
            NotFoundError: If the job cannot be resolved
            ProviderError: If the job embedding or the vector query fails
        """
        if options is None:
            options = ShortlistOptions(
                min_fit_score=self.shortlist_config.min_fit_score,
                max_results=self.shortlist_config.max_results
            )
        job_variant_id = str(job_variant_id)
        logger.info(f"Finding matching candidates for job {job_variant_id}")

        requirement_set = self.aggregator.load(job_variant_id)
        requirements = self.aggregator.aggregate(requirement_set)

        embeddings = self.embeddings.scoped()
        job_embedding = self.generate_job_embedding(requirement_set, requirements, embeddings)

        # Stage 1: coarse vector pre-filter
        hits = self._prefilter(job_embedding, job_variant_id, options)
        shortlist = ShortlistResult(job_variant_id=job_variant_id, prefiltered=len(hits))

        if not hits:
            logger.warning(f"No candidates passed the vector pre-filter for job {job_variant_id}")
            return shortlist

        # Stage 2: exact scoring of the pre-filtered set; only scoring runs in the pool
        profiles = self._load_profiles(hits, shortlist)
        matcher = self._requirement_matcher(embeddings)
        max_workers = min(self.shortlist_config.max_workers, len(profiles))
        if max_workers > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as pool:
                outcomes = list(pool.map(
                    lambda profile: self._score_profile(profile, requirements, matcher, job_variant_id),
                    profiles
                ))
        else:
            outcomes = [
                self._score_profile(profile, requirements, matcher, job_variant_id) for profile in profiles
            ]

        results = []
        for profile, (result, error) in zip(profiles, outcomes):
            if error is not None:
                logger.warning(f"Skipping candidate {profile.id} after scoring error: {error}")
                shortlist.skipped_errors += 1
            elif result.fit_score >= options.min_fit_score:
                results.append(result)

        # Stable sort keeps pre-filter order among equal fit scores
        results.sort(key=lambda r: r.fit_score, reverse=True)
        shortlist.matches = results[:options.max_results]

        logger.info(
            f"Found {len(shortlist.matches)} matching candidates for job {job_variant_id} "
            f"(pre-filtered={shortlist.prefiltered}, skipped={shortlist.skipped})"
        )
        return shortlist

    def index_candidate(self, candidate_id: Any) -> List[float]:
        """
        Embed a candidate profile and upsert it into the vector index.

        Raises:
            NotFoundError: If the candidate does not exist
            ProviderError: If embedding generation or the upsert fails
        """
        profile = self.candidates.get(candidate_id)
        document = build_candidate_document(profile)
        if not document:
            logger.warning(f"Candidate {candidate_id} has an empty profile; indexing summary placeholder")
            document = f"Candidate {profile.id}"

        embedding = self.embeddings.embed(document)
        try:
            self.vector_index.upsert(profile.id, embedding)
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(f"Failed to store embedding for candidate {candidate_id}: {e}") from e

        logger.info(f"Indexed candidate {candidate_id} ({len(embedding)} dimensions)")
        return embedding
