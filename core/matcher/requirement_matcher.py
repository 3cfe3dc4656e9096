#!/usr/bin/env python3
"""
Requirement Matcher - Hybrid semantic + keyword confidence for one requirement.

combined = max(semantic, keyword * damping), clamped to [0, 1]

- semantic: cosine similarity of candidate text and requirement description
  embeddings, negative similarity treated as 0
- keyword: fraction of requirement keywords with a matching candidate keyword
  (substring either way, or normalized edit-distance similarity above threshold)

This is the single source of truth for requirement confidence.
"""
from typing import List, Optional, Tuple
import logging

from core.config_loader import MatchingPolicy
from core.matcher.embedding_client import EmbeddingClient
from core.matcher.keywords import extract_keywords
from core.matcher.models import CandidateProfile, Requirement
from core.matcher.similarity import SimilarityCalculator
from core.matcher.string_similarity import similarity as string_similarity

logger = logging.getLogger(__name__)


def build_candidate_text(profile: CandidateProfile) -> str:
    """
    Build the searchable text of a candidate profile.

    Summary, skill names, "{title} {description}" per experience entry and
    "{degree} {field}" per education entry, space-joined.
    """
    parts: List[str] = []

    if profile.summary:
        parts.append(profile.summary.strip())

    if profile.skills:
        parts.append(", ".join(skill.name for skill in profile.skills))

    for exp in profile.experience:
        parts.append(f"{exp.title} {exp.description or ''}".strip())

    for edu in profile.education:
        parts.append(f"{edu.degree} {edu.field_of_study or ''}".strip())

    return " ".join(part for part in parts if part)


def keywords_match(candidate_word: str, requirement_word: str, fuzzy_threshold: float) -> bool:
    """Substring containment in either direction, or close edit distance."""
    if requirement_word in candidate_word or candidate_word in requirement_word:
        return True
    return string_similarity(candidate_word, requirement_word) > fuzzy_threshold


def keyword_similarity(
    candidate_keywords: List[str],
    requirement_keywords: List[str],
    fuzzy_threshold: float = 0.8
) -> float:
    """
    Fraction of requirement keywords matched by some candidate keyword.

    Returns:
        Similarity in [0, 1]; 0.0 when the requirement has no keywords
    """
    if not requirement_keywords:
        return 0.0

    # Identical candidate keywords give identical answers
    distinct_candidate = list(dict.fromkeys(candidate_keywords))

    matches = 0
    for req_word in requirement_keywords:
        if any(keywords_match(cand_word, req_word, fuzzy_threshold) for cand_word in distinct_candidate):
            matches += 1

    return matches / len(requirement_keywords)


class RequirementMatcher:
    """Score how well a candidate satisfies a requirement."""

    def __init__(
        self,
        embedding_client: EmbeddingClient,
        similarity_calc: Optional[SimilarityCalculator] = None,
        policy: Optional[MatchingPolicy] = None
    ):
        """
        Initialize requirement matcher.

        Args:
            embedding_client: Caching embedding client (one per scoring run)
            similarity_calc: SimilarityCalculator instance
            policy: MatchingPolicy with damping and thresholds
        """
        self.embeddings = embedding_client
        self.similarity_calc = similarity_calc or SimilarityCalculator()
        self.policy = policy or MatchingPolicy()

    def semantic_similarity(self, candidate_text: str, requirement_text: str) -> float:
        """Clamped cosine similarity of the two texts' embeddings."""
        candidate_embedding = self.embeddings.embed(candidate_text)
        requirement_embedding = self.embeddings.embed(requirement_text)
        return self.similarity_calc.calculate(candidate_embedding, requirement_embedding)

    def keyword_similarity(self, candidate_text: str, requirement_text: str) -> float:
        return keyword_similarity(
            extract_keywords(candidate_text),
            extract_keywords(requirement_text),
            self.policy.fuzzy_match_threshold
        )

    def score_components(self, candidate_text: str, requirement: Requirement) -> Tuple[float, float, float]:
        """
        Returns:
            (semantic, keyword, combined) scores
        """
        semantic = self.semantic_similarity(candidate_text, requirement.description)
        keyword = self.keyword_similarity(candidate_text, requirement.description)
        combined = max(semantic, keyword * self.policy.keyword_damping)
        combined = max(0.0, min(1.0, combined))
        return semantic, keyword, combined

    def score(self, candidate_text: str, requirement: Requirement) -> float:
        """
        Match confidence of a candidate text for a requirement.

        Raises:
            ProviderError: If an embedding cannot be generated
        """
        semantic, keyword, combined = self.score_components(candidate_text, requirement)
        logger.debug(
            f"Requirement '{requirement.description[:50]}': "
            f"semantic={semantic:.3f}, keyword={keyword:.3f}, combined={combined:.3f}"
        )
        return combined

    def is_matched(self, confidence: float) -> bool:
        return confidence >= self.policy.match_threshold
