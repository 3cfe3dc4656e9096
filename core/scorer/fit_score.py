#!/usr/bin/env python3
"""
Fit Score - Category and overall scores from per-requirement confidences.

Key behavior:
- Category score: weight-averaged confidence x 100; an empty category scores 100
  (no MUST requirements must not zero out a candidate).
- Overall fit: must * 0.6 + should * 0.3 + nice * 0.1 (policy weights), rounded.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple
import logging

from core.config_loader import MatchingPolicy
from core.matcher.models import Requirement, RequirementCategory
from core.utils import round_half_up

logger = logging.getLogger(__name__)

EMPTY_CATEGORY_SCORE = 100.0


def group_by_category(requirements: Iterable[Requirement]) -> Dict[RequirementCategory, List[Requirement]]:
    """Split requirements into MUST/SHOULD/NICE lists (every category present)."""
    groups: Dict[RequirementCategory, List[Requirement]] = {category: [] for category in RequirementCategory}
    for requirement in requirements:
        groups[requirement.category].append(requirement)
    return groups


def category_score(scored_requirements: Sequence[Tuple[Requirement, float]]) -> float:
    """
    Weighted mean of requirement confidences, scaled to 0-100.

    Args:
        scored_requirements: (requirement, confidence) pairs of one category

    Returns:
        Category score (0.0-100.0); 100.0 when the category is empty
    """
    if not scored_requirements:
        return EMPTY_CATEGORY_SCORE

    total_score = 0.0
    total_weight = 0
    for requirement, confidence in scored_requirements:
        total_score += confidence * requirement.weight
        total_weight += requirement.weight

    if total_weight <= 0:
        return 0.0
    return total_score / total_weight * 100


def overall_fit_score(
    must_score: float,
    should_score: float,
    nice_score: float,
    policy: Optional[MatchingPolicy] = None
) -> int:
    """
    Combine category scores into a single 0-100 fit score.

    Monotonic in each category score when the others are held fixed.
    """
    policy = policy or MatchingPolicy()
    fit = (
        must_score * policy.must_weight +
        should_score * policy.should_weight +
        nice_score * policy.nice_weight
    )
    return max(0, min(100, round_half_up(fit)))
