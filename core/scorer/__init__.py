#!/usr/bin/env python3
"""
Scoring Module - Exact fit scoring.

Public API:
- ScoringService: Assembles a MatchResult for one candidate
- category_score / overall_fit_score: Category and weighted overall scores

- fit_score.py: MUST/SHOULD/NICE category scores and the overall fit score
- service.py: ScoringService orchestrator
"""

from core.scorer.fit_score import category_score, overall_fit_score, group_by_category
from core.scorer.service import ScoringService

__all__ = ['ScoringService', 'category_score', 'overall_fit_score', 'group_by_category']
