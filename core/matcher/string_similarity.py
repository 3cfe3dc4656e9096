#!/usr/bin/env python3
"""
Approximate String Matcher - Levenshtein edit distance between short strings.

Backed by rapidfuzz; unit cost for insertions, deletions and substitutions.
"""
from rapidfuzz.distance import Levenshtein


def levenshtein_distance(a: str, b: str) -> int:
    """Minimum number of single-character edits turning a into b."""
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    """
    Normalized edit-distance similarity.

    Returns:
        1 - distance / max(len(a), len(b)), in [0, 1]; 1.0 when both are empty
    """
    if not a and not b:
        return 1.0
    return Levenshtein.normalized_similarity(a, b)
