#!/usr/bin/env python3
"""
Similarity Calculator - Cosine similarity between vectors.
"""
from typing import List, Sequence

import numpy as np


class SimilarityCalculator:
    """Calculate cosine similarity between vectors."""

    @staticmethod
    def cosine(vec1: Sequence[float], vec2: Sequence[float]) -> float:
        """
        Calculate raw cosine similarity between two vectors.

        Args:
            vec1: First vector
            vec2: Second vector

        Returns:
            Cosine similarity in range [-1.0, 1.0], or 0.0 if either vector is zero

        Raises:
            ValueError: If the vectors have different lengths
        """
        a = np.asarray(vec1, dtype=np.float64)
        b = np.asarray(vec2, dtype=np.float64)
        if a.shape != b.shape:
            raise ValueError(f"Vectors must have the same length ({a.shape[0]} != {b.shape[0]})")

        norm1 = float(np.linalg.norm(a))
        norm2 = float(np.linalg.norm(b))
        if norm1 == 0 or norm2 == 0:
            return 0.0

        raw_cosine = float(np.dot(a, b)) / (norm1 * norm2)
        return max(-1.0, min(1.0, raw_cosine))

    @classmethod
    def calculate(cls, vec1: List[float], vec2: List[float]) -> float:
        """
        Cosine similarity clamped to [0.0, 1.0].

        Negative similarity counts as no match at all.
        """
        return max(0.0, cls.cosine(vec1, vec2))
