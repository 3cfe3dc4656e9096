#!/usr/bin/env python3
"""
Candidate Vector Index - Interface for nearest-neighbour candidate lookup.

query() reports raw_score = cosine_similarity + score_offset (offset 1.0 gives
the [0, 2] range); callers recover similarity with
core.utils.similarity_from_raw_score.
"""
from typing import Protocol, runtime_checkable, Dict, Iterable, List, Optional, Set, Sequence

import numpy as np

from core.matcher.models import VectorMatch
from core.matcher.similarity import SimilarityCalculator


@runtime_checkable
class VectorIndex(Protocol):
    """Protocol for candidate vector indexes."""

    score_offset: float

    def query(
        self,
        vector: Sequence[float],
        job_id: Optional[str] = None,
        limit: int = 10,
        min_similarity: float = 0.0
    ) -> List[VectorMatch]:
        """
        Find the nearest candidates to a query vector.

        Args:
            vector: Query embedding
            job_id: Job the query is for (candidates already applied to it are excluded)
            limit: Maximum number of hits
            min_similarity: Minimum cosine similarity of a hit

        Returns:
            Hits ordered by descending raw_score

        Raises:
            ProviderError: If the index cannot be queried
        """
        ...

    def upsert(self, entity_id: str, vector: Sequence[float]) -> None:
        """Store or replace a candidate vector."""
        ...

    def cosine_similarity(self, a: Sequence[float], b: Sequence[float]) -> float:
        """Pure cosine similarity in [-1, 1], no I/O."""
        ...


class InMemoryVectorIndex:
    """In-memory implementation of the candidate vector index (exact search)."""

    def __init__(self, score_offset: float = 1.0):
        """Initialize in-memory storage."""
        self.score_offset = score_offset
        self._vectors: Dict[str, np.ndarray] = {}
        self._excluded: Dict[str, Set[str]] = {}

    def upsert(self, entity_id: str, vector: Sequence[float]) -> None:
        self._vectors[str(entity_id)] = np.asarray(vector, dtype=np.float64)

    def exclude(self, job_id: str, entity_ids: Iterable[str]) -> None:
        """Hide entities from queries for a job (e.g. candidates who already applied)."""
        self._excluded.setdefault(str(job_id), set()).update(str(e) for e in entity_ids)

    def cosine_similarity(self, a: Sequence[float], b: Sequence[float]) -> float:
        return SimilarityCalculator.cosine(a, b)

    def query(
        self,
        vector: Sequence[float],
        job_id: Optional[str] = None,
        limit: int = 10,
        min_similarity: float = 0.0
    ) -> List[VectorMatch]:
        excluded = self._excluded.get(str(job_id), set()) if job_id is not None else set()

        hits = []
        for entity_id, stored in self._vectors.items():
            if entity_id in excluded:
                continue
            similarity = self.cosine_similarity(vector, stored)
            if similarity >= min_similarity:
                hits.append(VectorMatch(entity_id=entity_id, raw_score=similarity + self.score_offset))

        # Ties broken by id so repeated queries return the same order
        hits.sort(key=lambda h: (-h.raw_score, h.entity_id))
        return hits[:limit]

    def __len__(self) -> int:
        return len(self._vectors)
