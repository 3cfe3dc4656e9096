import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import exists, func, select
from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import NotFoundError, ProviderError
from core.matcher.models import VectorMatch
from core.matcher.similarity import SimilarityCalculator
from database.models import Application, Candidate
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class PgVectorCandidateIndex(BaseRepository):
    """Candidate vector index backed by the pgvector skill_embeddings column.

    raw_score = (1 - cosine_distance) + score_offset, i.e. 2 - cosine_distance
    with the default offset.
    """

    def __init__(self, db, score_offset: float = 1.0):
        super().__init__(db)
        self.score_offset = score_offset

    def query(
        self,
        vector: Sequence[float],
        job_id: Optional[str] = None,
        limit: int = 10,
        min_similarity: float = 0.0
    ) -> List[VectorMatch]:
        distance = Candidate.skill_embeddings.cosine_distance(list(vector))
        stmt = (
            select(Candidate.id, distance.label('distance'))
            .where(Candidate.skill_embeddings.isnot(None))
            .where(distance <= 1.0 - min_similarity)
        )

        if job_id is not None:
            job_uuid = self.parse_id("Job variant", job_id)
            already_applied = exists().where(
                Application.candidate_id == Candidate.id,
                Application.company_job_variant_id == job_uuid
            )
            stmt = stmt.where(~already_applied)

        stmt = stmt.order_by(distance, Candidate.id).limit(limit)

        try:
            rows = self.db.execute(stmt).all()
        except SQLAlchemyError as e:
            raise ProviderError(f"Vector query failed: {e}") from e

        return [
            VectorMatch(
                entity_id=str(row[0]),
                raw_score=1.0 - float(row._mapping['distance']) + self.score_offset
            )
            for row in rows
        ]

    def upsert(self, entity_id: Any, vector: Sequence[float]) -> None:
        candidate_uuid = self.parse_id("Candidate", entity_id)
        try:
            candidate = self.db.get(Candidate, candidate_uuid)
            if candidate is None:
                raise NotFoundError("Candidate", entity_id)
            candidate.skill_embeddings = list(vector)
            self.db.flush()
        except SQLAlchemyError as e:
            raise ProviderError(f"Failed to store embedding for candidate {entity_id}: {e}") from e

    def cosine_similarity(self, a: Sequence[float], b: Sequence[float]) -> float:
        return SimilarityCalculator.cosine(a, b)

    def get_embedding_stats(self) -> Dict[str, Any]:
        """Report how many candidates carry an embedding."""
        try:
            total = self.db.execute(select(func.count(Candidate.id))).scalar_one()
            embedded = self.db.execute(
                select(func.count(Candidate.id)).where(Candidate.skill_embeddings.isnot(None))
            ).scalar_one()
        except SQLAlchemyError as e:
            raise ProviderError(f"Failed to read embedding stats: {e}") from e

        coverage = round(embedded / total * 100, 2) if total else 0.0
        return {
            'totalCandidates': total,
            'candidatesWithEmbeddings': embedded,
            'embeddingCoverage': coverage,
        }
