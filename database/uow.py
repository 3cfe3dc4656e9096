import contextlib
import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from database.database import SessionLocal
from database.repositories import CandidateProfileRepository, JobRequirementRepository, PgVectorCandidateIndex

logger = logging.getLogger(__name__)


@dataclass
class MatchingRepositories:
    """Repositories sharing one Session for a single matching run."""
    session: Session
    candidates: CandidateProfileRepository
    requirements: JobRequirementRepository
    vector_index: PgVectorCandidateIndex


@contextlib.contextmanager
def matching_uow(session_factory=SessionLocal, score_offset: float = 1.0):
    """Per-unit-of-work transaction scope.

    Yields MatchingRepositories bound to a fresh Session. Commits on success,
    rolls back on exception, always closes.

    Usage:
        with matching_uow() as repos:
            service = MatcherService(repos.candidates, repos.requirements, embeddings, repos.vector_index)
            result = service.match_candidate_to_job(candidate_id, job_variant_id)
        # commit happens automatically on successful exit
    """
    session = session_factory()
    try:
        yield MatchingRepositories(
            session=session,
            candidates=CandidateProfileRepository(session),
            requirements=JobRequirementRepository(session),
            vector_index=PgVectorCandidateIndex(session, score_offset=score_offset)
        )
        session.commit()
    except Exception:
        logger.debug("Rolling back matching unit of work")
        session.rollback()
        raise
    finally:
        session.close()
