from database.repositories.base import BaseRepository
from database.repositories.candidate import CandidateProfileRepository
from database.repositories.requirement import JobRequirementRepository
from database.repositories.embedding import PgVectorCandidateIndex

__all__ = [
    'BaseRepository',
    'CandidateProfileRepository',
    'JobRequirementRepository',
    'PgVectorCandidateIndex',
]
