from .base import Base
from .job import JobFamily, JobTemplate, CompanyJobVariant, RequirementItem
from .candidate import Candidate, ParsedResumeData, Application, CANDIDATE_EMBEDDING_DIMENSIONS

__all__ = [
    'Base',
    'JobFamily',
    'JobTemplate',
    'CompanyJobVariant',
    'RequirementItem',
    'Candidate',
    'ParsedResumeData',
    'Application',
    'CANDIDATE_EMBEDDING_DIMENSIONS',
]
