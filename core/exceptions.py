#!/usr/bin/env python3
"""
Matching exceptions - error taxonomy for the fit scoring engine.

Two families of errors:
- Caller-abort errors: the whole operation fails (NotFoundError before scoring,
  ProviderError during a single candidate match).
- Skip-and-continue errors: logged and excluded (RequirementValidationError during
  aggregation, ProviderError for one candidate during shortlisting).
"""

from typing import Any, Optional


class MatchingError(Exception):
    """Base exception for fit scoring errors."""
    pass


class NotFoundError(MatchingError):
    """Raised when a candidate or job reference cannot be resolved."""

    def __init__(self, entity: str, identifier: Any):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} {identifier} not found")


class ProviderError(MatchingError):
    """Raised when embedding generation or a vector index query fails."""
    pass


class RequirementValidationError(MatchingError):
    """Raised when a requirement record is malformed."""

    def __init__(self, requirement_id: Optional[Any], reason: str):
        self.requirement_id = requirement_id
        self.reason = reason
        super().__init__(f"Invalid requirement {requirement_id}: {reason}")


def is_skippable(exc: BaseException) -> bool:
    """Return True for errors that bulk shortlisting skips instead of aborting."""
    return isinstance(exc, (ProviderError, NotFoundError))
