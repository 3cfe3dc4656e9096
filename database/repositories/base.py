import uuid
from typing import Any

from sqlalchemy.orm import Session

from core.exceptions import NotFoundError


class BaseRepository:
    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def parse_id(entity: str, identifier: Any) -> uuid.UUID:
        """Coerce an identifier to a UUID; malformed ids resolve to nothing."""
        if isinstance(identifier, uuid.UUID):
            return identifier
        try:
            return uuid.UUID(str(identifier))
        except ValueError:
            raise NotFoundError(entity, identifier)
