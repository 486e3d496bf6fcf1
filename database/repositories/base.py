from typing import TypeVar

from sqlalchemy.orm import Session

T = TypeVar('T')


class BaseRepository:
    """Repositories share the caller's Session and never commit; the unit of work does."""

    def __init__(self, db: Session):
        self.db = db

    def _add(self, instance: T) -> T:
        """Stage ``instance`` and flush so generated ids are available."""
        self.db.add(instance)
        self.db.flush()
        return instance
