import logging
from typing import List, Optional
from sqlalchemy import select

from database.models import JobPosting
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class JobPostingRepository(BaseRepository):
    def get_by_id(self, job_id: int) -> Optional[JobPosting]:
        return self.db.get(JobPosting, job_id)

    def list_for_owner(self, created_by_id: Optional[str] = None) -> List[JobPosting]:
        """All postings, or only those created by ``created_by_id`` when given."""
        stmt = select(JobPosting)
        if created_by_id is not None:
            stmt = stmt.where(JobPosting.created_by_id == created_by_id)
        return self.db.execute(stmt.order_by(JobPosting.id)).scalars().all()
