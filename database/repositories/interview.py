from datetime import datetime
from typing import List
from sqlalchemy import select, update

from database.models import Interview
from database.repositories.base import BaseRepository


class InterviewRepository(BaseRepository):
    def list_upcoming(self, now: datetime) -> List[Interview]:
        stmt = (
            select(Interview)
            .where(Interview.scheduled_at >= now)
            .order_by(Interview.scheduled_at.asc(), Interview.id.asc())
        )
        return self.db.execute(stmt).scalars().all()

    def reassign_owner_if(self, interview_id: int, expected_owner: str, new_owner: str) -> int:
        """Conditional update: moves the interview only if its owner is still expected_owner."""
        stmt = (
            update(Interview)
            .where(Interview.id == interview_id, Interview.owner == expected_owner)
            .values(owner=new_owner)
        )
        return self.db.execute(stmt).rowcount
