import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy import select, update, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from database.models import Application
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ApplicationRepository(BaseRepository):
    def get_existing(self, user_id: str, job_id: int) -> Optional[Application]:
        stmt = select(Application).where(
            Application.user_id == user_id,
            Application.job_id == job_id
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def count_recent_for_user(self, user_id: str, since: datetime) -> int:
        stmt = select(func.count(Application.id)).where(
            Application.user_id == user_id,
            Application.applied_at >= since
        )
        return self.db.execute(stmt).scalar_one()

    def create_once(self, user_id: str, job_id: int, fields: Dict[str, Any]) -> Tuple[Application, bool]:
        """Insert an application unless one exists for (user, job).

        A concurrent insert that wins the unique constraint is resolved by
        returning the winner's row. Returns (application, created).
        """
        existing = self.get_existing(user_id, job_id)
        if existing is not None:
            return existing, False

        application = Application(user_id=user_id, job_id=job_id, **fields)
        try:
            with self.db.begin_nested():
                self._add(application)
        except IntegrityError:
            logger.info(f"Application for user {user_id} / job {job_id} created concurrently, returning existing")
            return self.get_existing(user_id, job_id), False
        return application, True

    def list_for_jobs(self, job_ids: List[int]) -> List[Application]:
        if not job_ids:
            return []
        stmt = (
            select(Application)
            .options(joinedload(Application.job), joinedload(Application.user))
            .where(Application.job_id.in_(job_ids))
            .order_by(Application.applied_at.asc(), Application.id.asc())
        )
        return self.db.execute(stmt).scalars().unique().all()

    def update_status_if(self, application_id: int, expected_status: str, new_status: str) -> int:
        """Conditional update: writes only if the stored status still equals expected_status.

        Returns the number of rows changed (0 or 1).
        """
        stmt = (
            update(Application)
            .where(Application.id == application_id, Application.status == expected_status)
            .values(status=new_status)
        )
        return self.db.execute(stmt).rowcount
