import logging
from datetime import datetime
from typing import Any, Iterable, List, Optional
from sqlalchemy import select, or_
from sqlalchemy.orm import joinedload

from database.models import SavedSearch, JobAlert, AlertDeliveryLog
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)

# channel name -> JobAlert sent-marker attribute
SENT_COLUMNS = {
    'email': 'email_sent_at',
    'in_app': 'in_app_sent_at',
    'push': 'push_sent_at',
}


class AlertRepository(BaseRepository):
    def list_deliverable_searches(self, user_id: Optional[str] = None) -> List[SavedSearch]:
        """Saved searches with at least one channel enabled, optionally for one user."""
        stmt = (
            select(SavedSearch)
            .options(joinedload(SavedSearch.user))
            .where(or_(
                SavedSearch.email_enabled.is_(True),
                SavedSearch.in_app_enabled.is_(True),
                SavedSearch.push_enabled.is_(True)
            ))
        )
        if user_id is not None:
            stmt = stmt.where(SavedSearch.user_id == user_id)
        return self.db.execute(stmt.order_by(SavedSearch.id)).scalars().all()

    def list_unsent_alerts(self, saved_search_id: int) -> List[JobAlert]:
        """Alerts with at least one channel marker still NULL, oldest first."""
        stmt = (
            select(JobAlert)
            .options(joinedload(JobAlert.job))
            .where(
                JobAlert.saved_search_id == saved_search_id,
                or_(
                    JobAlert.email_sent_at.is_(None),
                    JobAlert.in_app_sent_at.is_(None),
                    JobAlert.push_sent_at.is_(None)
                )
            )
            .order_by(JobAlert.id)
        )
        return self.db.execute(stmt).scalars().all()

    def upsert_alert(self, user_id: str, saved_search_id: int, job_id: int, reason: str) -> JobAlert:
        """Create the alert for (user, search, job) once; later matches leave it untouched."""
        stmt = select(JobAlert).where(
            JobAlert.user_id == user_id,
            JobAlert.saved_search_id == saved_search_id,
            JobAlert.job_id == job_id
        )
        existing = self.db.execute(stmt).scalar_one_or_none()
        if existing is not None:
            return existing

        alert = JobAlert(user_id=user_id, saved_search_id=saved_search_id, job_id=job_id, reason=reason)
        return self._add(alert)

    def mark_sent(self, alerts: Iterable[JobAlert], channel: str, sent_at: datetime) -> int:
        """Set the channel marker on alerts where it is still NULL. Returns how many changed."""
        column = SENT_COLUMNS[channel]
        count = 0
        for alert in alerts:
            if getattr(alert, column) is None:
                setattr(alert, column, sent_at)
                count += 1
        self.db.flush()
        return count

    def advance_last_digest(self, search: SavedSearch, digest_at: datetime) -> None:
        """Move last_digest_at forward; never backwards."""
        current = search.last_digest_at
        if current is not None and current.tzinfo is None:
            current = current.replace(tzinfo=digest_at.tzinfo)
        if current is None or current < digest_at:
            search.last_digest_at = digest_at
            self.db.flush()

    def add_delivery_log(self, **fields: Any) -> AlertDeliveryLog:
        log = AlertDeliveryLog(**fields)
        return self._add(log)
