from datetime import datetime
from typing import Iterable, Optional
from sqlalchemy import select, func

from database.models import AbuseEvent
from database.repositories.base import BaseRepository


class AbuseEventRepository(BaseRepository):
    def record(
        self,
        flow: str,
        user_id: Optional[str],
        source_ip: Optional[str],
        severity: str,
        decision: str,
        detail: str
    ) -> AbuseEvent:
        event = AbuseEvent(
            flow=flow,
            user_id=user_id,
            source_ip=source_ip,
            severity=severity,
            decision=decision,
            detail=detail
        )
        return self._add(event)

    def count_for_source(self, source_ip: Optional[str], since: datetime, decisions: Iterable[str]) -> int:
        if not source_ip:
            return 0
        stmt = select(func.count(AbuseEvent.id)).where(
            AbuseEvent.source_ip == source_ip,
            AbuseEvent.created_at >= since,
            AbuseEvent.decision.in_(list(decisions))
        )
        return self.db.execute(stmt).scalar_one()
