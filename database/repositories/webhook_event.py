from datetime import datetime
from typing import Optional

from database.models import WebhookEvent
from database.repositories.base import BaseRepository


class WebhookEventRepository(BaseRepository):
    def create_outbound(
        self,
        source: str,
        event_type: str,
        payload: str,
        signature: Optional[str],
        delivery_url: Optional[str],
        received_at: datetime
    ) -> WebhookEvent:
        event = WebhookEvent(
            direction='outbound',
            source=source,
            event_type=event_type,
            signature=signature,
            delivery_url=delivery_url,
            status='queued',
            payload=payload,
            received_at=received_at
        )
        return self._add(event)

    def record_outcome(
        self,
        event: WebhookEvent,
        status: str,
        http_status: Optional[int],
        note: Optional[str],
        processed_at: datetime
    ) -> None:
        event.status = status
        event.http_status = http_status
        event.note = note
        event.processed_at = processed_at
        self.db.flush()
