from sqlalchemy import Column, Integer, Text, TIMESTAMP

from core.utils import utc_now
from .base import Base


class WebhookEvent(Base):
    """Outbound integration event envelope and its delivery outcome."""
    __tablename__ = 'webhook_event'

    id = Column(Integer, primary_key=True, autoincrement=True)
    direction = Column(Text, nullable=False, default='outbound')
    source = Column(Text, nullable=False)
    event_type = Column(Text, nullable=False)
    signature = Column(Text)
    delivery_url = Column(Text)
    status = Column(Text, nullable=False, default='queued')  # queued|delivered|failed|skipped
    http_status = Column(Integer)
    note = Column(Text)
    payload = Column(Text, nullable=False)

    received_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    processed_at = Column(TIMESTAMP(timezone=True))
