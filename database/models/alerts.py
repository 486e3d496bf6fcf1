from sqlalchemy import Column, Integer, Text, TIMESTAMP, ForeignKey, Boolean, UniqueConstraint, Index
from sqlalchemy.orm import relationship

from core.utils import utc_now
from .base import Base, JsonDocument


class SavedSearch(Base):
    """
    A user's standing query plus its delivery preferences.

    digest_hour is interpreted in the search's own timezone.
    """
    __tablename__ = 'saved_search'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Text, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    label = Column(Text, nullable=False)
    keyword = Column(Text, nullable=False, default='')

    # Channels
    email_enabled = Column(Boolean, nullable=False, default=True)
    in_app_enabled = Column(Boolean, nullable=False, default=True)
    push_enabled = Column(Boolean, nullable=False, default=False)
    push_deferred = Column(Boolean, nullable=False, default=False)

    # Cadence
    digest_cadence = Column(Text, nullable=False, default='daily')  # instant|daily|weekly
    digest_hour = Column(Integer, nullable=False, default=9)  # 0-23 local
    timezone = Column(Text, nullable=False, default='UTC')
    last_digest_at = Column(TIMESTAMP(timezone=True), nullable=True)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)

    user = relationship("User")
    alerts = relationship("JobAlert", back_populates="saved_search", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_saved_search_user', 'user_id'),
    )


class JobAlert(Base):
    """
    One match record per (user, saved search, job). Each channel has its own
    sent marker; a marker only ever goes from NULL to a timestamp.
    """
    __tablename__ = 'job_alert'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Text, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    saved_search_id = Column(Integer, ForeignKey('saved_search.id', ondelete='CASCADE'), nullable=False)
    job_id = Column(Integer, ForeignKey('job_posting.id', ondelete='CASCADE'), nullable=False)
    reason = Column(Text, nullable=False, default='')

    email_sent_at = Column(TIMESTAMP(timezone=True), nullable=True)
    in_app_sent_at = Column(TIMESTAMP(timezone=True), nullable=True)
    push_sent_at = Column(TIMESTAMP(timezone=True), nullable=True)
    read_at = Column(TIMESTAMP(timezone=True), nullable=True)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)

    saved_search = relationship("SavedSearch", back_populates="alerts")
    job = relationship("JobPosting")

    __table_args__ = (
        UniqueConstraint('user_id', 'saved_search_id', 'job_id', name='uq_job_alert_user_search_job'),
    )


class AlertDeliveryLog(Base):
    """Append-only record of every delivery attempt."""
    __tablename__ = 'alert_delivery_log'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Text, nullable=False)
    alert_id = Column(Integer, ForeignKey('job_alert.id', ondelete='SET NULL'), nullable=True)  # NULL for batched sends
    saved_search_id = Column(Integer, ForeignKey('saved_search.id', ondelete='SET NULL'), nullable=True)

    channel = Column(Text, nullable=False)  # email|in_app|push
    kind = Column(Text, nullable=False)  # instant|digest
    provider = Column(Text, nullable=False)
    provider_message_id = Column(Text)
    accepted = Column(Boolean, nullable=False)
    error_message = Column(Text)

    recipient = Column(Text, nullable=False)
    subject = Column(Text)
    payload = Column(Text, nullable=False, default='')
    extra = Column(JsonDocument, nullable=False, default=dict)

    delivered_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)

    __table_args__ = (
        Index('idx_delivery_log_search', 'saved_search_id', 'delivered_at'),
    )
