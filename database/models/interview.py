from sqlalchemy import Column, Integer, Text, TIMESTAMP, Index

from core.utils import utc_now
from .base import Base


class Interview(Base):
    __tablename__ = 'interview'

    id = Column(Integer, primary_key=True, autoincrement=True)
    person = Column(Text, nullable=False)  # candidate being interviewed
    owner = Column(Text, nullable=False)   # interviewer identity
    scheduled_at = Column(TIMESTAMP(timezone=True), nullable=False)
    interview_type = Column(Text, nullable=False, default='video')  # video|onsite|phone
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)

    __table_args__ = (
        Index('idx_interview_scheduled', 'scheduled_at'),
    )
