from sqlalchemy import Column, Integer, Text, TIMESTAMP, ForeignKey, Index

from core.utils import utc_now
from .base import Base


class JobPosting(Base):
    """
    A job posting with its merit fit baseline and screener prompts.

    Screener and skill lists are stored in the delimited text encoding
    (comma, newline or pipe separated) and decoded by core.utils.parse_unique_list.
    """
    __tablename__ = 'job_posting'

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_by_id = Column(Text, ForeignKey('users.id', ondelete='SET NULL'), nullable=True)

    title = Column(Text, nullable=False)
    company = Column(Text, nullable=False)
    location = Column(Text, nullable=False, default='')
    salary = Column(Text, nullable=False, default='')

    merit_fit = Column(Integer, nullable=False, default=0)  # 0-100

    required_screeners = Column(Text, nullable=False, default='')
    preferred_screeners = Column(Text, nullable=False, default='')
    required_skills = Column(Text, nullable=False, default='')
    preferred_skills = Column(Text, nullable=False, default='')

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)

    __table_args__ = (
        Index('idx_job_posting_created_by', 'created_by_id'),
    )
