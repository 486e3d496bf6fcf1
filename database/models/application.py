from sqlalchemy import Column, Integer, Text, TIMESTAMP, ForeignKey, Boolean, UniqueConstraint, Index
from sqlalchemy.orm import relationship

from core.utils import utc_now
from .base import Base

APPLICATION_STATUSES = ('Applied', 'Interview', 'Offer', 'Rejected')


class Application(Base):
    """
    One application per (applicant, job) pair.

    Scores are written once at submission and never recomputed; only
    status changes afterwards (via pipeline automation or employers).
    """
    __tablename__ = 'application'

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Text, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    job_id = Column(Integer, ForeignKey('job_posting.id', ondelete='CASCADE'), nullable=False)

    status = Column(Text, nullable=False, default='Applied')  # Applied|Interview|Offer|Rejected

    # Screener outcome
    required_passed = Column(Boolean, nullable=False, default=False)
    required_score = Column(Integer, nullable=False, default=0)
    preferred_score = Column(Integer, nullable=False, default=0)

    # Ranking / risk
    auto_rank_score = Column(Integer, nullable=False, default=0)
    risk_score = Column(Integer, nullable=False, default=0)
    risk_flags = Column(Text, nullable=False, default='')
    needs_manual_review = Column(Boolean, nullable=False, default=False)

    # Candidate-facing explanation
    match_explanation = Column(Text, nullable=False, default='')
    missing_skills = Column(Text, nullable=False, default='')
    profile_fix_suggestions = Column(Text, nullable=False, default='')
    submitted_answers = Column(Text, nullable=False, default='')

    source_ip = Column(Text)
    user_agent = Column(Text)
    applied_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)

    user = relationship("User")
    job = relationship("JobPosting")

    __table_args__ = (
        UniqueConstraint('user_id', 'job_id', name='uq_application_user_job'),
        Index('idx_application_user_applied', 'user_id', 'applied_at'),
    )


class AbuseEvent(Base):
    """
    Risk ledger entry written whenever a submission raised at least one risk flag.
    """
    __tablename__ = 'abuse_event'

    id = Column(Integer, primary_key=True, autoincrement=True)
    flow = Column(Text, nullable=False)  # application_create
    user_id = Column(Text, ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    source_ip = Column(Text)
    severity = Column(Text, nullable=False)  # low|medium|high
    decision = Column(Text, nullable=False)  # allow|manual_review|block
    detail = Column(Text, nullable=False, default='')
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)

    __table_args__ = (
        Index('idx_abuse_event_ip_created', 'source_ip', 'created_at'),
    )
