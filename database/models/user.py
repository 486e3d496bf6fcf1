from sqlalchemy import Column, Text, Boolean, Integer, TIMESTAMP

from core.utils import utc_now
from .base import Base


class User(Base):
    """
    Marketplace account. Candidates carry the applicant profile fields used by scoring.
    """
    __tablename__ = 'users'

    id = Column(Text, primary_key=True)
    email = Column(Text, nullable=False, unique=True)
    display_name = Column(Text)

    # Applicant profile
    profile_skills = Column(Text, nullable=False, default='')
    profile_completeness = Column(Integer, nullable=False, default=0)  # 0-100
    is_flagged = Column(Boolean, nullable=False, default=False)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
