import logging

from sqlalchemy.orm import Session

from database.repositories import (
    JobPostingRepository,
    UserRepository,
    ApplicationRepository,
    AbuseEventRepository,
    InterviewRepository,
    AlertRepository,
    WebhookEventRepository,
)

logger = logging.getLogger(__name__)


class MarketplaceRepository:
    """
    Store facade handed to the engines: one Session, one repository per aggregate.
    """

    def __init__(self, db: Session):
        self.db = db
        self.jobs = JobPostingRepository(db)
        self.users = UserRepository(db)
        self.applications = ApplicationRepository(db)
        self.abuse = AbuseEventRepository(db)
        self.interviews = InterviewRepository(db)
        self.alerts = AlertRepository(db)
        self.webhooks = WebhookEventRepository(db)
