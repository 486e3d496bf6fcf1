from database.repositories.base import BaseRepository
from database.repositories.job_post import JobPostingRepository
from database.repositories.user import UserRepository
from database.repositories.application import ApplicationRepository
from database.repositories.abuse import AbuseEventRepository
from database.repositories.interview import InterviewRepository
from database.repositories.alerts import AlertRepository, SENT_COLUMNS
from database.repositories.webhook_event import WebhookEventRepository

__all__ = [
    'BaseRepository',
    'JobPostingRepository',
    'UserRepository',
    'ApplicationRepository',
    'AbuseEventRepository',
    'InterviewRepository',
    'AlertRepository',
    'SENT_COLUMNS',
    'WebhookEventRepository',
]
