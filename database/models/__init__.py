from .base import Base
from .user import User
from .job import JobPosting
from .application import Application, AbuseEvent, APPLICATION_STATUSES
from .interview import Interview
from .alerts import SavedSearch, JobAlert, AlertDeliveryLog
from .audit import WebhookEvent

__all__ = [
    'Base',
    'User',
    'JobPosting',
    'Application',
    'AbuseEvent',
    'APPLICATION_STATUSES',
    'Interview',
    'SavedSearch',
    'JobAlert',
    'AlertDeliveryLog',
    'WebhookEvent',
]
