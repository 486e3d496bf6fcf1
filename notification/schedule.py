import logging
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from core.utils import as_utc

logger = logging.getLogger(__name__)

INSTANT = 'instant'
DAILY = 'daily'
WEEKLY = 'weekly'

CADENCE_INTERVAL_HOURS = {
    DAILY: 24,
    WEEKLY: 7 * 24,
}


def normalize_cadence(value: Optional[str]) -> str:
    """Anything other than instant or weekly is treated as daily."""
    cadence = (value or '').strip().lower()
    if cadence in (INSTANT, WEEKLY):
        return cadence
    return DAILY


def local_hour(now: datetime, tz_name: Optional[str]) -> int:
    try:
        zone = ZoneInfo(tz_name or 'UTC')
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown timezone '{tz_name}', using UTC")
        zone = ZoneInfo('UTC')
    return as_utc(now).astimezone(zone).hour


def is_digest_due(
    cadence: str,
    digest_hour: int,
    last_digest_at: Optional[datetime],
    now: datetime,
    tz_name: Optional[str] = 'UTC'
) -> bool:
    """
    A daily/weekly digest is due once the local hour has reached digest_hour
    and a full interval has passed since the previous digest.
    """
    cadence = normalize_cadence(cadence)
    if cadence == INSTANT:
        return False
    if local_hour(now, tz_name) < digest_hour:
        return False
    if last_digest_at is None:
        return True
    elapsed_hours = (as_utc(now) - as_utc(last_digest_at)).total_seconds() / 3600
    return elapsed_hours >= CADENCE_INTERVAL_HOURS[cadence]
