import logging
import math
import re
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional, Union

logger = logging.getLogger(__name__)

_LIST_SEPARATORS = re.compile(r"[,\n|]")

ListLike = Union[str, Iterable[str], None]


def parse_list(value: ListLike) -> List[str]:
    """Split a delimited string (``,``, newline or ``|``) into trimmed, non-empty entries.

    Already-split iterables are accepted and only trimmed.
    """
    if not value:
        return []
    if isinstance(value, str):
        entries = _LIST_SEPARATORS.split(value)
    else:
        entries = [str(entry) for entry in value]
    return [entry.strip() for entry in entries if entry and entry.strip()]


def parse_unique_list(value: ListLike) -> List[str]:
    """Like parse_list, but drops case-insensitive duplicates keeping first-seen order."""
    seen = set()
    items: List[str] = []
    for entry in parse_list(value):
        key = entry.lower()
        if key in seen:
            continue
        seen.add(key)
        items.append(entry)
    return items


def encode_list(values: Iterable[str]) -> str:
    """Join entries with ", " after trimming; empty entries are dropped."""
    return ", ".join(entry.strip() for entry in values if entry and entry.strip())


def normalize_token(value: str) -> str:
    return value.strip().lower()


def clamp_score(value: float) -> int:
    """Clamp to [0, 100] and round; non-finite input scores 0."""
    if value is None or not math.isfinite(value):
        return 0
    return int(max(0, min(100, round(value))))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes read back from the store.

    SQLite drops tzinfo on TIMESTAMP columns; every timestamp is written in UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def mask_email(email: Any) -> str:
    """
    Mask email address for safe logging (PII protection).

    Shows only domain, e.g., "***@example.com"
    """
    email = str(email or "")
    if '@' not in email:
        return "***"
    _, domain = email.rsplit('@', 1)
    return f"***@{domain}"
