#!/usr/bin/env python3
"""
Risk Calculations - Additive abuse-risk rules for a submission.

Each rule is independent; stacked rules (velocity, account age) add on
top of their milder counterpart.
"""

from datetime import datetime
from typing import List, Dict, Any, Optional, Tuple
import logging

from core.utils import as_utc

logger = logging.getLogger(__name__)

HIGH_VELOCITY_COUNT = 6
EXTREME_VELOCITY_COUNT = 12
NEW_ACCOUNT_HOURS = 1.0
VERY_NEW_ACCOUNT_HOURS = 10 / 60
IP_EVENT_POINTS = 6
IP_EVENT_CAP = 24


def account_age_hours(created_at: Optional[datetime], now: datetime) -> float:
    """Hours since account creation; an unknown creation time counts as brand new."""
    if created_at is None:
        return 0.0
    return (as_utc(now) - as_utc(created_at)).total_seconds() / 3600


def calculate_risk(
    recent_application_count: int,
    account_age: float,
    prior_abuse_event_count: int,
    is_flagged: bool,
    has_required_screeners: bool,
    answer_count: int
) -> Tuple[float, List[str], List[Dict[str, Any]]]:
    """
    Sum the risk rules that fire.

    Returns: (raw_risk_score, flags, details)
    """
    risk = 0.0
    flags: List[str] = []
    details: List[Dict[str, Any]] = []

    def add(flag: str, points: float, reason: str) -> None:
        nonlocal risk
        risk += points
        flags.append(flag)
        details.append({'type': flag, 'amount': points, 'reason': reason})

    recent = recent_application_count or 0
    if recent >= HIGH_VELOCITY_COUNT:
        add('high_application_velocity', 22, f"{recent} applications in the velocity window")
    if recent >= EXTREME_VELOCITY_COUNT:
        add('extreme_application_velocity', 20, f"{recent} applications in the velocity window")

    if account_age < NEW_ACCOUNT_HOURS:
        add('new_account', 18, f"Account is {account_age:.2f}h old")
    if account_age < VERY_NEW_ACCOUNT_HOURS:
        add('very_new_account', 18, f"Account is {account_age * 60:.0f} minutes old")

    prior = prior_abuse_event_count or 0
    if prior > 0:
        add('ip_history_flagged', min(IP_EVENT_CAP, prior * IP_EVENT_POINTS),
            f"{prior} prior abuse event(s) from this address")

    if is_flagged:
        add('user_previously_flagged', 26, "Applicant was flagged before")

    if has_required_screeners and answer_count == 0:
        add('missing_required_answers', 10, "Required screeners exist but no answers were submitted")

    if flags:
        logger.debug(f"Risk flags raised: {flags} (raw score {risk})")

    return risk, flags, details
