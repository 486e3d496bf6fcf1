#!/usr/bin/env python3
"""
Stage Recommendations - rule table for moving applications between stages.

Rules are checked in order per current status; the first that matches wins.

    Applied   fit >= 90                 -> Interview  high    0.92
    Applied   fit >= 82, age >= 4d      -> Interview  medium  0.81
    Applied   fit <  70, age >= 12d     -> Rejected   medium  0.76
    Interview fit >= 88, age >= 10d     -> Offer      high    0.87
    Interview fit <  75, age >= 21d     -> Rejected   low     0.68
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional

from core.utils import as_utc
from core.pipeline.models import RecommendationPriority, StageRecommendation


@dataclass(frozen=True)
class StageRule:
    matches: Callable[[float, float], bool]  # (merit_fit, age_days) -> bool
    target: str
    priority: RecommendationPriority
    confidence: float
    reason: str


STAGE_RULES: Dict[str, List[StageRule]] = {
    'Applied': [
        StageRule(lambda fit, days: fit >= 90, 'Interview', RecommendationPriority.HIGH, 0.92,
                  "Top merit fit cleared threshold for immediate interview."),
        StageRule(lambda fit, days: fit >= 82 and days >= 4, 'Interview', RecommendationPriority.MEDIUM, 0.81,
                  "Strong fit with enough pipeline age to move forward."),
        StageRule(lambda fit, days: fit < 70 and days >= 12, 'Rejected', RecommendationPriority.MEDIUM, 0.76,
                  "Low fit and stale application beyond review window."),
    ],
    'Interview': [
        StageRule(lambda fit, days: fit >= 88 and days >= 10, 'Offer', RecommendationPriority.HIGH, 0.87,
                  "Interview-stage candidate has high fit and long dwell time."),
        StageRule(lambda fit, days: fit < 75 and days >= 21, 'Rejected', RecommendationPriority.LOW, 0.68,
                  "Interview-stage candidate is stale with below-target fit."),
    ],
}


def age_in_days(applied_at: datetime, now: datetime) -> float:
    return (as_utc(now) - as_utc(applied_at)).total_seconds() / 86400


def derive_recommendation(current_status: str, merit_fit: float, age_days: float) -> Optional[StageRule]:
    for rule in STAGE_RULES.get(current_status, []):
        if rule.matches(merit_fit, age_days):
            if rule.target == current_status:
                return None
            return rule
    return None


def sort_recommendations(recommendations: List[StageRecommendation]) -> List[StageRecommendation]:
    """Highest priority first, then highest confidence. Stable for equal keys."""
    return sorted(recommendations, key=lambda r: (-r.priority.rank, -r.confidence))
