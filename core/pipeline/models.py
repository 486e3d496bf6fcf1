#!/usr/bin/env python3
"""
Pipeline Automation Models - snapshot and run result structures.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class PipelineScope(Enum):
    """employer: only postings the caller created. admin: every posting."""
    EMPLOYER = "employer"
    ADMIN = "admin"


class RecommendationPriority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return {"high": 3, "medium": 2, "low": 1}[self.value]


class LoadLevel(Enum):
    LOW = "low"
    BALANCED = "balanced"
    HIGH = "high"


@dataclass
class StageRecommendation:
    application_id: int
    job_id: int
    job_title: str
    company: str
    candidate_email: str
    current_status: str
    recommended_status: str
    priority: RecommendationPriority
    confidence: float
    reason: str
    applied_at: datetime


@dataclass
class InterviewLoadStat:
    owner: str
    scheduled: int
    next_interview_at: Optional[datetime]
    load_level: LoadLevel


@dataclass
class RebalanceSuggestion:
    interview_id: int
    person: str
    current_owner: str
    suggested_owner: str
    scheduled_at: datetime
    reason: str


@dataclass
class PipelineTotals:
    applications: int = 0
    recommendations: int = 0
    scheduled_interviews: int = 0


@dataclass
class PipelineSnapshot:
    scope: PipelineScope
    generated_at: datetime
    totals: PipelineTotals = field(default_factory=PipelineTotals)
    recommendations: List[StageRecommendation] = field(default_factory=list)
    load_stats: List[InterviewLoadStat] = field(default_factory=list)
    rebalance_suggestions: List[RebalanceSuggestion] = field(default_factory=list)


@dataclass
class PipelineRunResult:
    scope: PipelineScope
    run_at: datetime
    recommendations_considered: int = 0
    rebalance_considered: int = 0
    applied_status_updates: int = 0
    moved_interviews: int = 0
