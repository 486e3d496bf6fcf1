#!/usr/bin/env python3
"""
Scoring Models - Inputs and results of application intake scoring.
"""

from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field
from datetime import datetime

from core.utils import parse_unique_list


@dataclass
class ScreenerAnswer:
    question: str
    answer: str


@dataclass
class JobScoringProfile:
    """The parts of a job posting that scoring reads."""
    merit_fit: float = 0.0
    required_screeners: List[str] = field(default_factory=list)
    preferred_screeners: List[str] = field(default_factory=list)
    required_skills: List[str] = field(default_factory=list)
    preferred_skills: List[str] = field(default_factory=list)
    title: str = ""
    company: str = ""

    @classmethod
    def from_model(cls, job: Any) -> "JobScoringProfile":
        return cls(
            merit_fit=job.merit_fit or 0,
            required_screeners=parse_unique_list(job.required_screeners),
            preferred_screeners=parse_unique_list(job.preferred_screeners),
            required_skills=parse_unique_list(job.required_skills),
            preferred_skills=parse_unique_list(job.preferred_skills),
            title=job.title or "",
            company=job.company or "",
        )


@dataclass
class ApplicantProfile:
    skills: List[str] = field(default_factory=list)
    completeness: float = 0.0
    created_at: Optional[datetime] = None
    is_flagged: bool = False
    email: str = ""

    @classmethod
    def from_model(cls, user: Any) -> "ApplicantProfile":
        return cls(
            skills=parse_unique_list(user.profile_skills),
            completeness=user.profile_completeness or 0,
            created_at=user.created_at,
            is_flagged=bool(user.is_flagged),
            email=user.email or "",
        )


@dataclass
class ScoringResult:
    """Complete intake scoring outcome for one submission."""
    required_passed: bool
    required_score: int
    preferred_score: int
    auto_rank_score: int
    risk_score: int
    risk_flags: List[str] = field(default_factory=list)
    needs_manual_review: bool = False
    block_for_abuse: bool = False

    match_explanation: str = ""
    missing_skills: List[str] = field(default_factory=list)
    missing_preferred_skills: List[str] = field(default_factory=list)
    profile_fix_suggestions: List[str] = field(default_factory=list)
    submitted_answers: str = ""
    risk_details: List[Dict[str, Any]] = field(default_factory=list)
