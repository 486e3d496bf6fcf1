#!/usr/bin/env python3
"""
Application Intake - score a submission and persist it exactly once.

Order of operations:
1. An existing application for (applicant, job) is returned untouched.
2. Risk inputs are read from the store (velocity, prior abuse events).
3. Any raised risk flag is written to the abuse ledger.
4. Blocked submissions stop there; nothing else is persisted.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional
import logging

from core.config_loader import ScoringConfig
from core.exceptions import EntityNotFoundException
from core.utils import encode_list, utc_now
from core.scorer.models import ScoringResult, JobScoringProfile, ApplicantProfile
from core.scorer.screeners import parse_screener_answers
from core.scorer.service import evaluate_application
from database.models import Application
from database.repository import MarketplaceRepository

logger = logging.getLogger(__name__)

INTAKE_FLOW = 'application_create'
COUNTED_DECISIONS = ('manual_review', 'block')
USER_AGENT_MAX_CHARS = 400


@dataclass
class IntakeOutcome:
    application: Optional[Application]
    created: bool
    blocked: bool = False
    scoring: Optional[ScoringResult] = None


def risk_severity(risk_score: int, config: ScoringConfig) -> str:
    if risk_score >= config.block_threshold:
        return 'high'
    if risk_score >= config.manual_review_threshold:
        return 'medium'
    return 'low'


def risk_decision(scoring: ScoringResult) -> str:
    if scoring.block_for_abuse:
        return 'block'
    if scoring.needs_manual_review:
        return 'manual_review'
    return 'allow'


class ApplicationIntakeService:
    """Scores and stores new applications. Stateless; the repository is passed per call."""

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig()

    def submit(
        self,
        repo: MarketplaceRepository,
        user_id: str,
        job_id: int,
        raw_answers: Any = None,
        source_ip: Optional[str] = None,
        user_agent: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> IntakeOutcome:
        now = now or utc_now()

        job = repo.jobs.get_by_id(job_id)
        if job is None:
            raise EntityNotFoundException(f"Job not found: {job_id}")
        user = repo.users.get_by_id(user_id)
        if user is None:
            raise EntityNotFoundException(f"User not found: {user_id}")

        existing = repo.applications.get_existing(user_id, job_id)
        if existing is not None:
            logger.info(f"Application {existing.id} already exists for user {user_id} / job {job_id}")
            return IntakeOutcome(application=existing, created=False)

        answers = parse_screener_answers(raw_answers)
        recent_count = repo.applications.count_recent_for_user(
            user_id, now - timedelta(minutes=self.config.velocity_window_minutes)
        )
        prior_events = repo.abuse.count_for_source(
            source_ip,
            now - timedelta(hours=self.config.abuse_lookback_hours),
            COUNTED_DECISIONS
        )

        scoring = evaluate_application(
            job=JobScoringProfile.from_model(job),
            applicant=ApplicantProfile.from_model(user),
            answers=answers,
            recent_application_count=recent_count,
            prior_abuse_event_count=prior_events,
            now=now,
            config=self.config
        )

        if scoring.risk_flags:
            repo.abuse.record(
                flow=INTAKE_FLOW,
                user_id=user_id,
                source_ip=source_ip,
                severity=risk_severity(scoring.risk_score, self.config),
                decision=risk_decision(scoring),
                detail=f"jobId={job_id};risk={scoring.risk_score};flags={encode_list(scoring.risk_flags)}"
            )

        if scoring.block_for_abuse:
            logger.warning(
                f"Blocked application from user {user_id} for job {job_id}: "
                f"risk={scoring.risk_score} flags={scoring.risk_flags}"
            )
            return IntakeOutcome(application=None, created=False, blocked=True, scoring=scoring)

        application, created = repo.applications.create_once(user_id, job_id, {
            'status': 'Applied',
            'required_passed': scoring.required_passed,
            'required_score': scoring.required_score,
            'preferred_score': scoring.preferred_score,
            'auto_rank_score': scoring.auto_rank_score,
            'risk_score': scoring.risk_score,
            'risk_flags': encode_list(scoring.risk_flags),
            'needs_manual_review': scoring.needs_manual_review,
            'match_explanation': scoring.match_explanation,
            'missing_skills': encode_list(scoring.missing_skills),
            'profile_fix_suggestions': encode_list(scoring.profile_fix_suggestions),
            'submitted_answers': scoring.submitted_answers,
            'source_ip': source_ip,
            'user_agent': user_agent[:USER_AGENT_MAX_CHARS] if user_agent else None,
            'applied_at': now,
        })
        if created:
            logger.info(
                f"Application {application.id} created: rank={scoring.auto_rank_score} "
                f"risk={scoring.risk_score} review={scoring.needs_manual_review}"
            )
        return IntakeOutcome(application=application, created=created, scoring=scoring if created else None)
