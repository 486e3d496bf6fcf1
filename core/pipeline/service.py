#!/usr/bin/env python3
"""
Pipeline Automation Service - stage recommendations and interviewer rebalancing.

get_snapshot() only reads. apply() re-derives the snapshot and writes its top
entries as conditional updates: a status (or owner) is changed only if the
stored value still equals what the snapshot saw. A mismatch is skipped and not
counted. There is no transaction spanning the read and the write; a change
made in between is preserved rather than overwritten, and the next run
recomputes anything that was missed.
"""

from datetime import datetime
from typing import Optional
import logging

from core.config_loader import PipelineConfig
from core.utils import utc_now
from core.pipeline.models import (
    PipelineScope,
    PipelineSnapshot,
    PipelineRunResult,
    PipelineTotals,
    StageRecommendation,
)
from core.pipeline.recommendations import age_in_days, derive_recommendation, sort_recommendations
from core.pipeline.rebalance import compute_load_stats, suggest_rebalance
from database.models import APPLICATION_STATUSES
from database.repository import MarketplaceRepository

logger = logging.getLogger(__name__)


def _normalize_status(value: str) -> str:
    return value if value in APPLICATION_STATUSES else 'Applied'


def _normalize_limit(value: Optional[int], default: int) -> int:
    if value is None:
        return default
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return default


class PipelineAutomationService:
    """Stateless; the repository is passed per call."""

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or PipelineConfig()

    def get_snapshot(
        self,
        repo: MarketplaceRepository,
        scope: PipelineScope,
        user_id: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> PipelineSnapshot:
        now = now or utc_now()
        owner_filter = user_id if scope == PipelineScope.EMPLOYER else None
        if scope == PipelineScope.EMPLOYER and not user_id:
            return PipelineSnapshot(scope=scope, generated_at=now)

        jobs = repo.jobs.list_for_owner(owner_filter)
        if not jobs:
            return PipelineSnapshot(scope=scope, generated_at=now)

        applications = repo.applications.list_for_jobs([job.id for job in jobs])
        upcoming = repo.interviews.list_upcoming(now)

        recommendations = []
        for application in applications:
            current_status = _normalize_status(application.status)
            job = application.job
            rule = derive_recommendation(
                current_status,
                job.merit_fit or 0,
                age_in_days(application.applied_at, now)
            )
            if rule is None:
                continue
            recommendations.append(StageRecommendation(
                application_id=application.id,
                job_id=job.id,
                job_title=job.title,
                company=job.company,
                candidate_email=application.user.email if application.user else "",
                current_status=current_status,
                recommended_status=rule.target,
                priority=rule.priority,
                confidence=rule.confidence,
                reason=rule.reason,
                applied_at=application.applied_at
            ))
        recommendations = sort_recommendations(recommendations)

        load_stats = compute_load_stats(upcoming)
        suggestions = suggest_rebalance(load_stats, upcoming)

        return PipelineSnapshot(
            scope=scope,
            generated_at=now,
            totals=PipelineTotals(
                applications=len(applications),
                recommendations=len(recommendations),
                scheduled_interviews=len(upcoming)
            ),
            recommendations=recommendations,
            load_stats=load_stats,
            rebalance_suggestions=suggestions
        )

    def apply(
        self,
        repo: MarketplaceRepository,
        scope: PipelineScope,
        user_id: Optional[str] = None,
        apply_limit: Optional[int] = None,
        rebalance_limit: Optional[int] = None,
        now: Optional[datetime] = None
    ) -> PipelineRunResult:
        now = now or utc_now()
        snapshot = self.get_snapshot(repo, scope, user_id, now)

        apply_limit = _normalize_limit(apply_limit, self.config.default_apply_limit)
        rebalance_limit = _normalize_limit(rebalance_limit, self.config.default_rebalance_limit)

        recommendation_targets = snapshot.recommendations[:apply_limit]
        rebalance_targets = snapshot.rebalance_suggestions[:rebalance_limit]

        applied = 0
        for recommendation in recommendation_targets:
            changed = repo.applications.update_status_if(
                recommendation.application_id,
                recommendation.current_status,
                recommendation.recommended_status
            )
            if not changed:
                logger.info(
                    f"Skipped application {recommendation.application_id}: status no longer "
                    f"{recommendation.current_status}"
                )
            applied += changed

        moved = 0
        for suggestion in rebalance_targets:
            changed = repo.interviews.reassign_owner_if(
                suggestion.interview_id,
                suggestion.current_owner,
                suggestion.suggested_owner
            )
            if not changed:
                logger.info(
                    f"Skipped interview {suggestion.interview_id}: owner no longer {suggestion.current_owner}"
                )
            moved += changed

        logger.info(
            f"Pipeline automation ({scope.value}): {applied}/{len(recommendation_targets)} status updates, "
            f"{moved}/{len(rebalance_targets)} interview moves"
        )
        return PipelineRunResult(
            scope=scope,
            run_at=now,
            recommendations_considered=len(recommendation_targets),
            rebalance_considered=len(rebalance_targets),
            applied_status_updates=applied,
            moved_interviews=moved
        )
