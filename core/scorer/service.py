#!/usr/bin/env python3
"""
Application Scoring - merit ranking and abuse risk for a single submission.

evaluate_application() is pure: it reads nothing from the store and never
raises. Degenerate input (missing profile data, no answers, no screeners)
produces a conservative result instead of an error.

Ranking formula:
    rank = meritFit*0.52 + requiredRatio*28 + preferredRatio*12
           + completeness*0.12 - missingRequired*7 - missingPreferred*2
           - riskScore*0.24
clamped to [0, 100] and rounded.
"""

from datetime import datetime
from typing import List, Optional
import logging

from core.config_loader import ScoringConfig
from core.utils import clamp_score, encode_list, normalize_token, parse_unique_list, utc_now
from core.scorer.models import ScoringResult, JobScoringProfile, ApplicantProfile, ScreenerAnswer
from core.scorer import screeners
from core.scorer import risk as risk_rules

logger = logging.getLogger(__name__)

WEIGHT_MERIT_FIT = 0.52
WEIGHT_REQUIRED_RATIO = 28
WEIGHT_PREFERRED_RATIO = 12
WEIGHT_COMPLETENESS = 0.12
PENALTY_MISSING_REQUIRED_SKILL = 7
PENALTY_MISSING_PREFERRED_SKILL = 2
WEIGHT_RISK = 0.24

# Used when a job has no preferred screeners. Deliberately not 1.0 like the
# required ratio; changing it shifts every ranking.
DEFAULT_PREFERRED_RATIO = 0.6

COMPLETENESS_TARGET = 80


def _safe_number(value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if number == number else 0.0  # NaN -> 0


def calculate_rank(
    merit_fit: float,
    required_ratio: float,
    preferred_ratio: float,
    completeness: float,
    missing_required: int,
    missing_preferred: int,
    risk_score: float
) -> int:
    raw = (
        merit_fit * WEIGHT_MERIT_FIT
        + required_ratio * WEIGHT_REQUIRED_RATIO
        + preferred_ratio * WEIGHT_PREFERRED_RATIO
        + completeness * WEIGHT_COMPLETENESS
        - missing_required * PENALTY_MISSING_REQUIRED_SKILL
        - missing_preferred * PENALTY_MISSING_PREFERRED_SKILL
        - risk_score * WEIGHT_RISK
    )
    return clamp_score(raw)


def build_fix_suggestions(
    completeness: float,
    missing_skills: List[str],
    missing_preferred_skills: List[str],
    required_total: int,
    required_score: int
) -> List[str]:
    suggestions = []
    if completeness < COMPLETENESS_TARGET:
        suggestions.append(f"Increase profile completeness to at least {COMPLETENESS_TARGET}%.")
    if missing_skills:
        suggestions.append(f"Add evidence for required skills: {', '.join(missing_skills)}.")
    if missing_preferred_skills:
        suggestions.append(
            f"Strengthen preferred skills coverage: {', '.join(missing_preferred_skills[:3])}."
        )
    if required_total > required_score:
        suggestions.append("Provide stronger examples for required screener prompts.")
    if not suggestions:
        suggestions.append("Profile is strong. Add fresh outcome metrics to stay competitive.")
    return suggestions


def build_match_explanation(
    required_passed: bool,
    required_score: int,
    required_total: int,
    preferred_score: int,
    preferred_total: int,
    missing_skills: List[str],
    auto_rank_score: int,
    job: JobScoringProfile
) -> str:
    parts = [
        f"{'Passed' if required_passed else 'Missed'} required screeners ({required_score}/{required_total}).",
        f"Preferred screener alignment {preferred_score}/{preferred_total}.",
        f"Missing required skills: {', '.join(missing_skills)}."
        if missing_skills else "No required skill gaps detected.",
        f"Auto-rank {auto_rank_score}/100 for {job.title} at {job.company}.",
    ]
    return " ".join(parts)


def serialize_answers(answers: List[ScreenerAnswer], max_chars: int) -> str:
    return encode_list(f"{entry.question}: {entry.answer[:max_chars]}" for entry in answers)


def evaluate_application(
    job: JobScoringProfile,
    applicant: ApplicantProfile,
    answers: List[ScreenerAnswer],
    recent_application_count: int,
    prior_abuse_event_count: int,
    now: Optional[datetime] = None,
    config: Optional[ScoringConfig] = None
) -> ScoringResult:
    """Score one submission for merit rank and abuse risk."""
    config = config or ScoringConfig()
    now = now or utc_now()
    answers = list(answers or [])

    required_screeners = parse_unique_list(job.required_screeners)
    preferred_screeners = parse_unique_list(job.preferred_screeners)
    required_skills = parse_unique_list(job.required_skills)
    preferred_skills = parse_unique_list(job.preferred_skills)

    # Effective skill set: profile first, then anything inferred from answers
    candidate_skills = parse_unique_list(
        parse_unique_list(applicant.skills) + screeners.extract_skills_from_answers(answers)
    )
    skill_index = {normalize_token(skill) for skill in candidate_skills}

    required_score = screeners.count_passed(required_screeners, answers)
    preferred_score = screeners.count_passed(preferred_screeners, answers)

    missing_skills = [s for s in required_skills if normalize_token(s) not in skill_index]
    missing_preferred_skills = [s for s in preferred_skills if normalize_token(s) not in skill_index]

    required_passed = not required_screeners or required_score >= len(required_screeners)

    raw_risk, risk_flags, risk_details = risk_rules.calculate_risk(
        recent_application_count=recent_application_count,
        account_age=risk_rules.account_age_hours(applicant.created_at, now),
        prior_abuse_event_count=prior_abuse_event_count,
        is_flagged=applicant.is_flagged,
        has_required_screeners=bool(required_screeners),
        answer_count=len(answers)
    )
    risk_score = clamp_score(raw_risk)

    required_ratio = (
        required_score / max(1, len(required_screeners)) if required_screeners else 1.0
    )
    preferred_ratio = (
        preferred_score / len(preferred_screeners) if preferred_screeners else DEFAULT_PREFERRED_RATIO
    )

    completeness = _safe_number(applicant.completeness)
    auto_rank_score = calculate_rank(
        merit_fit=_safe_number(job.merit_fit),
        required_ratio=required_ratio,
        preferred_ratio=preferred_ratio,
        completeness=completeness,
        missing_required=len(missing_skills),
        missing_preferred=len(missing_preferred_skills),
        risk_score=risk_score
    )

    needs_manual_review = risk_score >= config.manual_review_threshold or not required_passed
    block_for_abuse = risk_score >= config.block_threshold

    return ScoringResult(
        required_passed=required_passed,
        required_score=required_score,
        preferred_score=preferred_score,
        auto_rank_score=auto_rank_score,
        risk_score=risk_score,
        risk_flags=risk_flags,
        needs_manual_review=needs_manual_review,
        block_for_abuse=block_for_abuse,
        match_explanation=build_match_explanation(
            required_passed, required_score, len(required_screeners),
            preferred_score, len(preferred_screeners),
            missing_skills, auto_rank_score, job
        ),
        missing_skills=missing_skills,
        missing_preferred_skills=missing_preferred_skills,
        profile_fix_suggestions=build_fix_suggestions(
            completeness, missing_skills, missing_preferred_skills,
            len(required_screeners), required_score
        ),
        submitted_answers=serialize_answers(answers, config.answer_max_chars),
        risk_details=risk_details,
    )
