#!/usr/bin/env python3
"""
Scoring Module - application intake scoring.

Public API:
- evaluate_application: pure merit rank + abuse risk for one submission
- ApplicationIntakeService: idempotent, risk-aware persistence of submissions
- ScoringResult, JobScoringProfile, ApplicantProfile, ScreenerAnswer

Layout:
- models.py: Data structures
- screeners.py: Screener prompt matching and skill inference
- risk.py: Additive risk rules
- service.py: evaluate_application orchestrator and rank formula
- persistence.py: ApplicationIntakeService (store access)
"""

from core.scorer.models import ScoringResult, JobScoringProfile, ApplicantProfile, ScreenerAnswer
from core.scorer.screeners import parse_screener_answers
from core.scorer.service import evaluate_application
from core.scorer.persistence import ApplicationIntakeService, IntakeOutcome

__all__ = [
    'evaluate_application',
    'parse_screener_answers',
    'ApplicationIntakeService',
    'IntakeOutcome',
    'ScoringResult',
    'JobScoringProfile',
    'ApplicantProfile',
    'ScreenerAnswer',
]
