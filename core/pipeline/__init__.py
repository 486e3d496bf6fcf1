"""
Pipeline automation: stage-transition recommendations and interviewer load
rebalancing, with a conditional-update apply step.
"""

from core.pipeline.models import (
    PipelineScope,
    RecommendationPriority,
    LoadLevel,
    StageRecommendation,
    InterviewLoadStat,
    RebalanceSuggestion,
    PipelineSnapshot,
    PipelineRunResult,
)
from core.pipeline.service import PipelineAutomationService

__all__ = [
    'PipelineAutomationService',
    'PipelineScope',
    'RecommendationPriority',
    'LoadLevel',
    'StageRecommendation',
    'InterviewLoadStat',
    'RebalanceSuggestion',
    'PipelineSnapshot',
    'PipelineRunResult',
]
