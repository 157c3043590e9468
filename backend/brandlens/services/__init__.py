"""
Business Logic Services
"""

from .scoring_engine import (
    MultiFactorScoringStrategy,
    ScoringStrategy,
    ScoringWeights,
    SimpleScoringStrategy,
    VisibilityMetrics,
    VisibilityScoreResult,
)
from .visibility_analyzer import AnalysisBundle, VisibilityAnalyzer
from .citation_mention import CitationMentionWorker, ResponseNotFoundError, WorkerResult
from .response_repository import ResponseRepository, SqlAlchemyResponseRepository

__all__ = [
    "MultiFactorScoringStrategy",
    "ScoringStrategy",
    "ScoringWeights",
    "SimpleScoringStrategy",
    "VisibilityMetrics",
    "VisibilityScoreResult",
    "AnalysisBundle",
    "VisibilityAnalyzer",
    "CitationMentionWorker",
    "ResponseNotFoundError",
    "WorkerResult",
    "ResponseRepository",
    "SqlAlchemyResponseRepository",
]
