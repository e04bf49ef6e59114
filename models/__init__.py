"""Data models for the meeting transcript analyzer."""
from .extraction_models import (
    LLMAnalysisResult,
    ExtractedActionItem,
    ExtractedDecision,
    PriorityEnum,
    DecisionTypeEnum,
)
from .db_models import (
    TranscriptModel,
    AnalysisModel,
    ActionItemModel,
    DecisionModel,
)
from .stored_analysis import StoredAnalysis

__all__ = [
    # Extraction models
    "LLMAnalysisResult",
    "ExtractedActionItem",
    "ExtractedDecision",
    "PriorityEnum",
    "DecisionTypeEnum",
    # Database models
    "TranscriptModel",
    "AnalysisModel",
    "ActionItemModel",
    "DecisionModel",
    # Persistence result
    "StoredAnalysis",
]
