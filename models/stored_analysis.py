"""
Stored Analysis Data Model

This module defines the StoredAnalysis dataclass: a fully-loaded analysis row
together with its transcript and ordered children, as returned by the
persistence layer.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from models.db_models import (
    ActionItemModel,
    AnalysisModel,
    DecisionModel,
    TranscriptModel,
)


@dataclass
class StoredAnalysis:
    """
    An analysis as persisted, with everything needed to build its DTO.

    Attributes:
        analysis: The analysis row
        transcript: The parent transcript row
        action_items: Action items ordered by creation time ascending
        decisions: Decisions ordered by creation time ascending
    """
    analysis: Optional[AnalysisModel]
    transcript: Optional[TranscriptModel] = None
    action_items: List[ActionItemModel] = field(default_factory=list)
    decisions: List[DecisionModel] = field(default_factory=list)
