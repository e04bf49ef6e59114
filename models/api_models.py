"""
Request/Response Models for the analysis API

This module defines the Pydantic models exchanged with HTTP clients, plus the
transcript length contract enforced before any external call is made.
Fields are snake_case in Python and camelCase on the wire.
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from models.extraction_models import PriorityEnum, DecisionTypeEnum
from services.errors import TranscriptValidationError

MIN_TRANSCRIPT_LENGTH = 10
MAX_TRANSCRIPT_LENGTH = 50_000


def check_transcript_length(transcript: str) -> None:
    """
    Enforce the user input contract on a transcript.

    Args:
        transcript: Raw transcript text as submitted

    Raises:
        TranscriptValidationError: If the length is outside
            [MIN_TRANSCRIPT_LENGTH, MAX_TRANSCRIPT_LENGTH]
    """
    if len(transcript) < MIN_TRANSCRIPT_LENGTH:
        raise TranscriptValidationError(
            f"Transcript must be at least {MIN_TRANSCRIPT_LENGTH} characters"
        )
    if len(transcript) > MAX_TRANSCRIPT_LENGTH:
        raise TranscriptValidationError(
            f"Transcript is too long. Please limit to {MAX_TRANSCRIPT_LENGTH:,} characters"
        )


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class AnalyzeTranscriptRequest(BaseModel):
    """
    Request body for the analyze endpoint.

    Length bounds are checked by the analysis pipeline with
    check_transcript_length so the error names the violated bound.
    """
    transcript: str = Field(
        ...,
        description="Meeting transcript text (10-50,000 characters)"
    )


class ActionItemResponse(_WireModel):
    id: str
    description: str
    owner: Optional[str] = None
    deadline: Optional[str] = None
    priority: Optional[PriorityEnum] = None


class DecisionResponse(_WireModel):
    id: str
    description: str
    type: DecisionTypeEnum
    context: Optional[str] = None


class AnalysisResponse(_WireModel):
    """
    Full analysis returned by the analyze and fetch-by-id endpoints.

    Attributes:
        id: Analysis identifier
        transcript_id: Identifier of the analysed transcript
        sentiment: One-word meeting tone
        sentiment_summary: Short tone summary, if any
        action_items: Action items in creation order
        decisions: Decisions in creation order
        created_at: ISO-8601 UTC creation timestamp
    """
    id: str
    transcript_id: str
    sentiment: str
    sentiment_summary: Optional[str] = None
    action_items: List[ActionItemResponse] = Field(default_factory=list)
    decisions: List[DecisionResponse] = Field(default_factory=list)
    created_at: str


class AnalysisSummaryResponse(_WireModel):
    """Index entry for an analysis: child counts instead of child lists."""
    id: str
    transcript_id: str
    sentiment: str
    created_at: str
    action_items_count: int
    decisions_count: int


class AnalysisListResponse(_WireModel):
    analyses: List[AnalysisSummaryResponse] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    timestamp: str
