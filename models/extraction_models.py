"""Pydantic models for the LLM analysis output contract.

These models describe the JSON object the model must return for a transcript.
Keys are camelCase on the wire; every key is required, and nullable keys must
still be present (possibly as null).
"""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional
from enum import Enum


class PriorityEnum(str, Enum):
    """Priority levels for an extracted action item."""
    high = "high"
    medium = "medium"
    low = "low"


class DecisionTypeEnum(str, Enum):
    """Whether a decision was finalized or still awaits resolution."""
    made = "made"
    pending = "pending"


class _LLMModel(BaseModel):
    # camelCase keys only; snake_case names do not satisfy a required key
    model_config = ConfigDict(alias_generator=to_camel)


class ExtractedActionItem(_LLMModel):
    """A task extracted from the meeting."""
    description: str = Field(
        description="Concise, actionable description of the task"
    )
    owner: Optional[str] = Field(
        description="Person responsible for the task, null if unassigned"
    )
    deadline: Optional[str] = Field(
        description="Deadline as stated in the meeting (free-form), null if none"
    )
    priority: Optional[PriorityEnum] = Field(
        description="high, medium, low, or null when no priority can be inferred"
    )


class ExtractedDecision(_LLMModel):
    """A decision point extracted from the meeting."""
    description: str = Field(
        description="What was decided, or what still needs deciding"
    )
    type: DecisionTypeEnum = Field(
        description="made or pending"
    )
    context: Optional[str] = Field(
        description="Brief context for the decision, null if none"
    )


class LLMAnalysisResult(_LLMModel):
    """Complete structured analysis returned by the model for one transcript."""
    sentiment: str = Field(
        description="One word describing the overall meeting tone"
    )
    sentiment_summary: str = Field(
        description="1-2 sentence summary of the meeting tone"
    )
    action_items: List[ExtractedActionItem] = Field(
        description="Action items in the order they were identified"
    )
    decisions: List[ExtractedDecision] = Field(
        description="Decisions, both made and pending, in the order they were identified"
    )
