"""SQLModel table definitions for transcripts and their analyses.

A transcript owns exactly one analysis; an analysis owns its action items and
decisions. Rows are written once and never updated.
"""
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, Text, Enum as SAEnum
from typing import Optional
from datetime import datetime, timezone
from uuid import UUID, uuid4

from models.extraction_models import PriorityEnum, DecisionTypeEnum


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp for `timestamp with time zone` columns."""
    return datetime.now(timezone.utc)


def timestamp_column(index: bool = False) -> Column:
    """A fresh NOT NULL timezone-aware timestamp column."""
    return Column(DateTime(timezone=True), nullable=False, index=index)


class TranscriptModel(SQLModel, table=True):
    """Raw meeting transcript as submitted."""
    __tablename__ = "transcripts"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    content: str = Field(sa_column=Column(Text, nullable=False))
    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())


class AnalysisModel(SQLModel, table=True):
    """LLM-derived analysis of a single transcript."""
    __tablename__ = "analyses"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    transcript_id: UUID = Field(
        foreign_key="transcripts.id",
        unique=True,
        index=True,
        ondelete="CASCADE",
    )
    sentiment: str = Field(sa_column=Column(Text, nullable=False))
    sentiment_summary: Optional[str] = Field(default=None, sa_column=Column(Text))
    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column(index=True))


class ActionItemModel(SQLModel, table=True):
    """Task extracted from a meeting."""
    __tablename__ = "action_items"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    analysis_id: UUID = Field(foreign_key="analyses.id", index=True, ondelete="CASCADE")
    description: str = Field(sa_column=Column(Text, nullable=False))
    owner: Optional[str] = Field(default=None, sa_column=Column(Text))
    deadline: Optional[str] = Field(default=None, sa_column=Column(Text))  # free-form, never parsed
    priority: Optional[PriorityEnum] = Field(
        default=None,
        sa_column=Column(SAEnum(PriorityEnum, name="Priority"), nullable=True)
    )
    position: int = Field(default=0)  # index within the model output
    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())


class DecisionModel(SQLModel, table=True):
    """Decision point extracted from a meeting."""
    __tablename__ = "decisions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    analysis_id: UUID = Field(foreign_key="analyses.id", index=True, ondelete="CASCADE")
    description: str = Field(sa_column=Column(Text, nullable=False))
    type: DecisionTypeEnum = Field(
        sa_column=Column(SAEnum(DecisionTypeEnum, name="DecisionType"), nullable=False)
    )
    context: Optional[str] = Field(default=None, sa_column=Column(Text))
    position: int = Field(default=0)
    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())
