"""Analysis Store for persisting and retrieving transcript analyses.

A transcript, its analysis and all extracted children are written in a single
transaction, so readers never observe a transcript without its analysis.
"""
import os
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from models.api_models import (
    ActionItemResponse,
    AnalysisResponse,
    AnalysisSummaryResponse,
    DecisionResponse,
)
from models.db_models import (
    ActionItemModel,
    AnalysisModel,
    DecisionModel,
    TranscriptModel,
)
from models.extraction_models import LLMAnalysisResult
from models.stored_analysis import StoredAnalysis
from services.database import get_async_session
from services.errors import NotFoundError, PersistenceError

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 50


def to_iso(value: datetime) -> str:
    """Render a timestamp as ISO-8601 in UTC.

    SQLite hands back naive values for timezone-aware columns; those are UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


class AnalysisStore:
    """Persistence service for transcripts and their analyses."""

    def __init__(self, session_factory: Optional[Callable] = None):
        """
        Args:
            session_factory: Callable returning an async session context
                manager. Defaults to services.database.get_async_session.
        """
        self.session_factory = session_factory or get_async_session
        self.list_limit = int(os.getenv("ANALYSES_LIST_LIMIT", str(DEFAULT_LIST_LIMIT)))

    async def save(self, transcript: str, result: LLMAnalysisResult) -> StoredAnalysis:
        """Persist a transcript and its analysis in a single transaction.

        Args:
            transcript: The transcript text that was analysed.
            result: The validated model output.

        Returns:
            StoredAnalysis with the created rows.

        Raises:
            PersistenceError: If the write cannot complete. Nothing is committed.
        """
        transcript_row = TranscriptModel(content=transcript)
        analysis_row = AnalysisModel(
            transcript_id=transcript_row.id,
            sentiment=result.sentiment,
            sentiment_summary=result.sentiment_summary,
        )
        action_items = [
            ActionItemModel(
                analysis_id=analysis_row.id,
                description=item.description,
                owner=item.owner,
                deadline=item.deadline,
                priority=item.priority,
                position=position,
            )
            for position, item in enumerate(result.action_items)
        ]
        decisions = [
            DecisionModel(
                analysis_id=analysis_row.id,
                description=item.description,
                type=item.type,
                context=item.context,
                position=position,
            )
            for position, item in enumerate(result.decisions)
        ]

        try:
            async with self.session_factory() as session:
                try:
                    session.add(transcript_row)
                    # Parents must be flushed first so child foreign keys resolve
                    await session.flush()
                    session.add(analysis_row)
                    await session.flush()
                    session.add_all(action_items)
                    session.add_all(decisions)

                    await session.commit()
                except Exception:
                    await session.rollback()
                    raise
        except (SQLAlchemyError, OSError) as e:
            raise PersistenceError("Failed to save analysis", details=str(e)) from e

        logger.info(
            f"Persisted analysis: analysis_id={analysis_row.id}, "
            f"transcript_id={transcript_row.id}, "
            f"action_items={len(action_items)}, decisions={len(decisions)}"
        )

        return StoredAnalysis(
            analysis=analysis_row,
            transcript=transcript_row,
            action_items=action_items,
            decisions=decisions,
        )

    async def get_by_id(self, analysis_id: str) -> StoredAnalysis:
        """Fetch one analysis with its transcript and ordered children.

        Raises:
            NotFoundError: If the id is malformed or does not resolve.
            PersistenceError: On any other database failure.
        """
        try:
            analysis_uuid = UUID(str(analysis_id))
        except ValueError:
            raise NotFoundError("Analysis not found", details=f"malformed id: {analysis_id!r}")

        try:
            async with self.session_factory() as session:
                analysis = await session.get(AnalysisModel, analysis_uuid)
                if analysis is None:
                    raise NotFoundError("Analysis not found", details=f"analysis_id={analysis_id}")

                transcript = await session.get(TranscriptModel, analysis.transcript_id)

                action_items = (await session.execute(
                    select(ActionItemModel)
                    .where(ActionItemModel.analysis_id == analysis_uuid)
                    .order_by(ActionItemModel.created_at, ActionItemModel.position)
                )).scalars().all()

                decisions = (await session.execute(
                    select(DecisionModel)
                    .where(DecisionModel.analysis_id == analysis_uuid)
                    .order_by(DecisionModel.created_at, DecisionModel.position)
                )).scalars().all()
        except (SQLAlchemyError, OSError) as e:
            raise PersistenceError("Failed to fetch analysis", details=str(e)) from e

        return StoredAnalysis(
            analysis=analysis,
            transcript=transcript,
            action_items=list(action_items),
            decisions=list(decisions),
        )

    async def list_analyses(self, limit: Optional[int] = None) -> List[AnalysisSummaryResponse]:
        """List the most recent analyses with child counts, newest first.

        Raises:
            PersistenceError: On any database failure.
        """
        if limit is None:
            limit = self.list_limit

        action_items_count = (
            select(func.count(ActionItemModel.id))
            .where(ActionItemModel.analysis_id == AnalysisModel.id)
            .correlate(AnalysisModel)
            .scalar_subquery()
        )
        decisions_count = (
            select(func.count(DecisionModel.id))
            .where(DecisionModel.analysis_id == AnalysisModel.id)
            .correlate(AnalysisModel)
            .scalar_subquery()
        )
        query = (
            select(
                AnalysisModel,
                action_items_count.label("action_items_count"),
                decisions_count.label("decisions_count"),
            )
            .order_by(AnalysisModel.created_at.desc())
            .limit(limit)
        )

        try:
            async with self.session_factory() as session:
                rows = (await session.execute(query)).all()
        except (SQLAlchemyError, OSError) as e:
            raise PersistenceError("Failed to list analyses", details=str(e)) from e

        return [
            AnalysisSummaryResponse(
                id=str(analysis.id),
                transcript_id=str(analysis.transcript_id),
                sentiment=analysis.sentiment,
                created_at=to_iso(analysis.created_at),
                action_items_count=n_action_items or 0,
                decisions_count=n_decisions or 0,
            )
            for analysis, n_action_items, n_decisions in rows
        ]

    def format_response(self, stored: StoredAnalysis) -> AnalysisResponse:
        """Map a fully-loaded StoredAnalysis to its wire DTO. Pure, no I/O."""
        analysis = stored.analysis
        return AnalysisResponse(
            id=str(analysis.id),
            transcript_id=str(analysis.transcript_id),
            sentiment=analysis.sentiment,
            sentiment_summary=analysis.sentiment_summary,
            action_items=[
                ActionItemResponse(
                    id=str(item.id),
                    description=item.description,
                    owner=item.owner,
                    deadline=item.deadline,
                    priority=item.priority,
                )
                for item in stored.action_items
            ],
            decisions=[
                DecisionResponse(
                    id=str(item.id),
                    description=item.description,
                    type=item.type,
                    context=item.context,
                )
                for item in stored.decisions
            ],
            created_at=to_iso(analysis.created_at),
        )


_analysis_store: AnalysisStore | None = None


def get_analysis_store() -> AnalysisStore:
    """Get or create the process-wide AnalysisStore."""
    global _analysis_store

    if _analysis_store is None:
        _analysis_store = AnalysisStore()

    return _analysis_store
