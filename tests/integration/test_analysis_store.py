"""
Integration Tests for AnalysisStore

Runs against a temporary SQLite database created with the real schema.
"""

import asyncio
from datetime import timedelta
import pytest
from uuid import uuid4
from sqlalchemy import DateTime, func
from sqlmodel import select

from models.db_models import ActionItemModel, AnalysisModel, DecisionModel, TranscriptModel
from models.extraction_models import (
    DecisionTypeEnum,
    ExtractedActionItem,
    LLMAnalysisResult,
    PriorityEnum,
)
from services.analysis_store import DEFAULT_LIST_LIMIT, AnalysisStore
from services.errors import NotFoundError, PersistenceError


def make_result(n_action_items: int = 1, n_decisions: int = 1, sentiment: str = "productive"):
    return LLMAnalysisResult.model_validate({
        "sentiment": sentiment,
        "sentimentSummary": "Focused and decisive.",
        "actionItems": [
            {
                "description": f"Task {i}",
                "owner": "Sarah" if i % 2 == 0 else None,
                "deadline": "Monday" if i % 2 == 0 else None,
                "priority": ["high", "low", None][i % 3],
            }
            for i in range(n_action_items)
        ],
        "decisions": [
            {
                "description": f"Decision {i}",
                "type": "made" if i % 2 == 0 else "pending",
                "context": None,
            }
            for i in range(n_decisions)
        ],
    })


async def count_rows(session_factory, model) -> int:
    async with session_factory() as session:
        return (await session.execute(select(func.count(model.id)))).scalar_one()


class TestSave:
    """Tests for AnalysisStore.save."""

    @pytest.mark.asyncio
    async def test_save_writes_all_rows(self, store, session_factory, sample_transcript):
        stored = await store.save(sample_transcript, make_result(2, 3))

        assert stored.transcript.content == sample_transcript
        assert stored.analysis.transcript_id == stored.transcript.id
        assert await count_rows(session_factory, TranscriptModel) == 1
        assert await count_rows(session_factory, AnalysisModel) == 1
        assert await count_rows(session_factory, ActionItemModel) == 2
        assert await count_rows(session_factory, DecisionModel) == 3

    @pytest.mark.asyncio
    async def test_save_with_no_children(self, store, sample_transcript):
        stored = await store.save(sample_transcript, make_result(0, 0, sentiment="neutral"))
        fetched = await store.get_by_id(str(stored.analysis.id))

        assert fetched.action_items == []
        assert fetched.decisions == []
        assert fetched.analysis.sentiment == "neutral"

    @pytest.mark.asyncio
    async def test_failed_child_insert_rolls_back_everything(self, store, session_factory):
        """A NOT NULL violation on a child leaves no transcript behind."""
        broken = LLMAnalysisResult.model_construct(
            sentiment="tense",
            sentimentSummary="Disagreement over scope.",
            actionItems=[
                ExtractedActionItem.model_construct(
                    description=None, owner=None, deadline=None, priority=None
                )
            ],
            decisions=[],
        )

        with pytest.raises(PersistenceError) as exc_info:
            await store.save("We argued about scope for an hour.", broken)

        assert exc_info.value.message == "Failed to save analysis"
        assert await count_rows(session_factory, TranscriptModel) == 0
        assert await count_rows(session_factory, AnalysisModel) == 0
        assert await count_rows(session_factory, ActionItemModel) == 0

    @pytest.mark.asyncio
    async def test_timestamps_are_timezone_aware(self, store, sample_transcript):
        stored = await store.save(sample_transcript, make_result(1, 1))

        for row in (stored.transcript, stored.analysis, *stored.action_items, *stored.decisions):
            assert row.created_at.tzinfo is not None
            assert row.created_at.utcoffset() == timedelta(0)

    @pytest.mark.parametrize("model", [TranscriptModel, AnalysisModel, ActionItemModel, DecisionModel])
    def test_created_at_columns_store_timezone(self, model):
        column = model.__table__.c.created_at

        assert isinstance(column.type, DateTime)
        assert column.type.timezone is True
        assert column.nullable is False


class TestGetById:
    """Tests for AnalysisStore.get_by_id."""

    @pytest.mark.asyncio
    async def test_round_trip_preserves_order_and_enums(self, store, sample_transcript):
        stored = await store.save(sample_transcript, make_result(5, 4))

        fetched = await store.get_by_id(str(stored.analysis.id))

        assert [item.description for item in fetched.action_items] == [f"Task {i}" for i in range(5)]
        assert [item.priority for item in fetched.action_items] == [
            PriorityEnum.high, PriorityEnum.low, None, PriorityEnum.high, PriorityEnum.low,
        ]
        assert [item.description for item in fetched.decisions] == [f"Decision {i}" for i in range(4)]
        assert fetched.decisions[1].type == DecisionTypeEnum.pending
        assert fetched.transcript.content == sample_transcript

    @pytest.mark.asyncio
    async def test_unknown_id_raises_not_found(self, store):
        with pytest.raises(NotFoundError) as exc_info:
            await store.get_by_id(str(uuid4()))

        assert exc_info.value.message == "Analysis not found"

    @pytest.mark.asyncio
    async def test_malformed_id_raises_not_found(self, store):
        with pytest.raises(NotFoundError):
            await store.get_by_id("not-a-uuid")


class TestListAnalyses:
    """Tests for AnalysisStore.list_analyses."""

    @pytest.mark.asyncio
    async def test_empty_store(self, store):
        assert await store.list_analyses() == []

    @pytest.mark.asyncio
    async def test_newest_first_with_true_counts(self, store, sample_transcript):
        first = await store.save(sample_transcript, make_result(1, 2, sentiment="productive"))
        await asyncio.sleep(0.01)
        second = await store.save(sample_transcript, make_result(3, 0, sentiment="tense"))

        summaries = await store.list_analyses()

        assert [s.id for s in summaries] == [str(second.analysis.id), str(first.analysis.id)]
        assert (summaries[0].action_items_count, summaries[0].decisions_count) == (3, 0)
        assert (summaries[1].action_items_count, summaries[1].decisions_count) == (1, 2)
        assert summaries[0].sentiment == "tense"

    @pytest.mark.asyncio
    async def test_limit_is_applied(self, store, sample_transcript):
        for _ in range(4):
            await store.save(sample_transcript, make_result(0, 0))

        assert len(await store.list_analyses(limit=2)) == 2
        store.list_limit = 3
        assert len(await store.list_analyses()) == 3

    @pytest.mark.asyncio
    async def test_default_limit_is_fifty_newest_first(
        self, session_factory, sample_transcript, monkeypatch
    ):
        monkeypatch.delenv("ANALYSES_LIST_LIMIT", raising=False)
        store = AnalysisStore(session_factory=session_factory)
        saved_ids = []
        for _ in range(51):
            stored = await store.save(sample_transcript, make_result(0, 0))
            saved_ids.append(str(stored.analysis.id))

        summaries = await store.list_analyses()

        assert store.list_limit == DEFAULT_LIST_LIMIT == 50
        assert [s.id for s in summaries] == list(reversed(saved_ids))[:50]
        assert saved_ids[0] not in {s.id for s in summaries}

    @pytest.mark.asyncio
    async def test_zero_limit_returns_nothing(self, store, sample_transcript):
        await store.save(sample_transcript, make_result(0, 0))

        assert await store.list_analyses(limit=0) == []


class TestFormatResponse:
    """Tests for AnalysisStore.format_response."""

    @pytest.mark.asyncio
    async def test_format_matches_fetched(self, store, sample_transcript):
        stored = await store.save(sample_transcript, make_result(2, 1))

        from_save = store.format_response(stored)
        from_fetch = store.format_response(await store.get_by_id(str(stored.analysis.id)))

        assert from_save == from_fetch
        assert from_save.transcript_id == str(stored.transcript.id)
        assert from_save.created_at.endswith("+00:00")

    @pytest.mark.asyncio
    async def test_format_is_pure(self, store, sample_transcript):
        stored = await store.save(sample_transcript, make_result(1, 1))

        assert store.format_response(stored) == store.format_response(stored)
