"""Pytest configuration and fixtures."""
import json
import os
from contextlib import asynccontextmanager
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

# Set test environment before importing app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from services.analysis_client import AnalysisClient
from services.analysis_store import AnalysisStore
from services.database import init_db


SAMPLE_TRANSCRIPT = "Sarah will finish the API doc by Monday. We decided to use Postgres."

SAMPLE_LLM_OUTPUT = {
    "sentiment": "productive",
    "sentimentSummary": "Focused and decisive.",
    "actionItems": [
        {
            "description": "Finish API doc",
            "owner": "Sarah",
            "deadline": "Monday",
            "priority": "high",
        }
    ],
    "decisions": [
        {"description": "Use Postgres", "type": "made", "context": None}
    ],
}


def make_completion(content):
    """Build an object shaped like an OpenAI chat completion."""
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))]
    )


@pytest.fixture
def sample_transcript():
    return SAMPLE_TRANSCRIPT


@pytest.fixture
def sample_llm_output():
    return json.loads(json.dumps(SAMPLE_LLM_OUTPUT))


@pytest.fixture
def completion_factory():
    return make_completion


@pytest.fixture
def analysis_client():
    """AnalysisClient whose OpenAI client returns SAMPLE_LLM_OUTPUT."""
    client = AnalysisClient(api_key="test-openai-key", token_limit=12000)
    client.client = MagicMock()
    client.client.chat.completions.create = AsyncMock(
        return_value=make_completion(json.dumps(SAMPLE_LLM_OUTPUT))
    )
    return client


@pytest.fixture
async def db_engine(tmp_path: Path):
    """Temp file SQLite database with the schema created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test_analyses.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    session_maker = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    @asynccontextmanager
    async def factory():
        async with session_maker() as session:
            yield session

    return factory


@pytest.fixture
def store(session_factory):
    return AnalysisStore(session_factory=session_factory)


@pytest.fixture
async def client(analysis_client, store):
    """Async test client for the FastAPI app backed by the temp database."""
    from main import app
    from routers.dependencies import get_analysis_client, get_analysis_store

    app.dependency_overrides[get_analysis_client] = lambda: analysis_client
    app.dependency_overrides[get_analysis_store] = lambda: store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
