"""
FastAPI dependency providers for the analysis routers.

Tests replace get_analysis_client / get_analysis_store through
app.dependency_overrides.
"""
from fastapi import Depends

from services.analysis_client import AnalysisClient
from services.analysis_client import get_analysis_client as _get_analysis_client
from services.analysis_service import TranscriptAnalysisService
from services.analysis_store import AnalysisStore
from services.analysis_store import get_analysis_store as _get_analysis_store


def get_analysis_client() -> AnalysisClient:
    return _get_analysis_client()


def get_analysis_store() -> AnalysisStore:
    return _get_analysis_store()


def get_analysis_service(
    analysis_client: AnalysisClient = Depends(get_analysis_client),
    analysis_store: AnalysisStore = Depends(get_analysis_store),
) -> TranscriptAnalysisService:
    return TranscriptAnalysisService(analysis_client, analysis_store)


def get_read_service(
    analysis_store: AnalysisStore = Depends(get_analysis_store),
) -> TranscriptAnalysisService:
    """Service for read paths: no LLM client is created."""
    return TranscriptAnalysisService(None, analysis_store)
