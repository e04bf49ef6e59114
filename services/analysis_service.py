"""Transcript analysis pipeline.

Orchestrates one analyze request through
Received -> Validated -> Budgeted -> Analyzed -> Persisted -> Formatted,
and serves the read paths, which never touch the LLM client.
"""
import logging
from typing import List, Optional

from models.api_models import (
    AnalysisResponse,
    AnalysisSummaryResponse,
    check_transcript_length,
)
from services.analysis_client import AnalysisClient
from services.analysis_store import AnalysisStore
from services.errors import PersistenceError, TokenBudgetExceeded

logger = logging.getLogger(__name__)


class TranscriptAnalysisService:
    """Runs the analyze pipeline and the fetch/list read paths."""

    def __init__(self, analysis_client: Optional[AnalysisClient], analysis_store: AnalysisStore):
        self.analysis_client = analysis_client
        self.analysis_store = analysis_store

    async def analyze_transcript(self, transcript: str, request_id: str = "-") -> AnalysisResponse:
        """Validate, analyse, persist and format a transcript.

        Args:
            transcript: Raw transcript text from the request body.
            request_id: Identifier used to correlate log lines.

        Returns:
            AnalysisResponse for the newly stored analysis.

        Raises:
            TranscriptValidationError: Length outside the accepted bounds.
            TokenBudgetExceeded: Estimated token count above the client's limit.
            InvalidAIResponseFormat, InvalidAIResponseSchema, AIServiceError:
                From the LLM client.
            PersistenceError: If the analysis could not be stored.
        """
        check_transcript_length(transcript)
        logger.info(f"Transcript validated: request_id={request_id}, length={len(transcript)}")

        if not self.analysis_client.is_within_budget(transcript):
            raise TokenBudgetExceeded(
                "Transcript is too long. Please split it into smaller sections "
                "or reduce the content.",
                details=(
                    f"estimated_tokens={self.analysis_client.estimate_token_count(transcript)}, "
                    f"limit={self.analysis_client.token_limit}"
                )
            )
        logger.info(f"Transcript within token budget: request_id={request_id}")

        result = await self.analysis_client.analyze(transcript)
        logger.info(f"Transcript analysed: request_id={request_id}")

        stored = await self.analysis_store.save(transcript, result)
        if stored is None or stored.analysis is None:
            raise PersistenceError("Failed to save analysis")
        logger.info(
            f"Analysis persisted: request_id={request_id}, analysis_id={stored.analysis.id}"
        )

        return self.analysis_store.format_response(stored)

    async def get_analysis(self, analysis_id: str) -> AnalysisResponse:
        stored = await self.analysis_store.get_by_id(analysis_id)
        return self.analysis_store.format_response(stored)

    async def list_analyses(self, limit: Optional[int] = None) -> List[AnalysisSummaryResponse]:
        return await self.analysis_store.list_analyses(limit)
