"""
Transcript router for submitting meeting transcripts for analysis.

This router provides the POST /api/transcripts/analyze endpoint.
"""

import logging
import uuid
from fastapi import APIRouter, Depends

from models.api_models import AnalysisResponse, AnalyzeTranscriptRequest, ErrorResponse
from routers.dependencies import get_analysis_service
from services.analysis_service import TranscriptAnalysisService
from utils.error_utils import build_error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/transcripts", tags=["transcripts"])

ANALYZE_FAILED_MESSAGE = "Failed to analyse transcript. Please try again."


@router.post(
    "/analyze",
    response_model=AnalysisResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def analyze_transcript(
    body: AnalyzeTranscriptRequest,
    service: TranscriptAnalysisService = Depends(get_analysis_service),
):
    """
    Analyse a meeting transcript and store the result.

    Args:
        body: AnalyzeTranscriptRequest with the transcript text
        service: Analysis pipeline

    Returns:
        AnalysisResponse for the stored analysis, or an ErrorResponse with
        400 (validation, token budget, invalid AI output) or 500
    """
    request_id = str(uuid.uuid4())
    logger.info(
        f"Analysis requested: request_id={request_id}, "
        f"transcript_length={len(body.transcript)}"
    )

    try:
        response = await service.analyze_transcript(body.transcript, request_id=request_id)
    except Exception as e:
        return build_error_response(e, ANALYZE_FAILED_MESSAGE, request_id)

    logger.info(
        f"Analysis complete: request_id={request_id}, analysis_id={response.id}, "
        f"action_items={len(response.action_items)}, decisions={len(response.decisions)}"
    )
    return response
