"""
Analyses router for reading stored analyses.

Provides GET /api/analyses/{analysis_id} and GET /api/analyses. Neither
endpoint calls the LLM.
"""

import logging
import uuid
from fastapi import APIRouter, Depends

from models.api_models import AnalysisListResponse, AnalysisResponse, ErrorResponse
from routers.dependencies import get_read_service
from services.analysis_service import TranscriptAnalysisService
from utils.error_utils import build_error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analyses", tags=["analyses"])


@router.get(
    "/{analysis_id}",
    response_model=AnalysisResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_analysis(
    analysis_id: str,
    service: TranscriptAnalysisService = Depends(get_read_service),
):
    """Fetch one analysis with its action items and decisions."""
    request_id = str(uuid.uuid4())
    try:
        response = await service.get_analysis(analysis_id)
    except Exception as e:
        return build_error_response(e, "Failed to fetch analysis", request_id)

    logger.info(f"Analysis fetched: request_id={request_id}, analysis_id={analysis_id}")
    return response


@router.get(
    "",
    response_model=AnalysisListResponse,
    responses={500: {"model": ErrorResponse}},
)
async def list_analyses(service: TranscriptAnalysisService = Depends(get_read_service)):
    """List the most recent analyses, newest first, with child counts."""
    request_id = str(uuid.uuid4())
    try:
        analyses = await service.list_analyses()
    except Exception as e:
        return build_error_response(e, "Failed to list analyses", request_id)

    logger.info(f"Analyses listed: request_id={request_id}, count={len(analyses)}")
    return AnalysisListResponse(analyses=analyses)
