"""
Error Response Utilities

This module translates pipeline errors into `{"error": ...}` JSON responses
at the router boundary. Each failure is logged exactly once here:

1. Exposed client errors (4xx) are logged at WARNING and their message is returned
2. Everything else is logged at ERROR with traceback and a fixed message is returned
"""

import logging
from fastapi.responses import JSONResponse

from models.api_models import ErrorResponse
from services.errors import AnalyzerError

logger = logging.getLogger(__name__)


def build_error_response(exc: Exception, fallback_message: str, request_id: str) -> JSONResponse:
    """
    Build the client-visible response for a failed request.

    Args:
        exc: The exception raised while handling the request
        fallback_message: Generic message used when exc must not be exposed
        request_id: Identifier of the failed request, for log correlation

    Returns:
        JSONResponse with the mapped status code and an ErrorResponse body
    """
    if isinstance(exc, AnalyzerError) and exc.expose:
        logger.warning(
            f"Request rejected: request_id={request_id}, kind={exc.kind.value}, "
            f"status={exc.status_code}, error={exc.message}, details={exc.details}"
        )
        return _json_error(exc.status_code, exc.message)

    if isinstance(exc, AnalyzerError):
        logger.error(
            f"Request failed: request_id={request_id}, kind={exc.kind.value}, "
            f"status={exc.status_code}, error={exc.message}, details={exc.details}",
            exc_info=exc
        )
        return _json_error(exc.status_code, fallback_message)

    logger.error(
        f"Unexpected error: request_id={request_id}, "
        f"error={type(exc).__name__}: {str(exc)}",
        exc_info=exc
    )
    return _json_error(500, fallback_message)


def _json_error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump()
    )
