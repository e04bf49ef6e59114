"""Error taxonomy for the transcript analysis pipeline.

Every error raised on purpose by the pipeline derives from AnalyzerError and
carries an explicit ErrorKind, the HTTP status it maps to, and whether its
message is safe to show to the client.
"""
import enum
from typing import Any, Optional


class ErrorKind(str, enum.Enum):
    validation_error = "validation_error"
    token_budget_exceeded = "token_budget_exceeded"
    invalid_ai_response_format = "invalid_ai_response_format"
    invalid_ai_response_schema = "invalid_ai_response_schema"
    ai_service_error = "ai_service_error"
    persistence_error = "persistence_error"
    not_found = "not_found"


class AnalyzerError(Exception):
    """
    Base class for pipeline errors.

    Attributes:
        message: Human-readable error description
        kind: Machine-readable error category for logging and status mapping
        status_code: HTTP status the error maps to
        expose: Whether message may be returned to the client verbatim
        details: Optional server-side diagnostic payload, never sent to clients
    """
    kind: ErrorKind
    status_code: int = 500
    expose: bool = False

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class TranscriptValidationError(AnalyzerError):
    """Transcript length is outside the accepted bounds."""
    kind = ErrorKind.validation_error
    status_code = 400
    expose = True


class TokenBudgetExceeded(AnalyzerError):
    """Estimated token count of the transcript exceeds the configured budget."""
    kind = ErrorKind.token_budget_exceeded
    status_code = 400
    expose = True


class InvalidAIResponse(AnalyzerError):
    """The model answered, but not with a usable analysis."""
    status_code = 400
    expose = True


class InvalidAIResponseFormat(InvalidAIResponse):
    """Model output was empty or not parseable as JSON."""
    kind = ErrorKind.invalid_ai_response_format


class InvalidAIResponseSchema(InvalidAIResponse):
    """Model output was JSON but did not match the analysis contract."""
    kind = ErrorKind.invalid_ai_response_schema


class AIServiceError(AnalyzerError):
    """
    The LLM provider call failed.

    Requests the provider rejected as malformed map to 400 with the provider
    message; outages, quota, auth and connection failures map to 500 and the
    message stays server-side.
    """
    kind = ErrorKind.ai_service_error

    def __init__(
        self,
        message: str,
        provider_status: Optional[int] = None,
        details: Optional[Any] = None,
    ):
        super().__init__(message, details=details)
        self.provider_status = provider_status
        if provider_status in (400, 413, 422):
            self.status_code = 400
            self.expose = True
        else:
            self.status_code = 500
            self.expose = False


class PersistenceError(AnalyzerError):
    """The datastore could not complete a read or write."""
    kind = ErrorKind.persistence_error


class NotFoundError(AnalyzerError):
    """No analysis exists for the requested identifier."""
    kind = ErrorKind.not_found
    status_code = 404
    expose = True
