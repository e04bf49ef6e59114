"""AnalysisClient for extracting structured meeting analyses using OpenAI."""
import os
import json
import math
import logging
from typing import Optional

import openai
from openai import AsyncOpenAI
from pydantic import ValidationError

from models.extraction_models import LLMAnalysisResult
from services.errors import (
    AIServiceError,
    InvalidAIResponseFormat,
    InvalidAIResponseSchema,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TOKEN_LIMIT = 12000
TEMPERATURE = 0.3


def estimate_token_count(text: str) -> int:
    """
    Rough token estimate of about four characters per token.

    This is an advisory approximation, not a tokenizer.
    """
    return math.ceil(len(text) / 4)


def is_within_budget(text: str, limit: int = DEFAULT_TOKEN_LIMIT) -> bool:
    """Check whether the estimated token count of text is within limit."""
    return estimate_token_count(text) <= limit


def parse_analysis_result(content: str) -> LLMAnalysisResult:
    """
    Parse raw model output into an LLMAnalysisResult.

    Args:
        content: Completion text returned by the model

    Returns:
        Validated LLMAnalysisResult

    Raises:
        InvalidAIResponseFormat: If content is not valid JSON
        InvalidAIResponseSchema: If the JSON does not match the output contract
    """
    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as e:
        raise InvalidAIResponseFormat("AI generated invalid JSON", details=str(e)) from e

    if not isinstance(parsed, dict):
        raise InvalidAIResponseSchema(
            "AI generated invalid response format",
            details=f"expected a JSON object, got {type(parsed).__name__}"
        )

    try:
        return LLMAnalysisResult.model_validate(parsed)
    except ValidationError as e:
        raise InvalidAIResponseSchema(
            "AI generated invalid response format",
            details=e.errors(include_url=False)
        ) from e


class AnalysisClient:
    """Client for analysing meeting transcripts with an OpenAI chat model."""

    def __init__(self, api_key: Optional[str] = None, token_limit: Optional[int] = None):
        """Initialize with OpenAI API key, model and token budget from environment."""
        api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ValueError("OPENAI_API_KEY environment variable is required")

        self.client = AsyncOpenAI(api_key=api_key)
        self.model = os.getenv("OPENAI_MODEL") or DEFAULT_MODEL
        self.token_limit = token_limit or int(
            os.getenv("MAX_TRANSCRIPT_TOKENS", str(DEFAULT_TOKEN_LIMIT))
        )
        logger.info(
            f"AnalysisClient initialized with model={self.model}, "
            f"token_limit={self.token_limit}"
        )

    def estimate_token_count(self, text: str) -> int:
        return estimate_token_count(text)

    def is_within_budget(self, text: str) -> bool:
        return is_within_budget(text, self.token_limit)

    async def analyze(self, transcript: str) -> LLMAnalysisResult:
        """
        Extract sentiment, action items and decisions from a transcript.

        The caller is responsible for checking the length and token budget
        beforehand.

        Args:
            transcript: Meeting transcript text

        Returns:
            LLMAnalysisResult parsed from the model's JSON output

        Raises:
            AIServiceError: If the OpenAI API call fails
            InvalidAIResponseFormat: If the output is empty or not JSON
            InvalidAIResponseSchema: If the output does not match the contract
        """
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": self._get_system_prompt()},
                    {"role": "user", "content": self._build_user_prompt(transcript)}
                ],
                temperature=TEMPERATURE,
                response_format={"type": "json_object"},
            )
        except openai.APIStatusError as e:
            raise AIServiceError(
                f"AI service error: {e.message}",
                provider_status=e.status_code
            ) from e
        except openai.APIError as e:
            raise AIServiceError(f"AI service error: {e.message}") from e

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            raise InvalidAIResponseFormat("AI returned an empty response")

        result = parse_analysis_result(content)
        logger.info(
            f"Analysis extracted: model={self.model}, "
            f"action_items={len(result.action_items)}, decisions={len(result.decisions)}"
        )
        return result

    def _get_system_prompt(self) -> str:
        """Meeting-minutes system prompt establishing the extraction task."""
        return (
            "You are an expert meeting minutes specialist and executive assistant. "
            "Your role is to analyse meeting transcripts and extract actionable insights "
            "in a clear, concise manner.\n\n"
            "Guidelines:\n"
            "- Remove filler words and redundant content\n"
            "- Focus on concrete outcomes and decisions\n"
            "- Identify specific action items with clear ownership\n"
            "- Note when decisions are pending or require follow-up\n"
            "- Assess the overall tone professionally\n"
            "- Be concise and avoid corporate jargon\n\n"
            "Only extract information explicitly present in the transcript. "
            "Return your analysis in structured JSON format."
        )

    def _build_user_prompt(self, transcript: str) -> str:
        """User prompt embedding the transcript verbatim and the output schema."""
        return f"""Analyse this meeting transcript and extract:

1. **Action Items**: Specific tasks with:
   - Clear description (concise, actionable)
   - Assigned owner (if mentioned, otherwise null)
   - Deadline (if mentioned, otherwise null)
   - Priority level: "high", "medium", "low", or null (infer from context - urgent language, explicit priority mentions, or deadlines suggest high priority)

2. **Decisions**: Both made and pending:
   - What was decided or needs deciding
   - Type: "made" or "pending"
   - Brief context if relevant (otherwise null)

3. **Sentiment/Tone**: Overall meeting atmosphere:
   - One word: positive, negative, neutral, constructive, tense, productive, etc.
   - Brief 1-2 sentence summary of the tone

Be specific and actionable. Avoid vague statements.

Transcript:
{transcript}

Return ONLY valid JSON matching this exact structure (no markdown, no code blocks):
{{
  "sentiment": "string",
  "sentimentSummary": "string",
  "actionItems": [{{"description": "string", "owner": "string or null", "deadline": "string or null", "priority": "high or medium or low or null"}}],
  "decisions": [{{"description": "string", "type": "made or pending", "context": "string or null"}}]
}}"""


_analysis_client: AnalysisClient | None = None


def get_analysis_client() -> AnalysisClient:
    """Get or create the process-wide AnalysisClient."""
    global _analysis_client

    if _analysis_client is None:
        _analysis_client = AnalysisClient()

    return _analysis_client
