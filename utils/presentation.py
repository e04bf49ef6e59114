"""Display tones for raw analysis values.

The API carries sentiment and priority exactly as extracted; clients that
want a colour or badge for them can use these mappings.
"""
from typing import Optional

from models.extraction_models import PriorityEnum

POSITIVE_MARKERS = ("positive", "productive", "constructive")
NEGATIVE_MARKERS = ("negative", "tense", "conflict")

PRIORITY_TONES = {
    PriorityEnum.high: "danger",
    PriorityEnum.medium: "warning",
    PriorityEnum.low: "info",
}


def sentiment_tone(sentiment: str) -> str:
    """Map a free-form sentiment to success, danger or info."""
    lower = sentiment.lower()
    if any(marker in lower for marker in POSITIVE_MARKERS):
        return "success"
    if any(marker in lower for marker in NEGATIVE_MARKERS):
        return "danger"
    return "info"


def priority_tone(priority: Optional[str]) -> Optional[str]:
    """Map a priority to a tone; None for unknown or missing priorities."""
    if not priority:
        return None
    try:
        return PRIORITY_TONES[PriorityEnum(priority)]
    except ValueError:
        return None
