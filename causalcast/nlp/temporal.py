"""Tense tagging for extracted relations and timestamp parsing for inputs.

tag_tense() labels a causal relation as past / present / future from
keyword cues in the matched phrase and the opening of its source text.

parse_timestamp() turns the assorted date shapes supplied by market and
search payloads (datetimes, ISO strings, "3 days ago") into UTC-aware
datetimes using dateparser.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import dateparser
import structlog

logger = structlog.get_logger(__name__)

# Checked in order; the first tense with a keyword anywhere in the text wins.
_TENSE_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("past",    ("was", "were", "had", "occurred", "happened", "previous")),
    ("present", ("is", "are", "current", "now", "ongoing")),
    ("future",  ("will", "may", "could", "might", "expected", "forecast", "predicted")),
]

# Only the opening of the source text contributes tense context.
_CONTEXT_CHARS = 200

# dateparser settings applied to every parse call
_DATEPARSER_SETTINGS: dict[str, Any] = {
    "RETURN_AS_TIMEZONE_AWARE": True,
    "PREFER_DATES_FROM": "past",
    "TO_TIMEZONE": "UTC",
}


def tag_tense(matched_phrase: str, text: str) -> str:
    """Return "past", "present", "future" or "unknown" for a matched phrase.

    Args:
        matched_phrase: The text span matched by an extraction pattern.
        text:           The full source text the phrase came from.
    """
    haystack = f"{matched_phrase} {text[:_CONTEXT_CHARS]}".lower()
    for tense, words in _TENSE_KEYWORDS:
        if any(word in haystack for word in words):
            return tense
    return "unknown"


def _to_utc(dt: datetime) -> datetime:
    """Ensure a datetime is UTC-aware."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value: datetime | str | None) -> datetime | None:
    """Parse *value* into a UTC-aware datetime, or None when unparseable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return _to_utc(value)

    text = str(value).strip()
    if not text:
        return None

    try:
        return _to_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        pass

    parsed = dateparser.parse(text, settings=_DATEPARSER_SETTINGS)
    if parsed is None:
        logger.debug("timestamp_parse_failed", value=text)
        return None
    return _to_utc(parsed)


def is_recent(
    published_at: datetime | None,
    window_days: int,
    now: datetime | None = None,
) -> bool:
    """True when *published_at* falls within *window_days* before *now*."""
    if published_at is None:
        return False
    now = _to_utc(now) if now else datetime.now(timezone.utc)
    return now - timedelta(days=window_days) <= _to_utc(published_at) <= now
