import re
import unicodedata

import structlog

from causalcast.models.schemas.inputs import SourceDocument

logger = structlog.get_logger(__name__)


def normalize_text(text: str) -> str:
    """Clean raw search-result text before causal extraction.

    Steps applied in order:
    1. Unicode NFC normalization
    2. Remove null bytes and non-printable control characters
    3. Normalize line endings to '\\n'
    4. Strip leading/trailing whitespace from each line
    5. Collapse intra-line whitespace runs to a single space
    6. Collapse runs of more than two consecutive blank lines to two
    7. Strip overall leading/trailing whitespace

    Args:
        text: Raw text as returned by the web-search collaborator.

    Returns:
        Cleaned, normalized text string.
    """
    text = unicodedata.normalize("NFC", text)

    # Keep \n and \t, drop the rest of the C0 controls and DEL
    text = re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]", "", text)

    text = text.replace("\r\n", "\n").replace("\r", "\n")

    lines = [line.strip() for line in text.split("\n")]
    lines = [re.sub(r"[ \t]+", " ", line) for line in lines]

    text = "\n".join(lines)
    text = re.sub(r"\n{3,}", "\n\n", text)

    return text.strip()


def prepare_sources(sources: list[SourceDocument]) -> list[SourceDocument]:
    """Return copies of *sources* with normalized text, preserving order."""
    prepared = [
        source.model_copy(update={"text": normalize_text(source.text)})
        for source in sources
    ]
    logger.debug("sources_prepared", count=len(prepared))
    return prepared
