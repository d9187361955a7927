"""Causal relationship extraction from source text using phrase patterns.

Five pattern categories are scanned in a fixed order, each carrying a base
confidence:

    direct       0.80   "X led to Y", "because of X, which caused Y"
    conditional  0.70   "if X, then Y", "when X, Y"
    temporal     0.75   "X will lead to Y", "following X, Y"
    correlation  0.50   "X is linked to Y"
    negative     0.70   "X prevents Y", "X hurt Y"

A category is a tuple of compiled patterns with named ``cause`` and
(optionally) ``effect`` groups.  Each category is scanned independently and
returns non-overlapping matches; no match cursor is shared between calls.
When a pattern has no explicit effect the effect is inferred from the rest
of the sentence, defaulting to the literal "outcome".

The final confidence of a relation is the category confidence scaled by
the relevance score of the source it came from, clamped to [0, 1] first.
"""

import re
from dataclasses import dataclass

import structlog

from causalcast.config import settings
from causalcast.models.schemas.inputs import SourceDocument
from causalcast.nlp.relation_normalizer import (
    clean_entity,
    deduplicate_relations,
    is_usable_entity,
    rank_relations,
)
from causalcast.nlp.temporal import tag_tense

logger = structlog.get_logger(__name__)

# A clause fragment: anything up to the next comma, full stop or semicolon.
_CLAUSE = r"[^,.;!?]+"

# Conjunctions that open a clause without being part of the cause.
_LEAD = r"\s*(?:(?:and|but|while|so|yet)\s+)?"


def _forward(cues: str) -> re.Pattern[str]:
    """Pattern of the form '<cause> <cue> <effect>'."""
    return re.compile(
        _LEAD + rf"(?P<cause>{_CLAUSE}?)\s+(?:{cues})\s+(?P<effect>{_CLAUSE})",
        re.IGNORECASE,
    )


# ── Direct causation ─────────────────────────────────────
_DIRECT_CUES = (
    r"causes?|caused|leads?\s+to|led\s+to|results?\s+in|resulted\s+in"
    r"|triggers?|triggered|drives?|drove|brings?\s+about|brought\s+about"
)
_DIRECT: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"\b(?:because\s+of|because|due\s+to|as\s+a\s+result\s+of|owing\s+to|caused\s+by)"
        rf"\s+(?P<cause>{_CLAUSE})"
        r"(?:,?\s*(?:which\s+|that\s+)?(?:will|may|could|causes?|caused|leads?\s+to|led\s+to"
        rf"|results?\s+in|resulted\s+in)\s+(?P<effect>{_CLAUSE}))?",
        re.IGNORECASE,
    ),
    _forward(_DIRECT_CUES),
)

# ── Conditional ──────────────────────────────────────────
_CONDITIONAL: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"\b(?:if|when|whenever|provided\s+that|assuming|in\s+case)"
        rf"\s+(?P<cause>{_CLAUSE}?)"
        rf"(?:(?:\s*,\s*(?:then\s+)?|\s+then\s+)(?P<effect>{_CLAUSE})|\s*(?=[.;!?]|$))",
        re.IGNORECASE,
    ),
)

# ── Temporal leads-to ────────────────────────────────────
_TEMPORAL: tuple[re.Pattern[str], ...] = (
    _forward(
        r"(?:will|would|could|may|might|is\s+expected\s+to|are\s+expected\s+to)"
        r"\s+(?:lead\s+to|result\s+in|trigger|bring\s+about)"
        r"|paves?\s+the\s+way\s+for|paved\s+the\s+way\s+for|sets?\s+the\s+stage\s+for"
        r"|precedes?|preceded|ahead\s+of"
    ),
    re.compile(
        r"\b(?:after|following|in\s+the\s+wake\s+of|subsequent\s+to)"
        rf"\s+(?P<cause>{_CLAUSE})(?:,\s*(?P<effect>{_CLAUSE}))?",
        re.IGNORECASE,
    ),
)

# ── Correlation ──────────────────────────────────────────
_CORRELATION: tuple[re.Pattern[str], ...] = (
    _forward(
        r"(?:is|are|was|were)\s+(?:closely\s+|strongly\s+)?(?:correlated|associated|linked|tied)\s+(?:with|to)"
        r"|correlates?\s+with|correlated\s+with|coincides?\s+with|coincided\s+with"
        r"|moves?\s+in\s+tandem\s+with|tracks?|tracked"
    ),
)

# ── Negative / preventive ────────────────────────────────
_NEGATIVE: tuple[re.Pattern[str], ...] = (
    _forward(
        r"prevents?|prevented|blocks?|blocked|stops?|stopped|hinders?|hindered"
        r"|reduces?|reduced|undermines?|undermined|hurts?|weakens?|weakened"
        r"|curbs?|curbed|dampens?|dampened|derails?|derailed"
    ),
)

# (relation type, base confidence, patterns) in scan order.
_CATEGORIES: list[tuple[str, float, tuple[re.Pattern[str], ...]]] = [
    ("direct",      0.80, _DIRECT),
    ("conditional", 0.70, _CONDITIONAL),
    ("temporal",    0.75, _TEMPORAL),
    ("correlation", 0.50, _CORRELATION),
    ("negative",    0.70, _NEGATIVE),
]

# Outcome cues searched for in the text after a cause with no explicit effect.
_OUTCOME_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"\b(?:will|may|could|might|would|leads?\s+to|led\s+to|results?\s+in|resulted\s+in)"
        rf"\s+(?P<effect>{_CLAUSE})",
        re.IGNORECASE,
    ),
    re.compile(
        r"\b(?:outcome|result|consequence|impact|effect)\s+(?:of\s+|on\s+|is\s+|was\s+)?"
        rf"(?P<effect>{_CLAUSE})",
        re.IGNORECASE,
    ),
)

_SENTENCE_END = re.compile(r"[.!?](?:\s|$)")

_DEFAULT_EFFECT = "outcome"


@dataclass(frozen=True)
class CausalRelation:
    """A directional cause → effect relation extracted from one source."""

    cause: str              # Cleaned cause phrase
    effect: str             # Cleaned effect phrase (or "outcome" when inferred)
    confidence: float       # Category confidence × source relevance [0.0 – 1.0]
    relation_type: str      # direct | conditional | temporal | correlation | negative
    temporal: str           # past | present | future | unknown
    source_title: str       # Title of the originating source
    cue_phrase: str = ""    # Text span the pattern matched


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def _category_matches(
    text: str,
    patterns: tuple[re.Pattern[str], ...],
) -> list[re.Match[str]]:
    """Return the non-overlapping matches of one category in text order.

    Matches from every pattern in the category are pooled; an overlapping
    match is dropped in favour of the one that starts first (earlier
    pattern on ties).
    """
    pooled: list[tuple[int, int, re.Match[str]]] = []
    for order, pattern in enumerate(patterns):
        for m in pattern.finditer(text):
            pooled.append((m.start(), order, m))
    pooled.sort(key=lambda item: (item[0], item[1]))

    selected: list[re.Match[str]] = []
    last_end = -1
    for start, _order, m in pooled:
        if start < last_end:
            continue
        selected.append(m)
        last_end = m.end()
    return selected


def infer_effect(text: str, after: int) -> str:
    """Infer an effect phrase from the sentence remainder starting at *after*.

    Returns the cleaned effect, or "outcome" when no outcome cue is found.
    """
    remainder = text[after:]
    end = _SENTENCE_END.search(remainder)
    if end:
        remainder = remainder[: end.start()]

    for pattern in _OUTCOME_PATTERNS:
        m = pattern.search(remainder)
        if m:
            effect = clean_entity(m.group("effect"))
            if effect:
                return effect
    return _DEFAULT_EFFECT


def _relation_from_match(
    m: re.Match[str],
    text: str,
    relation_type: str,
    confidence: float,
    source_title: str,
) -> CausalRelation | None:
    """Build a relation from a pattern match, or None when it is unusable."""
    cause = clean_entity(m.group("cause"))
    explicit = m.groupdict().get("effect")
    if explicit:
        effect = clean_entity(explicit)
    else:
        effect = infer_effect(text, m.end("cause"))

    if not is_usable_entity(cause) or not is_usable_entity(effect):
        return None

    return CausalRelation(
        cause=cause,
        effect=effect,
        confidence=round(confidence, 4),
        relation_type=relation_type,
        temporal=tag_tense(m.group(0), text),
        source_title=source_title,
        cue_phrase=m.group(0).strip(),
    )


def extract_causal_relations_sync(
    text: str,
    source: SourceDocument | None = None,
) -> list[CausalRelation]:
    """Extract ranked cause → effect relations from *text*.

    Args:
        text:   Free text of a single source document.
        source: Metadata of the source the text came from; its relevance
                score scales every relation's confidence.

    Returns:
        At most ``settings.max_relations_per_source`` relations, sorted by
        descending confidence.  Empty when the text is too short.
    """
    if not text or len(text) < settings.min_text_length:
        return []

    relevance = _clamp((source.relevance_score if source else None) or settings.default_relevance)
    source_title = (source.title if source else None) or ""

    relations: list[CausalRelation] = []
    for relation_type, base_confidence, patterns in _CATEGORIES:
        confidence = base_confidence * relevance
        for m in _category_matches(text, patterns):
            rel = _relation_from_match(m, text, relation_type, confidence, source_title)
            if rel is not None:
                relations.append(rel)

    unique = deduplicate_relations(relations)
    ranked = rank_relations(unique, settings.max_relations_per_source)

    logger.debug(
        "causal_relations_extracted",
        source=source_title[:40] or None,
        matched=len(relations),
        count=len(ranked),
    )
    return ranked

