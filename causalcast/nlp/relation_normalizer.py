"""Cleaning, validation, deduplication and ranking of extracted relations."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import structlog

from causalcast.config import settings

if TYPE_CHECKING:
    from causalcast.nlp.causal_extractor import CausalRelation

logger = structlog.get_logger(__name__)

_MAX_ENTITY_CHARS = 100
_MIN_ENTITY_CHARS = 4

_LEADING_ARTICLE = re.compile(r"^(?:the|a|an)\s+", re.IGNORECASE)
_WHITESPACE_RUN = re.compile(r"\s+")

# Clause openers that refer back to something else rather than naming it.
_REFERENTIAL: frozenset[str] = frozenset(
    {"which", "that", "this", "these", "those", "they", "them", "there", "what"}
)


def clean_entity(text: str | None) -> str:
    """Normalise an extracted cause/effect phrase.

    Steps applied in order:
    1. Strip leading/trailing whitespace
    2. Drop a single leading article (the / a / an)
    3. Collapse internal whitespace runs to a single space
    4. Truncate to 100 characters
    """
    if not text:
        return ""
    text = text.strip()
    text = _LEADING_ARTICLE.sub("", text)
    text = _WHITESPACE_RUN.sub(" ", text)
    return text[:_MAX_ENTITY_CHARS]


def is_usable_entity(text: str, *, reject_referential: bool | None = None) -> bool:
    """A cleaned phrase must be longer than 3 characters.

    With *reject_referential* (default: ``settings.reject_referential_entities``)
    a phrase that is only a pronoun such as "which" or "this" is refused too.
    """
    if len(text) < _MIN_ENTITY_CHARS:
        return False
    if reject_referential is None:
        reject_referential = settings.reject_referential_entities
    return not (reject_referential and text.lower() in _REFERENTIAL)


def deduplicate_relations(relations: list[CausalRelation]) -> list[CausalRelation]:
    """Drop relations whose lower-cased (cause, effect) pair was already seen.

    The first occurrence wins, so callers should pass relations in pattern
    category scan order.
    """
    seen: set[tuple[str, str]] = set()
    unique: list[CausalRelation] = []
    for rel in relations:
        key = (rel.cause.lower(), rel.effect.lower())
        if key in seen:
            continue
        seen.add(key)
        unique.append(rel)

    if len(unique) != len(relations):
        logger.debug(
            "causal_relations_deduplicated",
            before=len(relations),
            after=len(unique),
        )
    return unique


def rank_relations(relations: list[CausalRelation], limit: int) -> list[CausalRelation]:
    """Return the *limit* most confident relations, ties keeping input order."""
    return sorted(relations, key=lambda r: r.confidence, reverse=True)[:limit]
