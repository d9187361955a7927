"""
causalcast/graph/paths.py

Causal chain discovery over a built graph.

find_path_to_event
    Depth-first search from a factor node along outgoing edges, in edge
    insertion order, returning the first path that reaches the event node.
    The first path found wins; it is not necessarily the shortest or the
    strongest.

calculate_path_strength
    Product of the edge strengths along a path with a 0.9-per-extra-hop
    length decay.

find_causal_chains
    One chain per factor node, ranked by strength.
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator

import structlog

from causalcast.config import settings
from causalcast.graph.models import CausalChain, FactorNode, GraphEdge, GraphNode

logger = structlog.get_logger(__name__)


def index_outgoing(edges: Iterable[GraphEdge]) -> dict[str, list[GraphEdge]]:
    """Group *edges* by source id, keeping insertion order within each group."""
    outgoing: dict[str, list[GraphEdge]] = {}
    for edge in edges:
        outgoing.setdefault(edge.source, []).append(edge)
    return outgoing


def find_path_to_event(
    start_id: str,
    event_id: str,
    edges: Iterable[GraphEdge],
    *,
    outgoing: dict[str, list[GraphEdge]] | None = None,
) -> list[str]:
    """Return the first path of node ids from *start_id* to *event_id*.

    Uses an explicit stack and a visited set scoped to this search, so the
    returned path never repeats a node and each node is expanded at most
    once (O(nodes + edges)).

    Args:
        start_id: Node to start from (normally a factor node).
        event_id: The event node to reach.
        edges:    Full edge list of the graph.
        outgoing: Pre-built result of index_outgoing(edges), to share the
                  index across many searches over the same graph.

    Returns:
        ``[start_id, …, event_id]``; ``[start_id]`` when start is the event;
        ``[]`` when the event is unreachable.
    """
    if start_id == event_id:
        return [start_id]
    if outgoing is None:
        outgoing = index_outgoing(edges)

    visited: set[str] = {start_id}
    path: list[str] = [start_id]
    stack: list[Iterator[GraphEdge]] = [iter(outgoing.get(start_id, ()))]

    while stack:
        edge = next(stack[-1], None)
        if edge is None:
            stack.pop()
            path.pop()
            continue

        target = edge.target
        if target == event_id:
            return [*path, target]
        if target in visited:
            continue

        visited.add(target)
        path.append(target)
        stack.append(iter(outgoing.get(target, ())))

    return []


def calculate_path_strength(path: list[str] | tuple[str, ...], edges: Iterable[GraphEdge]) -> float:
    """Score a path by multiplying the strengths of the edges along it.

    Each consecutive pair uses the first edge joining them in edge-list
    order; a pair with no edge contributes the missing-edge penalty (0.3).
    The product is then decayed by ``0.9 ** (len(path) - 2)``.

    Returns 0.0 for paths with fewer than two nodes.
    """
    if len(path) < 2:
        return 0.0

    first_edge: dict[tuple[str, str], GraphEdge] = {}
    for edge in edges:
        first_edge.setdefault((edge.source, edge.target), edge)

    strength = 1.0
    for a, b in zip(path, path[1:]):
        edge = first_edge.get((a, b))
        strength *= edge.strength if edge is not None else settings.missing_edge_penalty

    strength *= settings.path_length_decay ** (len(path) - 2)
    return max(0.0, min(1.0, strength))


def find_causal_chains(
    nodes: Iterable[GraphNode],
    edges: list[GraphEdge] | tuple[GraphEdge, ...],
    event_id: str,
    *,
    limit: int | None = None,
) -> list[CausalChain]:
    """Find and rank a causal chain from every factor node to the event.

    Factor nodes with no route to the event, or whose route scores zero,
    produce no chain.

    Returns:
        At most *limit* (default ``settings.max_causal_chains``) chains,
        sorted by descending strength; ties keep node order.
    """
    limit = settings.max_causal_chains if limit is None else limit
    outgoing = index_outgoing(edges)

    chains: list[CausalChain] = []
    for node in nodes:
        if not isinstance(node, FactorNode):
            continue
        path = find_path_to_event(node.id, event_id, edges, outgoing=outgoing)
        if len(path) < 2:
            continue
        strength = calculate_path_strength(path, edges)
        if strength <= 0.0:
            continue
        chains.append(
            CausalChain(start=node.id, end=event_id, path=tuple(path), strength=strength)
        )

    chains.sort(key=lambda c: c.strength, reverse=True)

    logger.debug("causal_chains_found", found=len(chains), kept=min(len(chains), limit))
    return chains[:limit]
