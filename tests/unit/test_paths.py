"""
tests/unit/test_paths.py

Unit tests for causalcast.graph.paths.

Coverage
--------
  find_path_to_event:
    - start == event → [start]
    - direct and multi-hop paths
    - first path in edge order wins, even when a shorter one exists
    - cycles terminate; no node repeated
    - unreachable event → []

  calculate_path_strength:
    - single edge of strength 0.9 → exactly 0.9
    - product of edges with 0.9 decay per extra hop
    - missing edge → 0.3 penalty
    - paths shorter than two nodes → 0.0
    - first edge between a pair wins

  find_causal_chains:
    - one chain per factor node, sorted by strength
    - non-factor nodes and unreachable factors skipped
    - limit respected
"""
from __future__ import annotations

import pytest

from causalcast.graph.models import EventNode, FactorNode, GraphEdge, OutcomeNode, SourceNode
from causalcast.graph.paths import (
    calculate_path_strength,
    find_causal_chains,
    find_path_to_event,
    index_outgoing,
)


def _edge(source: str, target: str, strength: float = 0.5, relation: str = "influences") -> GraphEdge:
    return GraphEdge(source=source, target=target, relation=relation, strength=strength, weight=strength)


class TestFindPathToEvent:
    def test_start_is_event(self) -> None:
        assert find_path_to_event("event", "event", []) == ["event"]

    def test_direct_edge(self) -> None:
        edges = [_edge("f", "o", relation="causes"), _edge("f", "event")]
        assert find_path_to_event("f", "event", edges) == ["f", "event"]

    def test_multi_hop(self) -> None:
        edges = [_edge("a", "b"), _edge("b", "c"), _edge("c", "event")]
        assert find_path_to_event("a", "event", edges) == ["a", "b", "c", "event"]

    def test_first_path_wins_over_shorter(self) -> None:
        edges = [_edge("a", "b"), _edge("b", "event"), _edge("a", "event")]
        assert find_path_to_event("a", "event", edges) == ["a", "b", "event"]

    def test_dead_end_backtracks(self) -> None:
        edges = [_edge("a", "x"), _edge("x", "y"), _edge("a", "b"), _edge("b", "event")]
        assert find_path_to_event("a", "event", edges) == ["a", "b", "event"]

    def test_cycle_terminates(self) -> None:
        edges = [_edge("a", "b"), _edge("b", "a"), _edge("b", "event")]
        path = find_path_to_event("a", "event", edges)
        assert path == ["a", "b", "event"]
        assert len(path) == len(set(path))

    def test_cycle_without_exit(self) -> None:
        edges = [_edge("a", "b"), _edge("b", "c"), _edge("c", "a")]
        assert find_path_to_event("a", "event", edges) == []

    def test_unreachable(self) -> None:
        edges = [_edge("x", "event")]
        assert find_path_to_event("a", "event", edges) == []

    def test_shared_outgoing_index(self) -> None:
        edges = [_edge("a", "event")]
        outgoing = index_outgoing(edges)
        assert find_path_to_event("a", "event", [], outgoing=outgoing) == ["a", "event"]


class TestCalculatePathStrength:
    def test_single_edge_is_exact(self) -> None:
        edges = [_edge("f", "event", 0.9)]
        assert calculate_path_strength(["f", "event"], edges) == 0.9

    def test_product_with_decay(self) -> None:
        edges = [_edge("a", "b", 0.5), _edge("b", "event", 0.8)]
        # 0.5 × 0.8 × 0.9^1
        assert calculate_path_strength(["a", "b", "event"], edges) == pytest.approx(0.36)

    def test_longer_path_decays_more(self) -> None:
        edges = [_edge("a", "b", 1.0), _edge("b", "c", 1.0), _edge("c", "event", 1.0)]
        assert calculate_path_strength(["a", "b", "c", "event"], edges) == pytest.approx(0.81)

    def test_missing_edge_penalty(self) -> None:
        assert calculate_path_strength(["a", "b"], []) == pytest.approx(0.3)

    def test_short_paths_score_zero(self) -> None:
        assert calculate_path_strength([], []) == 0.0
        assert calculate_path_strength(["a"], []) == 0.0

    def test_first_edge_between_pair_wins(self) -> None:
        edges = [_edge("a", "event", 0.4), _edge("a", "event", 0.9)]
        assert calculate_path_strength(["a", "event"], edges) == pytest.approx(0.4)

    def test_result_within_unit_interval(self) -> None:
        edges = [_edge("a", "event", 1.0)]
        assert 0.0 <= calculate_path_strength(("a", "event"), edges) <= 1.0


class TestFindCausalChains:
    def _nodes(self) -> list:
        return [
            EventNode(id="event", label="Q", size=30.0),
            SourceNode(id="source_0", label="S", size=15.0),
            FactorNode(id="factor_0_0", label="weak", size=10.0),
            OutcomeNode(id="outcome_0_0", label="o", size=10.0),
            FactorNode(id="factor_0_1", label="strong", size=10.0),
            FactorNode(id="factor_0_2", label="isolated", size=10.0),
        ]

    def _edges(self) -> list[GraphEdge]:
        return [
            _edge("source_0", "event", 0.9, relation="informs"),
            _edge("factor_0_0", "outcome_0_0", 0.5, relation="causes"),
            _edge("factor_0_0", "event", 0.4),
            _edge("factor_0_1", "event", 0.7),
        ]

    def test_chains_sorted_by_strength(self) -> None:
        chains = find_causal_chains(self._nodes(), self._edges(), "event")
        assert [c.start for c in chains] == ["factor_0_1", "factor_0_0"]
        assert [c.strength for c in chains] == [pytest.approx(0.7), pytest.approx(0.4)]

    def test_chain_shape(self) -> None:
        chain = find_causal_chains(self._nodes(), self._edges(), "event")[0]
        assert chain.end == "event"
        assert chain.path == ("factor_0_1", "event")
        assert chain.length == 2

    def test_only_factor_nodes_start_chains(self) -> None:
        chains = find_causal_chains(self._nodes(), self._edges(), "event")
        assert all(c.start.startswith("factor_") for c in chains)
        assert "factor_0_2" not in {c.start for c in chains}

    def test_limit(self) -> None:
        chains = find_causal_chains(self._nodes(), self._edges(), "event", limit=1)
        assert [c.start for c in chains] == ["factor_0_1"]

    def test_zero_strength_chain_dropped(self) -> None:
        nodes = [EventNode(id="event", label="Q", size=30.0), FactorNode(id="f", label="f", size=10.0)]
        assert find_causal_chains(nodes, [_edge("f", "event", 0.0)], "event") == []
