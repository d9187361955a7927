"""
tests/unit/test_predictor.py

Unit tests for causalcast.prediction.predictor.

Coverage
--------
  predict_from_causality:
    - None graph, empty graph and chain-less graph → 50/50 fallback
    - neutral chain → probability 0.5, outcome from the factor's outcome node
    - positive / negative words shift the probability by signal × strength
    - probabilities clamped to [0.1, 0.9]; interval contains the probability

  infer_outcome:
    - last path node is an outcome node → its label
    - otherwise the first outcome reached from a path node
    - otherwise "Yes"

  generate_reasoning:
    - "Factor: … → … → Outcome: …. Strength: NN.N%"

  predict_chain:
    - chain whose nodes are all unknown → None
"""
from __future__ import annotations

import pytest

from causalcast.graph.builder import build_causal_graph
from causalcast.graph.models import (
    CausalChain,
    CausalGraph,
    EventNode,
    FactorNode,
    GraphEdge,
    GraphMetadata,
    OutcomeNode,
)
from causalcast.models.schemas.inputs import MarketEvent, SourceDocument
from causalcast.prediction.predictor import (
    generate_reasoning,
    infer_outcome,
    predict_chain,
    predict_from_causality,
)


def _event(title: str = "Will the company beat earnings?") -> MarketEvent:
    return MarketEvent.model_validate({"id": "evt-1", "title": title})


def _source(text: str, relevance: float | None = None) -> SourceDocument:
    return SourceDocument.model_validate({"title": "Wire", "text": text, "relevanceScore": relevance})


def _forecast(text: str, title: str, relevance: float | None = None):
    event = _event(title)
    graph = build_causal_graph([_source(text, relevance)], event)
    return predict_from_causality(event, graph)


def _assert_fallback(predictions) -> None:
    assert len(predictions) == 1
    pred = predictions[0]
    assert pred.outcome == "Yes"
    assert pred.probability == 0.5
    assert pred.confidence == "Low"
    assert pred.ci_lower == pytest.approx(0.35)
    assert pred.ci_upper == pytest.approx(0.65)
    assert pred.reasoning == "Insufficient causal data for prediction"
    assert pred.causal_chains == 0


class TestFallback:
    def test_none_graph(self) -> None:
        _assert_fallback(predict_from_causality(_event(), None))

    def test_empty_graph(self) -> None:
        _assert_fallback(predict_from_causality(_event(), CausalGraph(nodes=(), edges=())))

    def test_no_chains(self) -> None:
        event = _event()
        graph = build_causal_graph([_source("Nothing causal is mentioned in this text.")], event)
        _assert_fallback(predict_from_causality(event, graph))

    def test_no_sources(self) -> None:
        event = _event()
        _assert_fallback(predict_from_causality(event, build_causal_graph([], event)))

    def test_event_is_optional(self) -> None:
        _assert_fallback(predict_from_causality(None, None))


class TestPredictFromCausality:
    def test_neutral_chain(self) -> None:
        predictions = _forecast(
            "Supply chain disruptions led to a revenue decline.",
            "Will the company beat earnings?",
            relevance=0.9,
        )
        assert len(predictions) == 1
        pred = predictions[0]
        assert pred.outcome == "revenue decline"
        assert pred.probability == pytest.approx(0.5)
        assert pred.confidence_score == pytest.approx(0.576)
        assert pred.confidence == "Medium"
        assert pred.causal_chains == 1
        assert pred.reasoning == (
            "Causal chain: Factor: Supply chain disruptions "
            "→ Outcome: Will the company beat earnings?. Strength: 57.6%"
        )

    def test_positive_signal_raises_probability(self) -> None:
        predictions = _forecast(
            "Strong exports led to growth in manufacturing.",
            "Will GDP growth exceed 3%?",
        )
        pred = predictions[0]
        assert pred.outcome == "growth in manufacturing"
        # 0.5 + (1 / 2) × 0.32
        assert pred.probability == pytest.approx(0.66)
        assert pred.confidence == "Low"

    def test_negative_signal_lowers_probability(self) -> None:
        predictions = _forecast(
            "Falling demand led to layoffs at factories.",
            "Will unemployment top 5%?",
        )
        pred = predictions[0]
        assert pred.outcome == "layoffs at factories"
        # 0.5 - (1 / 2) × 0.32
        assert pred.probability == pytest.approx(0.34)

    def test_probability_bounds_and_interval(self) -> None:
        event = _event("Will growth rise on gains?")
        sources = [
            _source("Strong exports led to growth in manufacturing.", 1.0),
            _source("Falling demand led to layoffs at factories.", 1.0),
            _source("Rising investment led to a boost in hiring.", 1.0),
        ]
        graph = build_causal_graph(sources, event)
        predictions = predict_from_causality(event, graph)
        assert 1 <= len(predictions) <= 2
        for pred in predictions:
            assert 0.1 <= pred.probability <= 0.9
            assert pred.ci_lower <= pred.probability <= pred.ci_upper
            assert 0.0 <= pred.ci_lower and pred.ci_upper <= 1.0
        probabilities = [p.probability for p in predictions]
        assert probabilities == sorted(probabilities, reverse=True)


def _manual_graph() -> CausalGraph:
    nodes = (
        EventNode(id="event", label="Will rates rise?", size=30.0),
        FactorNode(id="factor_0_0", label="sticky inflation", size=10.0),
        OutcomeNode(id="outcome_0_0", label="higher yields", size=10.0),
        FactorNode(id="factor_0_1", label="weak labour data", size=10.0),
    )
    edges = (
        GraphEdge(source="factor_0_0", target="outcome_0_0", relation="causes", strength=0.6, weight=0.6),
        GraphEdge(source="factor_0_0", target="event", relation="influences", strength=0.48, weight=0.48),
        GraphEdge(source="factor_0_1", target="event", relation="influences", strength=0.4, weight=0.4),
    )
    return CausalGraph(nodes=nodes, edges=edges, metadata=GraphMetadata())


class TestInferOutcome:
    def test_last_node_outcome(self) -> None:
        graph = _manual_graph()
        path = [graph.node("factor_0_0"), graph.node("outcome_0_0")]
        assert infer_outcome(path, graph) == "higher yields"

    def test_outcome_reached_from_path_node(self) -> None:
        graph = _manual_graph()
        path = [graph.node("factor_0_0"), graph.node("event")]
        assert infer_outcome(path, graph) == "higher yields"

    def test_default_yes(self) -> None:
        graph = _manual_graph()
        path = [graph.node("factor_0_1"), graph.node("event")]
        assert infer_outcome(path, graph) == "Yes"

    def test_empty_path(self) -> None:
        assert infer_outcome([], _manual_graph()) == "Yes"


class TestGenerateReasoning:
    def test_interior_nodes(self) -> None:
        graph = _manual_graph()
        chain = CausalChain(
            start="factor_0_0", end="event", path=("factor_0_0", "outcome_0_0", "event"), strength=0.72
        )
        path = [graph.node(i) for i in chain.path]
        assert generate_reasoning(chain, path) == (
            "Causal chain: Factor: sticky inflation → higher yields "
            "→ Outcome: Will rates rise?. Strength: 72.0%"
        )

    def test_empty_path(self) -> None:
        chain = CausalChain(start="a", end="b", path=(), strength=0.5)
        assert generate_reasoning(chain, []) == "No causal path identified"


class TestPredictChain:
    def test_unknown_nodes(self) -> None:
        chain = CausalChain(start="ghost", end="event-x", path=("ghost", "event-x"), strength=0.5)
        assert predict_chain(chain, _manual_graph()) is None

    def test_resolved_chain(self) -> None:
        graph = _manual_graph()
        chain = CausalChain(start="factor_0_1", end="event", path=("factor_0_1", "event"), strength=0.4)
        pred = predict_chain(chain, graph)
        assert pred is not None
        assert pred.outcome == "Yes"
        assert pred.strength == pytest.approx(0.4)
        # "rise" in the event label is the only signal: 0.5 + (1 / 2) × 0.4
        assert pred.probability == pytest.approx(0.7)
