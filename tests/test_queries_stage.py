"""Tests for the query generation stage."""

import pytest
import requests

from conftest import FakeLLM

from scour.core.exceptions import GenerationFailure, LLMError
from scour.llm.extractor import ExtractionClient
from scour.pipeline.queries import QueryGenerationStage, merge_queries
from scour.pipeline.steps import Outcome, Stage


def _stage(session, replies, max_rounds=20):
    llm = FakeLLM(replies)
    return QueryGenerationStage(session, ExtractionClient(llm, session.project.model), max_rounds=max_rounds), llm


def test_merge_queries_dedupes_and_truncates():
    assert merge_queries(["x"], ["a", "x", "a", "b", "c"], 3) == ["x", "a", "b"]


def test_dedup_and_truncation_in_one_call(make_session, store):
    session = make_session(objective="laptops", num_queries=3)
    stage, llm = _stage(session, [{"queries": ["a", "b", "a", "c"]}])

    steps = list(stage.run())

    assert store.load().search_queries == ["a", "b", "c"]
    assert len(llm.calls) == 1
    assert len(steps) == 1
    assert steps[0].stage is Stage.QUERIES
    assert steps[0].outcome is Outcome.GENERATED
    assert steps[0].added == 3


def test_keeps_asking_until_target_reached(make_session, store):
    session = make_session(objective="laptops", num_queries=4)
    stage, llm = _stage(session, [{"queries": ["a", "b"]}, {"queries": ["b", "c", "d", "e"]}])

    steps = list(stage.run())

    assert store.load().search_queries == ["a", "b", "c", "d"]
    assert [step.added for step in steps] == [2, 2]
    assert len(llm.calls) == 2


def test_persists_after_each_round(make_session, store):
    session = make_session(objective="laptops", num_queries=4)
    stage, _ = _stage(session, [{"queries": ["a", "b"]}, {"queries": ["c", "d"]}])

    steps = stage.run()
    next(steps)
    assert store.load().search_queries == ["a", "b"]


def test_existing_queries_count_toward_target(make_session, store):
    session = make_session(objective="laptops", num_queries=3, search_queries=["a", "b"])
    stage, _ = _stage(session, [{"queries": ["a", "z"]}])

    list(stage.run())
    assert store.load().search_queries == ["a", "b", "z"]


def test_no_calls_when_target_already_met(make_session):
    session = make_session(objective="laptops", num_queries=2, search_queries=["a", "b"])
    stage, llm = _stage(session, [])

    assert list(stage.run()) == []
    assert llm.calls == []


def test_missing_objective_fails_before_any_call(make_session):
    session = make_session(objective="  ")
    stage, llm = _stage(session, [])

    with pytest.raises(GenerationFailure):
        list(stage.run())
    assert llm.calls == []


@pytest.mark.parametrize("reply", ["", "not json", {"items": []}])
def test_unusable_reply_is_fatal_and_keeps_progress(make_session, store, reply):
    session = make_session(objective="laptops", num_queries=4)
    stage, _ = _stage(session, [{"queries": ["a"]}, reply])

    with pytest.raises(GenerationFailure):
        list(stage.run())
    assert store.load().search_queries == ["a"]


def test_transport_failure_is_fatal(make_session):
    session = make_session(objective="laptops", num_queries=2)
    stage, _ = _stage(session, [LLMError(f"Failed to get a response: {requests.ConnectionError('down')}")])

    with pytest.raises(GenerationFailure, match="down"):
        list(stage.run())


def test_round_cap_stops_repeating_model(make_session, store):
    session = make_session(objective="laptops", num_queries=3)
    stage, llm = _stage(session, [{"queries": ["a"]}] * 5, max_rounds=5)

    with pytest.raises(GenerationFailure, match="5 generation rounds"):
        list(stage.run())
    assert len(llm.calls) == 5
    assert store.load().search_queries == ["a"]


def test_never_exceeds_target(make_session, store):
    session = make_session(objective="laptops", num_queries=2)
    stage, _ = _stage(session, [{"queries": [f"q{i}" for i in range(20)]}])

    list(stage.run())
    assert store.load().search_queries == ["q0", "q1"]
