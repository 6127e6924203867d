"""Tests for page classification and extraction."""

import pytest

from conftest import FakeFetcher, FakeLLM, make_hits, price_columns

from scour.core.exceptions import ConfigurationError, LLMError, NoSearchResultsError, ProjectNotFoundError
from scour.core.models import ColumnSpec
from scour.infrastructure.storage import ProjectSession, ProjectStore
from scour.llm.extractor import ExtractionClient
from scour.llm.schema import RELEVANCE_SCHEMA
from scour.pipeline.extract import PageExtractionStage, find_resume_index, missing_required
from scour.pipeline.steps import Outcome

URLS = ["https://u1", "https://u2", "https://u3"]


def _records_by_page(records, relevant=True):
    """Route relevance and extraction calls; ``records`` maps page text to a reply."""

    def handler(messages, schema):
        prompt = messages[-1]["content"]
        if schema == RELEVANCE_SCHEMA:
            return {"relevant": relevant}
        for text, reply in records.items():
            if prompt.endswith(text):
                return reply
        raise AssertionError(f"Unexpected prompt: {prompt[-40:]}")

    return handler


def _stage(session, handler, pages, max_page_chars=30000):
    llm = FakeLLM(handler=handler)
    fetcher = FakeFetcher(pages)
    stage = PageExtractionStage(session, ExtractionClient(llm, "m"), fetcher, max_page_chars=max_page_chars)
    return stage, llm, fetcher


def _project(make_session, **fields):
    fields.setdefault("objective", "widget prices")
    fields.setdefault("columns", price_columns())
    fields.setdefault("search_results", make_hits("q", URLS))
    return make_session(**fields)


def test_admits_rows_with_required_values(make_session, store):
    session = _project(make_session)
    pages = {url: f"page {url}" for url in URLS}
    records = {f"page {url}": {"name": f"W{i}", "price": f"{i}.00"} for i, url in enumerate(URLS)}
    stage, _, _ = _stage(session, _records_by_page(records), pages)

    steps = list(stage.run())

    project = store.load()
    assert [row["url"] for row in project.rows] == URLS
    assert project.rows[0] == {"name": "W0", "price": "0.00", "url": "https://u1"}
    assert [s.outcome for s in steps] == [Outcome.ADMITTED] * 3
    assert project.current_search_result_index == 3


def test_null_required_value_is_discarded(make_session, store):
    session = _project(
        make_session,
        columns=[ColumnSpec(key="price", is_required=True)],
        search_results=make_hits("q", ["https://u1"]),
    )
    stage, _, _ = _stage(session, _records_by_page({"text": {"price": "null"}}), {"https://u1": "text"})

    steps = list(stage.run())

    assert store.load().rows == []
    assert steps[0].outcome is Outcome.DISCARDED
    assert store.load().current_search_result_index == 1


def test_blank_required_value_is_discarded_optional_null_kept(make_session, store):
    session = _project(make_session, search_results=make_hits("q", ["https://u1", "https://u2"]))
    records = {"one": {"name": "A", "price": "   "}, "two": {"name": "null", "price": "5"}}
    stage, _, _ = _stage(session, _records_by_page(records), {"https://u1": "one", "https://u2": "two"})

    list(stage.run())

    assert store.load().rows == [{"name": None, "price": "5", "url": "https://u2"}]


def test_resumes_after_last_row(make_session):
    session = _project(make_session, rows=[{"name": "A", "price": "1", "url": "https://u1"}])
    records = {"two": {"name": "B", "price": "2"}, "three": {"name": "C", "price": "3"}}
    stage, _, fetcher = _stage(
        session, _records_by_page(records), {"https://u2": "two", "https://u3": "three"}
    )

    list(stage.run())
    assert fetcher.fetched == ["https://u2", "https://u3"]


def test_skips_urls_already_in_rows(make_session, store):
    hits = make_hits("q", ["https://u1", "https://u2"]) + make_hits("p", ["https://u1"])
    session = _project(
        make_session,
        search_results=hits,
        rows=[{"name": "A", "price": "1", "url": "https://u1"}, {"name": "B", "price": "2", "url": "https://u2"}],
    )
    stage, _, fetcher = _stage(session, _records_by_page({}), {})

    steps = list(stage.run())

    assert fetcher.fetched == []
    assert [s.outcome for s in steps] == [Outcome.DUPLICATE]
    assert len(store.load().rows) == 2


def test_same_url_twice_in_hits_is_processed_once(make_session, store):
    hits = make_hits("q", ["https://u1"]) + make_hits("p", ["https://u1"])
    session = _project(make_session, search_results=hits)
    stage, _, fetcher = _stage(session, _records_by_page({"t": {"name": "A", "price": "1"}}), {"https://u1": "t"})

    steps = list(stage.run())

    assert fetcher.fetched == ["https://u1"]
    assert [s.outcome for s in steps] == [Outcome.ADMITTED, Outcome.DUPLICATE]
    assert len(store.load().rows) == 1


def test_empty_page_and_irrelevant_page_are_skipped(make_session, store):
    session = _project(make_session, search_results=make_hits("q", ["https://u1", "https://u2"]))
    stage, llm, _ = _stage(session, _records_by_page({}, relevant=False), {"https://u2": "text"})

    steps = list(stage.run())

    assert [s.outcome for s in steps] == [Outcome.EMPTY, Outcome.IRRELEVANT]
    assert len(llm.calls) == 1
    assert store.load().rows == []


def test_llm_failure_for_one_hit_is_recoverable(make_session, store):
    session = _project(make_session, search_results=make_hits("q", ["https://u1", "https://u2"]))

    def handler(messages, schema):
        if schema == RELEVANCE_SCHEMA:
            return {"relevant": True}
        if messages[-1]["content"].endswith("bad"):
            return LLMError("connection reset")
        return {"name": "ok", "price": "1"}

    stage, _, _ = _stage(session, handler, {"https://u1": "bad", "https://u2": "good"})

    steps = list(stage.run())

    assert [s.outcome for s in steps] == [Outcome.FAILED, Outcome.ADMITTED]
    assert [row["url"] for row in store.load().rows] == ["https://u2"]


def test_page_text_is_truncated(make_session):
    session = _project(make_session, search_results=make_hits("q", ["https://u1"]))
    pages = {"https://u1": "x" * 100}
    stage, llm, _ = _stage(session, _records_by_page({}, relevant=False), pages, max_page_chars=10)

    list(stage.run())
    prompt = llm.calls[0][1][-1]["content"]
    assert "x" * 10 in prompt
    assert "x" * 11 not in prompt


def test_cursor_persisted_after_each_hit(make_session, store):
    session = _project(make_session)
    stage, _, _ = _stage(session, _records_by_page({}, relevant=False), {})

    steps = stage.run()
    next(steps)
    assert store.load().current_search_result_index == 1
    next(steps)
    assert store.load().current_search_result_index == 2


def test_no_hits_is_fatal(make_session):
    session = _project(make_session, search_results=[])
    stage, llm, _ = _stage(session, _records_by_page({}), {})
    with pytest.raises(NoSearchResultsError):
        list(stage.run())
    assert llm.calls == []


def test_no_columns_is_fatal(make_session):
    session = _project(make_session, columns=[])
    stage, _, _ = _stage(session, _records_by_page({}), {})
    with pytest.raises(ConfigurationError):
        list(stage.run())


def test_unreadable_project_is_fatal(tmp_path):
    with pytest.raises(ProjectNotFoundError):
        ProjectSession.open(ProjectStore(tmp_path / "gone.scour"))


class TestFindResumeIndex:
    def test_no_rows_starts_at_zero(self):
        assert find_resume_index(make_hits("q", URLS), []) == 0

    def test_starts_after_last_row(self):
        assert find_resume_index(make_hits("q", URLS), [{"url": "https://u1"}]) == 1
        assert find_resume_index(make_hits("q", URLS), [{"url": "https://u1"}, {"url": "https://u3"}]) == 3

    def test_unknown_url_starts_at_zero(self):
        assert find_resume_index(make_hits("q", URLS), [{"url": "https://elsewhere"}]) == 0


def test_missing_required():
    columns = price_columns()
    assert missing_required(columns, {"name": None, "price": "1"}) == []
    assert missing_required(columns, {"name": "a", "price": " "}) == ["price"]
    assert missing_required(columns, {"name": "a"}) == ["price"]
