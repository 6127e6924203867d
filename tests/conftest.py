"""Shared fixtures and fakes."""

import json
from collections.abc import Callable

import pytest

from scour.config.settings import SearchConfig, Settings
from scour.core.models import ColumnSpec, Project, SearchEngine, SearchHit
from scour.infrastructure.storage import ProjectSession, ProjectStore
from scour.llm.base import BaseLLMProvider, LLMResponse, Message
from scour.llm.schema import OutputSchema
from scour.search.base import BaseSearchProvider, dedupe_hits


class FakeLLM(BaseLLMProvider):
    """Replies from a queue of strings, or raises queued exceptions."""

    def __init__(self, replies=None, handler: Callable[[list[Message], OutputSchema | None], str] | None = None):
        self.replies = list(replies or [])
        self.handler = handler
        self.calls: list[tuple[str, list[Message], OutputSchema | None]] = []

    @property
    def name(self) -> str:
        return "fake"

    def chat(self, model, messages, output_schema=None) -> LLMResponse:
        self.calls.append((model, messages, output_schema))
        if self.handler is not None:
            reply = self.handler(messages, output_schema)
        else:
            reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if not isinstance(reply, str):
            reply = json.dumps(reply)
        return LLMResponse(content=reply, model=model)


class FakeSearchProvider(BaseSearchProvider):
    """Returns canned URLs per query; values may be exceptions."""

    engine = SearchEngine.BING

    def __init__(self, settings: Settings, results: dict | None = None, stops_on_count: bool = False):
        super().__init__(settings)
        self.results = results or {}
        self.stops_on_count = stops_on_count
        self.calls: list[tuple[str, int, int | None]] = []

    def search(self, query, page_budget, session, target_results=None):
        self.calls.append((query, page_budget, target_results))
        outcome = self.results.get(query, [])
        if isinstance(outcome, Exception):
            raise outcome
        hits = [SearchHit(url=url, title=f"Title {url}", search_engine=self.name) for url in outcome]
        return dedupe_hits(hits, query)


class FakeFetcher:
    def __init__(self, pages: dict[str, str] | None = None):
        self.pages = pages or {}
        self.fetched: list[str] = []

    def fetch_text(self, url: str) -> str:
        self.fetched.append(url)
        return self.pages.get(url, "")


@pytest.fixture
def settings() -> Settings:
    return Settings(search=SearchConfig(delay_min_seconds=0, delay_max_seconds=0))


@pytest.fixture
def project_path(tmp_path):
    return tmp_path / "research.scour"


@pytest.fixture
def store(project_path) -> ProjectStore:
    return ProjectStore(project_path)


@pytest.fixture
def make_session(store):
    """Persist a project built from keyword fields and return a session on it."""

    def _make(**fields) -> ProjectSession:
        project = Project(**fields)
        store.save(project)
        return ProjectSession.open(store)

    return _make


def make_hits(query: str, urls: list[str]) -> list[SearchHit]:
    return dedupe_hits([SearchHit(url=url, search_engine="Bing") for url in urls], query)


def price_columns(required: bool = True) -> list[ColumnSpec]:
    return [
        ColumnSpec(key="name", title="Name", description="Product name"),
        ColumnSpec(key="price", title="Price", description="Listed price", is_required=required),
    ]
