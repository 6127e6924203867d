"""Core domain models for Scour.

The persisted project file uses camelCase keys; models expose snake_case
attributes and serialize back through aliases.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from scour.core.constants import (
    DEFAULT_LLM_PROVIDER,
    DEFAULT_MODE,
    DEFAULT_MODEL_NAME,
    DEFAULT_NUM_QUERIES,
    DEFAULT_NUM_RESULTS_PER_QUERY,
    DEFAULT_SEARCH_ENGINE,
)
from scour.utils.datetime import utc_now


class SearchEngine(str, Enum):
    """Search engines with a retrieval adapter."""

    BING = "Bing"
    GOOGLE = "Google"
    DUCKDUCKGO = "DuckDuckGo"

    @classmethod
    def parse(cls, value: str | None) -> "SearchEngine | None":
        """Resolve a configured engine name, tolerating spacing and case."""
        if not value:
            return None
        normalized = value.replace(" ", "").lower()
        for engine in cls:
            if engine.value.lower() == normalized:
                return engine
        return None


class Mode(str, Enum):
    """Project mode."""

    BASIC = "basic"
    ADVANCED = "advanced"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ColumnSpec(_CamelModel):
    """One extracted field of the dataset."""

    key: str
    title: str = ""
    description: str | None = None
    is_required: bool = False

    @field_validator("key")
    @classmethod
    def validate_key(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Column key must not be empty")
        if value == "url":
            raise ValueError("Column key 'url' is reserved for the source URL")
        return value

    @property
    def display_title(self) -> str:
        return self.title or self.key


class SearchHit(_CamelModel):
    """One raw search-engine result."""

    title: str = ""
    description: str = ""
    url: str
    position: int | None = None
    is_ad: bool = False
    search_query: str | None = None
    search_engine: str
    retrieved_at: datetime = Field(default_factory=utc_now)
    accessed_at: datetime | None = None


# A row maps column keys to extracted values, plus the source "url".
Row = dict[str, Any]


class Project(_CamelModel):
    """Durable state of one research project."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    mode: Mode = Mode.BASIC
    llm_provider: str = DEFAULT_LLM_PROVIDER
    model: str = DEFAULT_MODEL_NAME
    ollama_url: str | None = None
    ollama_port: int | None = None
    created_at: datetime = Field(default_factory=utc_now)
    app_version: str = ""
    search_engine: str = DEFAULT_SEARCH_ENGINE
    objective: str | None = None
    num_queries: int = DEFAULT_NUM_QUERIES
    num_results_per_query: int = DEFAULT_NUM_RESULTS_PER_QUERY
    current_search_query_index: int | None = None
    current_search_result_index: int | None = None
    search_queries: list[str] = Field(default_factory=list)
    search_results: list[SearchHit] = Field(default_factory=list)
    columns: list[ColumnSpec] = Field(default_factory=list)
    rows: list[Row] = Field(default_factory=list)
    status_message: str | None = None

    @property
    def engine(self) -> SearchEngine | None:
        """Configured engine, or None when it has no adapter."""
        return SearchEngine.parse(self.search_engine)

    def required_columns(self) -> list[ColumnSpec]:
        return [column for column in self.columns if column.is_required]

    def processed_urls(self) -> set[str]:
        """URLs that already have an admitted row."""
        return {row["url"] for row in self.rows if row.get("url")}

    def hit_keys(self) -> set[tuple[str | None, str]]:
        """(search query, url) pairs already persisted."""
        return {(hit.search_query, hit.url) for hit in self.search_results}

    def get_column(self, key: str) -> ColumnSpec | None:
        for column in self.columns:
            if column.key == key:
                return column
        return None

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize to the persisted camelCase form."""
        return self.model_dump(mode="json", by_alias=True)


__all__ = [
    "SearchEngine",
    "Mode",
    "ColumnSpec",
    "SearchHit",
    "Row",
    "Project",
]
