"""Configuration settings models."""

from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from scour.core.constants import (
    DEFAULT_CONSENT_TIMEOUT_MS,
    DEFAULT_DELAY_MAX_SECONDS,
    DEFAULT_DELAY_MIN_SECONDS,
    DEFAULT_FETCH_TIMEOUT_MS,
    DEFAULT_LLM_TIMEOUT,
    DEFAULT_MAX_GENERATION_ROUNDS,
    DEFAULT_MAX_PAGE_CHARS,
    DEFAULT_MODE,
    DEFAULT_MODEL_NAME,
    DEFAULT_NAVIGATION_TIMEOUT_MS,
    DEFAULT_NUM_CTX,
    DEFAULT_NUM_QUERIES,
    DEFAULT_NUM_RESULTS_PER_QUERY,
    DEFAULT_OLLAMA_HOST,
    DEFAULT_OLLAMA_PORT,
    DEFAULT_RESULTS_TIMEOUT_MS,
    DEFAULT_SEARCH_ENGINE,
)
from scour.core.exceptions import ConfigurationError
from scour.core.models import SearchEngine

from .loader import ConfigLoader


# LLM Configuration
class LLMConfig(BaseModel):
    """Ollama endpoint configuration.

    Projects may carry their own host/port; these values are the fallback.
    """

    host: str = DEFAULT_OLLAMA_HOST
    port: int = DEFAULT_OLLAMA_PORT
    timeout: float = DEFAULT_LLM_TIMEOUT  # Seconds per chat request
    num_ctx: int = DEFAULT_NUM_CTX  # Context window passed to Ollama

    @field_validator("host")
    @classmethod
    def validate_host(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value:
            raise ValueError("LLM host must not be empty")
        if "://" not in value:
            value = f"http://{value}"
        return value


# Browser Configuration
class BrowserConfig(BaseModel):
    """Chromium launch and context configuration."""

    executable_path: str | None = None  # Overrides executable discovery
    headless: bool = False  # Visible browsers trip fewer bot checks
    viewport_width: int = 1280
    viewport_height: int = 720
    device_scale_factor: float = 2.0
    locale: str = "en-US"


# Search Configuration
class SearchConfig(BaseModel):
    """Search retrieval timing."""

    delay_min_seconds: float = DEFAULT_DELAY_MIN_SECONDS
    delay_max_seconds: float = DEFAULT_DELAY_MAX_SECONDS
    results_timeout_ms: int = DEFAULT_RESULTS_TIMEOUT_MS
    consent_timeout_ms: int = DEFAULT_CONSENT_TIMEOUT_MS
    navigation_timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS

    @model_validator(mode="after")
    def validate_delays(self) -> "SearchConfig":
        if self.delay_min_seconds < 0:
            raise ValueError("delay_min_seconds must not be negative")
        if self.delay_min_seconds > self.delay_max_seconds:
            raise ValueError(
                f"delay_min_seconds ({self.delay_min_seconds}) must not exceed "
                f"delay_max_seconds ({self.delay_max_seconds})"
            )
        return self


# Pipeline Configuration
class PipelineConfig(BaseModel):
    """Stage limits."""

    max_generation_rounds: int = DEFAULT_MAX_GENERATION_ROUNDS  # Model calls per query generation run
    max_page_chars: int = DEFAULT_MAX_PAGE_CHARS  # Page text sent to the model
    fetch_timeout_ms: int = DEFAULT_FETCH_TIMEOUT_MS

    @field_validator("max_generation_rounds", "max_page_chars", "fetch_timeout_ms")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be positive")
        return value


# New Project Defaults
class ProjectDefaults(BaseModel):
    """Values used when creating a project."""

    mode: str = DEFAULT_MODE
    model: str = DEFAULT_MODEL_NAME
    search_engine: str = DEFAULT_SEARCH_ENGINE
    num_queries: int = DEFAULT_NUM_QUERIES
    num_results_per_query: int = DEFAULT_NUM_RESULTS_PER_QUERY

    @field_validator("mode")
    @classmethod
    def validate_mode(cls, value: str) -> str:
        allowed = {"basic", "advanced"}
        if value not in allowed:
            raise ValueError(f"Unsupported mode '{value}'. Allowed: {sorted(allowed)}")
        return value

    @field_validator("search_engine")
    @classmethod
    def validate_search_engine(cls, value: str) -> str:
        engine = SearchEngine.parse(value)
        if engine is None:
            allowed = [e.value for e in SearchEngine]
            raise ValueError(f"Unsupported search engine '{value}'. Allowed: {allowed}")
        return engine.value

    @field_validator("num_queries", "num_results_per_query")
    @classmethod
    def validate_counts(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be positive")
        return value


# Main Settings
class Settings(BaseModel):
    """Main configuration settings."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    defaults: ProjectDefaults = Field(default_factory=ProjectDefaults)


def load_settings(base_dir: Path | str) -> Settings:
    """Load settings from config/config.yaml, falling back to defaults."""
    loader = ConfigLoader(base_dir)
    config_path = loader.config_path
    config = loader.load()

    try:
        return Settings(
            llm=LLMConfig(**config.get("llm", {})),
            browser=BrowserConfig(**config.get("browser", {})),
            search=SearchConfig(**config.get("search", {})),
            pipeline=PipelineConfig(**config.get("pipeline", {})),
            defaults=ProjectDefaults(**config.get("defaults", {})),
        )
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration in {config_path}:\n{exc}") from exc


__all__ = [
    "Settings",
    "load_settings",
    "LLMConfig",
    "BrowserConfig",
    "SearchConfig",
    "PipelineConfig",
    "ProjectDefaults",
]
