"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError

from scour.config.loader import ConfigLoader, _expand_env, _load_yaml
from scour.config.settings import LLMConfig, PipelineConfig, ProjectDefaults, SearchConfig, load_settings
from scour.core.exceptions import ConfigurationError


def _write_config(base, text):
    config_dir = base / "config"
    config_dir.mkdir()
    (config_dir / "config.yaml").write_text(text, encoding="utf-8")


def test_defaults_without_config_file(tmp_path):
    settings = load_settings(tmp_path)
    assert settings.llm.host == "http://localhost"
    assert settings.llm.port == 11434
    assert settings.llm.num_ctx == 10000
    assert settings.search.delay_min_seconds == 2.0
    assert settings.search.delay_max_seconds == 5.0
    assert settings.pipeline.max_generation_rounds == 20
    assert settings.defaults.search_engine == "Bing"


def test_loads_yaml_with_env_expansion(tmp_path, monkeypatch):
    monkeypatch.setenv("SCOUR_TEST_HOST", "ollama.internal")
    _write_config(
        tmp_path,
        "llm:\n  host: ${SCOUR_TEST_HOST}\n  port: ${SCOUR_TEST_PORT:-8080}\n"
        "defaults:\n  search_engine: Duck Duck Go\n  num_queries: 5\n",
    )

    settings = load_settings(tmp_path)
    assert settings.llm.host == "http://ollama.internal"
    assert settings.llm.port == 8080
    assert settings.defaults.search_engine == "DuckDuckGo"
    assert settings.defaults.num_queries == 5


def test_invalid_values_raise_configuration_error(tmp_path):
    _write_config(tmp_path, "defaults:\n  search_engine: random\n")
    with pytest.raises(ConfigurationError, match="random"):
        load_settings(tmp_path)


def test_invalid_yaml(tmp_path):
    _write_config(tmp_path, "llm: [unclosed\n")
    with pytest.raises(ConfigurationError):
        load_settings(tmp_path)


def test_non_mapping_yaml(tmp_path):
    (tmp_path / "list.yaml").write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        _load_yaml(tmp_path / "list.yaml")


def test_config_loader_path(tmp_path):
    loader = ConfigLoader(tmp_path)
    assert loader.config_path == tmp_path / "config" / "config.yaml"
    assert loader.load() == {}


def test_expand_env_nested(monkeypatch):
    monkeypatch.setenv("SCOUR_A", "1")
    monkeypatch.delenv("SCOUR_MISSING", raising=False)
    assert _expand_env({"a": ["${SCOUR_A}", "${SCOUR_MISSING}"], "b": 3}) == {"a": ["1", ""], "b": 3}


def test_search_delay_bounds():
    with pytest.raises(ValidationError):
        SearchConfig(delay_min_seconds=5, delay_max_seconds=1)
    with pytest.raises(ValidationError):
        SearchConfig(delay_min_seconds=-1, delay_max_seconds=1)


@pytest.mark.parametrize("field", ["num_queries", "num_results_per_query"])
def test_defaults_reject_non_positive_counts(field):
    with pytest.raises(ValidationError):
        ProjectDefaults(**{field: 0})


def test_pipeline_rejects_non_positive_limits():
    with pytest.raises(ValidationError):
        PipelineConfig(max_generation_rounds=0)


def test_llm_host_gets_scheme():
    assert LLMConfig(host="localhost/").host == "http://localhost"
