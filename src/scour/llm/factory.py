"""LLM client factory."""

from scour.config.settings import LLMConfig
from scour.core.exceptions import ConfigurationError
from scour.core.models import Project
from scour.llm.base import BaseLLMProvider
from scour.llm.ollama import OllamaClient

SUPPORTED_PROVIDERS = frozenset({"ollama"})


def create_llm_client(config: LLMConfig, project: Project | None = None) -> BaseLLMProvider:
    """Create the LLM client for a project.

    The project's own endpoint (``ollamaUrl``/``ollamaPort``) takes precedence
    over configuration.

    Raises:
        ConfigurationError: If the project's provider is not supported.
    """
    provider = (project.llm_provider if project else "ollama").lower()

    if provider == "ollama":
        return OllamaClient.from_config(
            config,
            host=project.ollama_url if project else None,
            port=project.ollama_port if project else None,
        )
    raise ConfigurationError(
        f"Unknown LLM provider: {provider}. Supported providers: {', '.join(sorted(SUPPORTED_PROVIDERS))}"
    )


__all__ = ["create_llm_client", "SUPPORTED_PROVIDERS"]
