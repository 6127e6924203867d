"""Ollama chat API client."""

import logging
from urllib.parse import urlparse

import requests

from scour.config.settings import LLMConfig
from scour.core.constants import DEFAULT_LLM_TIMEOUT, DEFAULT_NUM_CTX, DEFAULT_OLLAMA_HOST, DEFAULT_OLLAMA_PORT
from scour.core.exceptions import LLMError

from .base import BaseLLMProvider, LLMResponse, Message
from .schema import OutputSchema

logger = logging.getLogger(__name__)


class OllamaClient(BaseLLMProvider):
    """Client for a local Ollama server (``POST /api/chat``, non-streaming)."""

    def __init__(
        self,
        host: str = DEFAULT_OLLAMA_HOST,
        port: int | None = DEFAULT_OLLAMA_PORT,
        timeout: float = DEFAULT_LLM_TIMEOUT,
        num_ctx: int = DEFAULT_NUM_CTX,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize Ollama client.

        Args:
            host: Server URL, e.g. ``http://localhost``.
            port: Server port, or None when ``host`` already includes one.
            timeout: Request timeout in seconds.
            num_ctx: Context window size requested from the model.
            session: Optional shared requests session.
        """
        host = host.rstrip("/")
        if "://" not in host:
            host = f"http://{host}"
        # A port embedded in the host wins over the separate value
        if port and urlparse(host).port is None:
            host = f"{host}:{port}"
        self.base_url = host
        self.timeout = timeout
        self.num_ctx = num_ctx
        self.session = session or requests.Session()

    @classmethod
    def from_config(
        cls,
        config: LLMConfig,
        host: str | None = None,
        port: int | None = None,
    ) -> "OllamaClient":
        """Create client from configuration, letting project values override host/port."""
        return cls(
            host=host or config.host,
            port=port or config.port,
            timeout=config.timeout,
            num_ctx=config.num_ctx,
        )

    @property
    def name(self) -> str:
        return "ollama"

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/api/chat"

    def _build_payload(
        self,
        model: str,
        messages: list[Message],
        output_schema: OutputSchema | None,
    ) -> dict:
        payload = {
            "model": model,
            "messages": messages,
            "stream": False,
            "options": {"num_ctx": self.num_ctx},
        }
        if output_schema is not None:
            payload["format"] = output_schema.to_format()
        return payload

    def _extract_response(self, data: dict, model: str) -> LLMResponse:
        message = data.get("message")
        if not isinstance(message, dict) or "content" not in message:
            raise LLMError(f"Invalid response from the Ollama API: {str(data)[:200]}")

        tokens_used = int(data.get("prompt_eval_count") or 0) + int(data.get("eval_count") or 0)
        return LLMResponse(
            content=message.get("content") or "",
            model=data.get("model", model),
            tokens_used=tokens_used,
        )

    def chat(
        self,
        model: str,
        messages: list[Message],
        output_schema: OutputSchema | None = None,
    ) -> LLMResponse:
        payload = self._build_payload(model, messages, output_schema)
        logger.debug("Calling Ollama model %s with %d messages", model, len(messages))

        try:
            response = self.session.post(
                self.endpoint,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as exc:
            raise LLMError(f"Failed to get a response from the LLM: {exc}") from exc
        except ValueError as exc:
            raise LLMError(f"Ollama returned a non-JSON body: {exc}") from exc

        result = self._extract_response(data, model)
        logger.debug("Ollama replied with %d chars (%d tokens)", len(result.content), result.tokens_used)
        return result


__all__ = ["OllamaClient"]
