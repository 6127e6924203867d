"""LLM integration."""

from .base import BaseLLMProvider, LLMResponse, Message, create_messages
from .extractor import ExtractionClient, normalize_null_strings
from .factory import create_llm_client
from .ollama import OllamaClient
from .schema import OutputSchema

__all__ = [
    "create_llm_client",
    "create_messages",
    "BaseLLMProvider",
    "ExtractionClient",
    "LLMResponse",
    "Message",
    "OllamaClient",
    "OutputSchema",
    "normalize_null_strings",
]
