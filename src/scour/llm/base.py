"""LLM provider interface and message helpers."""

from abc import ABC, abstractmethod
from typing import Literal, TypedDict

from pydantic import BaseModel

from .schema import OutputSchema

Role = Literal["system", "user", "assistant"]


class Message(TypedDict):
    role: Role
    content: str


class LLMResponse(BaseModel):
    """Raw reply from a chat completion."""

    content: str
    model: str
    tokens_used: int = 0


def create_messages(system_prompt: str | None = None, prompt: str | None = None) -> list[Message]:
    """Build an ordered message list, omitting empty parts."""
    messages: list[Message] = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    if prompt:
        messages.append({"role": "user", "content": prompt})
    return messages


class BaseLLMProvider(ABC):
    """Chat-completion provider."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider identifier."""
        ...

    @abstractmethod
    def chat(
        self,
        model: str,
        messages: list[Message],
        output_schema: OutputSchema | None = None,
    ) -> LLMResponse:
        """Run one chat completion.

        Args:
            model: Model identifier.
            messages: Ordered system/user messages.
            output_schema: Optional JSON-schema-like constraint on the reply.

        Raises:
            LLMError: On transport or API failure.
        """
        ...


__all__ = ["BaseLLMProvider", "LLMResponse", "Message", "Role", "create_messages"]
