"""Schema-constrained classification and extraction on top of an LLM provider."""

import json
import logging
from collections.abc import Iterable
from typing import Any

from scour.core.exceptions import LLMResponseError
from scour.core.models import ColumnSpec

from .base import BaseLLMProvider, create_messages
from .prompts import (
    EXTRACTION_PROMPT_FOOTER,
    EXTRACTION_PROMPT_HEADER,
    EXTRACTION_SYSTEM_PROMPT,
    QUERY_GENERATION_SYSTEM_PROMPT,
    RELEVANCE_PROMPT,
)
from .schema import QUERIES_SCHEMA, RELEVANCE_SCHEMA, OutputSchema

logger = logging.getLogger(__name__)


def clean_json_response(content: str) -> str:
    """Strip surrounding whitespace and markdown code fences."""
    content = content.strip()
    if content.startswith("```"):
        parts = content.split("```")
        if len(parts) >= 2:
            content = parts[1]
            if content.startswith("json"):
                content = content[4:]
        content = content.strip()
    return content


def parse_json_object(content: str | None) -> dict[str, Any]:
    """Parse a model reply that must be a JSON object.

    Raises:
        LLMResponseError: If the reply is empty, not JSON, or not an object.
    """
    if not content or not content.strip():
        raise LLMResponseError("Empty response from the LLM", content)
    try:
        data = json.loads(clean_json_response(content))
    except json.JSONDecodeError as exc:
        raise LLMResponseError(f"LLM response is not valid JSON: {exc}", content) from exc
    if not isinstance(data, dict):
        raise LLMResponseError("LLM response is not a JSON object", content)
    return data


def normalize_null_strings(record: dict[str, Any]) -> dict[str, Any]:
    """Convert string "null" values to None; the model rarely emits native null."""
    normalized: dict[str, Any] = {}
    for key, value in record.items():
        if isinstance(value, str) and value.strip() == "null":
            value = None
        normalized[key] = value
    return normalized


def build_extraction_prompt(columns: Iterable[ColumnSpec], text: str) -> str:
    """Enumerate each column's key and description, followed by the page text."""
    lines = [EXTRACTION_PROMPT_HEADER]
    for i, column in enumerate(columns, start=1):
        lines.append(f"{i}. {column.key}: {column.description or column.display_title}\n")
    lines.append(EXTRACTION_PROMPT_FOOTER)
    lines.append(text)
    return "".join(lines)


class ExtractionClient:
    """Query generation, relevance judgment and field extraction."""

    def __init__(self, llm: BaseLLMProvider, model: str):
        """Initialize the extraction client.

        Args:
            llm: LLM provider instance.
            model: Model identifier used for every request.
        """
        self.llm = llm
        self.model = model

    def _ask(self, system_prompt: str, prompt: str | None, schema: OutputSchema) -> str:
        messages = create_messages(system_prompt, prompt)
        response = self.llm.chat(self.model, messages, schema)
        return response.content

    def generate_queries(self, objective: str) -> list[str]:
        """Ask for a batch of search queries for the objective.

        Returns:
            Stripped, non-empty query strings in reply order (may contain repeats).

        Raises:
            LLMResponseError: If the reply is empty or violates the ``{queries: array}`` schema.
        """
        content = self._ask(QUERY_GENERATION_SYSTEM_PROMPT, objective, QUERIES_SCHEMA)
        data = parse_json_object(content)

        queries = data.get("queries")
        if not isinstance(queries, list):
            raise LLMResponseError("LLM response did not include a queries array", content)

        cleaned = [q.strip() for q in queries if isinstance(q, str) and q.strip()]
        if len(cleaned) < len(queries):
            logger.debug("Dropped %d empty or non-string queries", len(queries) - len(cleaned))
        return cleaned

    def judge_relevance(self, objective: str, text: str) -> bool:
        """Return True if the page text is relevant to the objective.

        Unparseable replies count as not relevant.
        """
        prompt = RELEVANCE_PROMPT.format(objective=objective, text=text)
        content = self._ask(EXTRACTION_SYSTEM_PROMPT, prompt, RELEVANCE_SCHEMA)
        try:
            data = parse_json_object(content)
        except LLMResponseError as e:
            logger.warning("Failed to parse relevance judgment: %s", e)
            return False

        relevant = data.get("relevant")
        if isinstance(relevant, str):
            return relevant.strip().lower() == "true"
        return bool(relevant)

    def extract_record(self, columns: list[ColumnSpec], text: str) -> dict[str, str | None]:
        """Extract one value per column from the page text.

        Values are normalized: literal "null" becomes None, other scalars become strings,
        and columns missing from the reply are None.

        Raises:
            LLMResponseError: If the reply is empty or not a JSON object.
        """
        schema = OutputSchema.for_columns(columns)
        prompt = build_extraction_prompt(columns, text)
        content = self._ask(EXTRACTION_SYSTEM_PROMPT, prompt, schema)

        data = normalize_null_strings(parse_json_object(content))

        record: dict[str, str | None] = {}
        for column in columns:
            value = data.get(column.key)
            if value is not None and not isinstance(value, str):
                value = json.dumps(value) if isinstance(value, (dict, list)) else str(value)
            record[column.key] = value
        return record


__all__ = [
    "ExtractionClient",
    "build_extraction_prompt",
    "clean_json_response",
    "normalize_null_strings",
    "parse_json_object",
]
