"""Structured-output constraints passed to the model."""

from collections.abc import Iterable
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from scour.core.models import ColumnSpec

PropertyType = Literal["object", "array", "number", "string", "boolean"]


class PropertySpec(BaseModel):
    type: PropertyType


class OutputSchema(BaseModel):
    """JSON-schema-like constraint: an object with typed, named properties."""

    type: Literal["object"] = "object"
    properties: dict[str, PropertySpec] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_required(self) -> "OutputSchema":
        unknown = [name for name in self.required if name not in self.properties]
        if unknown:
            raise ValueError(f"Required properties not declared: {unknown}")
        return self

    @classmethod
    def of(cls, properties: dict[str, PropertyType], required: Iterable[str] | None = None) -> "OutputSchema":
        """Shorthand: ``OutputSchema.of({"relevant": "boolean"})`` requires every property."""
        return cls(
            properties={name: PropertySpec(type=kind) for name, kind in properties.items()},
            required=list(properties) if required is None else list(required),
        )

    @classmethod
    def for_columns(cls, columns: Iterable[ColumnSpec]) -> "OutputSchema":
        """Every column becomes a required string property."""
        return cls.of({column.key: "string" for column in columns})

    def to_format(self) -> dict:
        return self.model_dump()


QUERIES_SCHEMA = OutputSchema.of({"queries": "array"})
RELEVANCE_SCHEMA = OutputSchema.of({"relevant": "boolean"})

__all__ = ["OutputSchema", "PropertySpec", "PropertyType", "QUERIES_SCHEMA", "RELEVANCE_SCHEMA"]
