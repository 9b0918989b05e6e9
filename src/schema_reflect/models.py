"""Pydantic model for the JSON Schema node tree produced by reflection."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

SCHEMA_VERSION = "http://json-schema.org/draft-04/schema#"
DEFINITIONS_PREFIX = "#/definitions/"

PRIMITIVE_TYPES = frozenset(
    {"array", "boolean", "integer", "null", "number", "object", "string"}
)


class Schema(BaseModel):
    """One node of a JSON Schema document.

    Attribute order is the serialized key order.  ``None`` means the keyword
    is absent.  Extension keywords (``jsonschema_extras``) live in the
    model's extra attributes and are serialized verbatim.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    version: str | None = Field(default=None, alias="$schema")
    ref: str | None = Field(default=None, alias="$ref")
    definitions: dict[str, Schema] | None = None

    type: str | None = None
    title: str | None = None
    description: str | None = None
    format: str | None = None
    media: dict[str, str] | None = None

    properties: dict[str, Schema] | None = None
    pattern_properties: dict[str, Schema] | None = Field(
        default=None, alias="patternProperties"
    )
    required: list[str] | None = None
    additional_properties: bool | None = Field(
        default=None, alias="additionalProperties"
    )
    items: Schema | None = None
    one_of: list[Schema] | None = Field(default=None, alias="oneOf")

    enum: list[Any] | None = None
    default: Any = None
    examples: list[Any] | None = None

    min_length: int | None = Field(default=None, alias="minLength")
    max_length: int | None = Field(default=None, alias="maxLength")
    pattern: str | None = None

    multiple_of: int | float | None = Field(default=None, alias="multipleOf")
    minimum: int | float | None = None
    exclusive_minimum: bool | None = Field(default=None, alias="exclusiveMinimum")
    maximum: int | float | None = None
    exclusive_maximum: bool | None = Field(default=None, alias="exclusiveMaximum")

    min_items: int | None = Field(default=None, alias="minItems")
    max_items: int | None = Field(default=None, alias="maxItems")
    unique_items: bool | None = Field(default=None, alias="uniqueItems")

    @classmethod
    def reference(cls, name: str) -> Schema:
        return cls(ref=f"{DEFINITIONS_PREFIX}{name}")

    def is_empty(self) -> bool:
        """True for the unconstrained schema ``{}``."""
        return not self.to_dict()

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready mapping keyed by JSON Schema keyword names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def keyword_names() -> frozenset[str]:
    """All JSON keyword names modeled as attributes of :class:`Schema`."""
    return frozenset(
        info.alias or name for name, info in Schema.model_fields.items()
    )
