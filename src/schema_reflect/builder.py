"""Merges parsed field annotations into structural schemas and assembles
record nodes (properties, required list, ``oneOf`` requirement groups)."""

from __future__ import annotations

from typing import Any

from schema_reflect.annotations import FieldAnnotations
from schema_reflect.errors import MalformedAnnotation
from schema_reflect.models import Schema, keyword_names

_STRING_KEYWORDS = ("min_length", "max_length", "pattern", "format")
_NUMERIC_KEYWORDS = (
    "minimum",
    "maximum",
    "exclusive_minimum",
    "exclusive_maximum",
    "multiple_of",
)
_ARRAY_KEYWORDS = ("min_items", "max_items", "unique_items")

_KEYWORD_GROUPS: tuple[tuple[tuple[str, ...], frozenset[str], str], ...] = (
    (_STRING_KEYWORDS, frozenset({"string"}), "string"),
    (_NUMERIC_KEYWORDS, frozenset({"integer", "number"}), "numeric"),
    (_ARRAY_KEYWORDS, frozenset({"array"}), "array"),
)


def apply_annotations(node: Schema, ann: FieldAnnotations) -> Schema:
    """Return ``node`` with the field's constraints applied.

    Type-specific keywords must match the node's ``type``; ``enum``,
    ``example`` and ``default`` values are coerced to it.
    """
    if ann.oneof_types:
        if not node.is_empty():
            raise MalformedAnnotation(
                "oneof_type applies only to fields of an open (Any) type"
            )
        node = Schema(one_of=[Schema(type=name) for name in ann.oneof_types])

    for attrs, allowed, label in _KEYWORD_GROUPS:
        present = [attr for attr in attrs if getattr(ann, attr) is not None]
        if not present:
            continue
        if node.type not in allowed:
            raise MalformedAnnotation(
                f"{_alias(present[0])} is a {label} keyword but the field "
                f"type is {node.type or 'untyped'}"
            )
        for attr in present:
            setattr(node, attr, getattr(ann, attr))

    if ann.title is not None:
        node.title = ann.title
    if ann.description is not None:
        node.description = ann.description
    if ann.default is not None:
        node.default = _coerce(ann.default, node.type, "default")
    if ann.examples:
        node.examples = [_coerce(v, node.type, "example") for v in ann.examples]
    if ann.enum:
        node.enum = [_coerce(v, node.type, "enum") for v in ann.enum]
    if ann.extras:
        _apply_extras(node, ann.extras)
    return node


def _apply_extras(node: Schema, extras: dict[str, str]) -> None:
    reserved = keyword_names()
    for key, value in extras.items():
        if key in reserved:
            raise MalformedAnnotation(
                f"extras key {key!r} collides with a JSON Schema keyword"
            )
        # setattr resolves names such as "copy" to model attributes.
        node.__pydantic_extra__[key] = value  # type: ignore[index]


def _coerce(value: str, schema_type: str | None, key: str) -> Any:
    text = value.strip()
    try:
        if schema_type == "integer":
            return int(text)
        if schema_type == "number":
            return float(text)
    except ValueError:
        raise MalformedAnnotation(
            f"{key} value {value!r} is not a valid {schema_type}"
        ) from None
    if schema_type == "boolean":
        if text.lower() in ("true", "false"):
            return text.lower() == "true"
        raise MalformedAnnotation(f"{key} value {value!r} is not a valid boolean")
    return value


def _alias(attr: str) -> str:
    info = Schema.model_fields[attr]
    return info.alias or attr


class RecordAssembler:
    """Collects a record's properties and builds its object node."""

    def __init__(self, *, allow_additional_properties: bool = False) -> None:
        self.allow_additional_properties = allow_additional_properties
        self.properties: dict[str, Schema] = {}
        self.required: list[str] = []
        self.groups: dict[str, list[str]] = {}

    def add(
        self,
        name: str,
        node: Schema,
        *,
        required: bool = False,
        group: str | None = None,
    ) -> None:
        if name in self.properties:
            raise MalformedAnnotation(f"duplicate property name {name!r}")
        self.properties[name] = node
        if group is not None:
            self.groups.setdefault(group, []).append(name)
        elif required:
            self.required.append(name)

    def build(self) -> Schema:
        one_of = [
            Schema(title=group, required=list(names))
            for group, names in self.groups.items()
        ]
        return Schema(
            type="object",
            properties=dict(self.properties),
            required=list(self.required) or None,
            additional_properties=self.allow_additional_properties,
            one_of=one_of or None,
        )
