"""Field annotation parsing.

The ``jsonschema`` tag is a comma separated list of ``key`` or
``key=value`` tokens::

    "required,minLength=1,maxLength=20,pattern=.*,enum=a,enum=b"

A backslash escapes a literal comma inside a value (``pattern=a\\,b``).
Unknown keys and unparseable values raise :class:`MalformedAnnotation` so
that a typo never silently drops a constraint.  The ``jsonschema_extras``
tag holds ``key=value`` pairs that are copied verbatim into the schema.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field

from schema_reflect.errors import MalformedAnnotation
from schema_reflect.models import PRIMITIVE_TYPES

IGNORE_MARKER = "-"

_TOKEN_SPLIT = re.compile(r"(?<!\\),")

_INT_KEYS = {
    "minLength": "min_length",
    "maxLength": "max_length",
    "minItems": "min_items",
    "maxItems": "max_items",
}
_NUMBER_KEYS = {
    "minimum": "minimum",
    "maximum": "maximum",
    "multipleOf": "multiple_of",
}
_BOOL_KEYS = {
    "required": "required",
    "exclusiveMinimum": "exclusive_minimum",
    "exclusiveMaximum": "exclusive_maximum",
    "uniqueItems": "unique_items",
}
_TEXT_KEYS = {
    "pattern": "pattern",
    "format": "format",
    "title": "title",
    "description": "description",
    "default": "default",
}


@dataclass(frozen=True)
class FieldAnnotations:
    """Parsed view of one field's tags."""

    ignored: bool = False
    required: bool = False
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    format: str | None = None
    title: str | None = None
    description: str | None = None
    default: str | None = None
    minimum: int | float | None = None
    maximum: int | float | None = None
    exclusive_minimum: bool | None = None
    exclusive_maximum: bool | None = None
    multiple_of: int | float | None = None
    min_items: int | None = None
    max_items: int | None = None
    unique_items: bool | None = None
    enum: list[str] = field(default_factory=list)
    examples: list[str] = field(default_factory=list)
    extras: dict[str, str] = field(default_factory=dict)
    oneof_required: str | None = None
    oneof_types: list[str] = field(default_factory=list)


IGNORED = FieldAnnotations(ignored=True)


def split_tokens(raw: str | None) -> list[str]:
    """Split a tag on unescaped commas, dropping empty tokens."""
    if not raw:
        return []
    tokens = []
    for token in _TOKEN_SPLIT.split(raw):
        token = token.replace("\\,", ",").strip()
        if token:
            tokens.append(token)
    return tokens


def parse_name_tag(tag: str | None) -> tuple[str | None, frozenset[str]]:
    """Split a ``json``/``yaml`` tag into output name and options.

    ``"id,omitempty"`` -> ``("id", {"omitempty"})``; an empty name means the
    attribute name is kept.
    """
    if not tag:
        return None, frozenset()
    name, _, rest = tag.partition(",")
    options = frozenset(opt.strip() for opt in rest.split(",") if opt.strip())
    return (name.strip() or None), options


def parse_annotations(
    raw: str | None,
    *,
    description: str | None = None,
    extras: str | None = None,
) -> FieldAnnotations:
    """Parse the ``jsonschema`` tag plus the secondary description and extras."""
    tokens = split_tokens(raw)
    if IGNORE_MARKER in tokens:
        return IGNORED

    values: dict[str, object] = {}
    enum: list[str] = []
    examples: list[str] = []
    oneof_types: list[str] = []

    for token in tokens:
        key, sep, value = token.partition("=")
        key = key.strip()
        if not sep:
            if key in _BOOL_KEYS:
                values[_BOOL_KEYS[key]] = True
                continue
            raise MalformedAnnotation(f"unknown annotation flag {key!r}")

        if key in _INT_KEYS:
            values[_INT_KEYS[key]] = _parse_int(key, value)
        elif key in _NUMBER_KEYS:
            values[_NUMBER_KEYS[key]] = _parse_number(key, value)
        elif key in _BOOL_KEYS:
            values[_BOOL_KEYS[key]] = _parse_bool(key, value)
        elif key in _TEXT_KEYS:
            values[_TEXT_KEYS[key]] = value
        elif key == "enum":
            enum.append(value)
        elif key == "example":
            examples.append(value)
        elif key == "oneof_required":
            if not value:
                raise MalformedAnnotation("oneof_required needs a group name")
            values["oneof_required"] = value
        elif key == "oneof_type":
            oneof_types = _parse_oneof_types(value)
        else:
            raise MalformedAnnotation(f"unknown annotation key {key!r}")

    if description and "description" not in values:
        values["description"] = description

    return FieldAnnotations(
        enum=enum,
        examples=examples,
        extras=parse_extras(extras),
        oneof_types=oneof_types,
        **values,  # type: ignore[arg-type]
    )


def parse_extras(raw: str | None) -> dict[str, str]:
    """Parse ``jsonschema_extras`` into an ordered keyword mapping."""
    result: dict[str, str] = {}
    for token in split_tokens(raw):
        key, sep, value = token.partition("=")
        key = key.strip()
        if not sep or not key:
            raise MalformedAnnotation(
                f"extras entry {token!r} must have the form key=value"
            )
        result[key] = value
    return result


def _parse_int(key: str, value: str) -> int:
    try:
        parsed = int(value.strip())
    except ValueError:
        raise MalformedAnnotation(
            f"{key} expects an integer, got {value!r}"
        ) from None
    if parsed < 0:
        raise MalformedAnnotation(f"{key} must not be negative, got {value!r}")
    return parsed


def _parse_number(key: str, value: str) -> int | float:
    text = value.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        parsed = float(text)
    except ValueError:
        raise MalformedAnnotation(f"{key} expects a number, got {value!r}") from None
    if not math.isfinite(parsed):
        raise MalformedAnnotation(f"{key} must be finite, got {value!r}")
    return parsed


def _parse_bool(key: str, value: str) -> bool:
    text = value.strip().lower()
    if text == "true":
        return True
    if text == "false":
        return False
    raise MalformedAnnotation(f"{key} expects true or false, got {value!r}")


def _parse_oneof_types(value: str) -> list[str]:
    names = [name.strip() for name in value.split(";") if name.strip()]
    if not names:
        raise MalformedAnnotation("oneof_type needs at least one type name")
    for name in names:
        if name not in PRIMITIVE_TYPES:
            raise MalformedAnnotation(
                f"oneof_type {name!r} is not a JSON Schema type"
            )
    return names
