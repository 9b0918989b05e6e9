"""Leaf type mapping and the caller-supplied override hook."""

from __future__ import annotations

import datetime
import decimal
import enum
import ipaddress
import uuid
from collections.abc import Mapping
from typing import Any, Callable, Literal, Union, get_args, get_origin
from urllib.parse import ParseResult, SplitResult

from pydantic import AnyUrl

from schema_reflect.errors import OverrideRejected
from schema_reflect.models import Schema

TypeMapper = Callable[[Any], Union[Schema, Mapping[str, Any], None]]

BINARY_MEDIA = {"binaryEncoding": "base64"}

# Checked in order: datetime before date since datetime subclasses date.
_STRING_FORMATS: tuple[tuple[type, str], ...] = (
    (datetime.datetime, "date-time"),
    (datetime.date, "date"),
    (datetime.time, "time"),
    (uuid.UUID, "uuid"),
    (AnyUrl, "uri"),
    (ParseResult, "uri"),
    (SplitResult, "uri"),
    (ipaddress.IPv4Address, "ipv4"),
    (ipaddress.IPv6Address, "ipv6"),
)


def apply_override(mapper: TypeMapper | None, tp: Any) -> Schema | None:
    """Run the type mapper; ``None`` means fall back to default handling."""
    if mapper is None:
        return None
    fragment = mapper(tp)
    if fragment is None:
        return None
    if isinstance(fragment, Schema):
        schema = fragment.model_copy(deep=True)
    elif isinstance(fragment, Mapping):
        schema = Schema.model_validate(dict(fragment))
    else:
        raise OverrideRejected(
            f"type mapper returned {type(fragment).__name__} for {_type_label(tp)}, "
            "expected a Schema or a mapping"
        )
    if schema.is_empty():
        return None
    return schema


def resolve_primitive(tp: Any) -> Schema | None:
    """Schema for a leaf type, or ``None`` if ``tp`` is not a leaf."""
    if get_origin(tp) is Literal:
        return _enum_schema(list(get_args(tp)))
    if not isinstance(tp, type) or get_origin(tp) is not None:
        return None

    if issubclass(tp, enum.IntEnum):
        return Schema(type="string", enum=[member.name for member in tp])
    if issubclass(tp, enum.Enum):
        return _enum_schema([member.value for member in tp])

    # bool before int: bool subclasses int.
    if issubclass(tp, bool):
        return Schema(type="boolean")
    if issubclass(tp, int):
        return Schema(type="integer")
    if issubclass(tp, (float, decimal.Decimal)):
        return Schema(type="number")
    if issubclass(tp, str):
        return Schema(type="string")
    if issubclass(tp, (bytes, bytearray)):
        return Schema(type="string", media=dict(BINARY_MEDIA))

    for base, fmt in _STRING_FORMATS:
        if issubclass(tp, base):
            return Schema(type="string", format=fmt)
    return None


def json_type_of(value: Any) -> str | None:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if value is None:
        return "null"
    return None


def _enum_schema(values: list[Any]) -> Schema:
    kinds = {json_type_of(value) for value in values}
    schema_type = kinds.pop() if len(kinds) == 1 else None
    return Schema(type=schema_type, enum=values)


def _type_label(tp: Any) -> str:
    return getattr(tp, "__name__", None) or repr(tp)
