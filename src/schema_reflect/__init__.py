"""schema-reflect -- JSON Schema documents derived from Python types.

Records (dataclasses and pydantic models) are walked field by field; string
tags on each field add constraints, required-ness and ``oneOf`` groups.

Public API::

    from schema_reflect import Reflector, reflect, schema_field, tags
    from schema_reflect.codec import to_json, write_schema
"""

from schema_reflect.errors import (
    MalformedAnnotation,
    OverrideRejected,
    ReflectionError,
    UnsupportedType,
)
from schema_reflect.fields import schema_field, tags
from schema_reflect.models import SCHEMA_VERSION, Schema
from schema_reflect.reflector import Reflector, reflect

__all__ = [
    "MalformedAnnotation",
    "OverrideRejected",
    "ReflectionError",
    "Reflector",
    "SCHEMA_VERSION",
    "Schema",
    "UnsupportedType",
    "reflect",
    "schema_field",
    "tags",
]
__version__ = "0.1.0"
