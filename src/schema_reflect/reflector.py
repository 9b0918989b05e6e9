"""Reflector -- configuration and entry point.

A Reflector is the single object a caller configures.  Each ``reflect``
call builds a fresh definition registry and schema tree, so one Reflector
can be shared across threads as long as its ``type_mapper`` is pure.

Example::

    @dataclass
    class User:
        id: int = schema_field(json="id,omitempty")
        name: str = schema_field(json="name", jsonschema="required,minLength=1")

    schema = Reflector(required_from_annotation_only=True).reflect(User)
    schema.to_dict()
    # {"$schema": "http://json-schema.org/draft-04/schema#",
    #  "$ref": "#/definitions/User",
    #  "definitions": {"User": {"type": "object", ...}}}
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NewType, get_origin

from schema_reflect.errors import UnsupportedType
from schema_reflect.fields import is_record
from schema_reflect.models import SCHEMA_VERSION, Schema
from schema_reflect.registry import DefinitionRegistry
from schema_reflect.resolver import TypeMapper, apply_override
from schema_reflect.walker import TypeWalker


@dataclass(frozen=True)
class Reflector:
    """Options for one family of reflect calls.

    Attributes:
        required_from_annotation_only: Take required-ness only from the
            ``required`` flag of the ``jsonschema`` tag.  When False a field
            is also required if its ``json`` tag lacks ``omitempty`` and its
            type is not optional.
        allow_additional_properties: Emit ``additionalProperties: true`` on
            record nodes instead of ``false``.
        expand_root_inline: Place a record root's properties directly in the
            document instead of behind a ``$ref``.
        ignored_types: Classes omitted from both properties and definitions.
            Any iterable is stored as a frozenset.
        type_mapper: Called with every type before default mapping.  A
            returned Schema or mapping replaces the default handling of the
            type entirely; ``None`` falls back.  Raise
            :class:`~schema_reflect.errors.OverrideRejected` to refuse a type.
    """

    required_from_annotation_only: bool = False
    allow_additional_properties: bool = False
    expand_root_inline: bool = False
    ignored_types: frozenset[type] = frozenset()
    type_mapper: TypeMapper | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "ignored_types", frozenset(self.ignored_types))

    def reflect(self, value: Any) -> Schema:
        """Build the schema document for a type, or for an instance's type."""
        root = root_type(value)
        registry = DefinitionRegistry()
        walker = TypeWalker(
            registry,
            type_mapper=self.type_mapper,
            ignored_types=self.ignored_types,
            required_from_annotation_only=self.required_from_annotation_only,
            allow_additional_properties=self.allow_additional_properties,
        )

        if self._expands(root):
            document = walker.expand(root)
            if registry.was_referenced(root):
                registry.define(root, document.model_copy(deep=True))
        else:
            document = walker.walk(root)
            if document is None:
                raise UnsupportedType(
                    f"root type {getattr(root, '__name__', root)!r} is ignored"
                )

        document.version = SCHEMA_VERSION
        definitions = registry.definitions()
        if definitions:
            document.definitions = definitions
        return document

    def _expands(self, root: Any) -> bool:
        if not self.expand_root_inline or not is_record(root):
            return False
        if root in self.ignored_types:
            return False
        return apply_override(self.type_mapper, root) is None


def root_type(value: Any) -> Any:
    """The type expression to reflect for ``value``."""
    if isinstance(value, type) or value is Any or isinstance(value, NewType):
        return value
    if get_origin(value) is not None:
        return value
    return type(value)


def reflect(value: Any) -> Schema:
    """Reflect with default options."""
    return Reflector().reflect(value)
