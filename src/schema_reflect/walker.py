"""Recursive descent over a type expression.

Rules, first match wins:

1. ``Annotated[X, ...]`` is walked as ``X``
2. ignored types are omitted (``None``)
3. the caller's type mapper
4. ``Any`` / ``object`` -> ``{}``
5. unions; ``X | None`` walks ``X``
6. ``NewType`` walks its supertype
7. leaf types (see :mod:`schema_reflect.resolver`)
8. records -> ``$ref`` through the definition registry
9. mappings -> ``object`` with ``patternProperties``
10. sequences and sets -> ``array`` with ``items``

Anything else raises :class:`UnsupportedType`.
"""

from __future__ import annotations

import collections.abc
import types
from dataclasses import dataclass
from typing import Annotated, Any, NewType, TypeVar, Union, get_args, get_origin

from schema_reflect.annotations import (
    IGNORE_MARKER,
    FieldAnnotations,
    parse_annotations,
    parse_name_tag,
)
from schema_reflect.builder import RecordAssembler, apply_annotations
from schema_reflect.errors import MalformedAnnotation, ReflectionError, UnsupportedType
from schema_reflect.fields import (
    TAG_DESCRIPTION,
    TAG_EXTRAS,
    TAG_JSON,
    TAG_JSONSCHEMA,
    TAG_YAML,
    FieldDecl,
    declared_fields,
    is_record,
)
from schema_reflect.models import Schema
from schema_reflect.registry import DefinitionRegistry
from schema_reflect.resolver import TypeMapper, apply_override, resolve_primitive

NoneType = type(None)

OMITEMPTY = "omitempty"

_ARRAY_ORIGINS = (
    collections.abc.Sequence,
    collections.abc.Set,
    collections.deque,
)


@dataclass(frozen=True)
class _Member:
    """A field that survived flattening and ignore rules."""

    name: str
    decl: FieldDecl
    annotations: FieldAnnotations
    options: frozenset[str]
    owner: type


class TypeWalker:
    """Walks types for one reflect call; owns no state beyond the registry."""

    def __init__(
        self,
        registry: DefinitionRegistry,
        *,
        type_mapper: TypeMapper | None = None,
        ignored_types: frozenset[type] = frozenset(),
        required_from_annotation_only: bool = False,
        allow_additional_properties: bool = False,
    ) -> None:
        self.registry = registry
        self.type_mapper = type_mapper
        self.ignored_types = ignored_types
        self.required_from_annotation_only = required_from_annotation_only
        self.allow_additional_properties = allow_additional_properties

    def is_ignored(self, tp: Any) -> bool:
        return isinstance(tp, type) and tp in self.ignored_types

    def walk(self, tp: Any) -> Schema | None:
        """Structural schema for ``tp``; ``None`` when ``tp`` is ignored."""
        tp = _strip_annotated(tp)
        if self.is_ignored(tp):
            return None

        override = apply_override(self.type_mapper, tp)
        if override is not None:
            return override

        if tp is Any or tp is object:
            return Schema()
        if tp is None or tp is NoneType:
            return Schema(type="null")
        if _is_union(tp):
            return self._union(tp)
        if isinstance(tp, NewType):
            return self.walk(tp.__supertype__)
        if isinstance(tp, TypeVar):
            raise UnsupportedType(f"unbound type variable {tp.__name__}")

        leaf = resolve_primitive(tp)
        if leaf is not None:
            return leaf

        if is_record(tp):
            return self._record(tp)

        origin = get_origin(tp) or tp
        if isinstance(origin, type):
            if issubclass(origin, collections.abc.Mapping):
                return self._mapping(tp)
            if issubclass(origin, tuple):
                return self._tuple(tp)
            if issubclass(origin, _ARRAY_ORIGINS):
                return self._array(tp)

        raise UnsupportedType(f"cannot reflect type {_label(tp)}")

    def expand(self, cls: type) -> Schema:
        """Object node for a record's fields, reserving its definition name."""
        self.registry.resolve(cls)
        return self.record_body(cls)

    def record_body(self, cls: type) -> Schema:
        assembler = RecordAssembler(
            allow_additional_properties=self.allow_additional_properties
        )
        for member in self._members(cls, frozenset({cls})):
            try:
                node = self.walk(member.decl.annotation)
                if node is None:
                    continue
                node = apply_annotations(node, member.annotations)
                assembler.add(
                    member.name,
                    node,
                    required=self._is_required(member),
                    group=member.annotations.oneof_required,
                )
            except ReflectionError as exc:
                raise exc.locate(member.owner.__name__, member.decl.attr)
        return assembler.build()

    # -- records ----------------------------------------------------------

    def _record(self, cls: type) -> Schema:
        ref, is_new = self.registry.resolve(cls)
        if is_new:
            self.registry.define(cls, self.record_body(cls))
        return ref

    def _members(self, cls: type, chain: frozenset[type]) -> list[_Member]:
        """Declared fields of ``cls`` with embedded records flattened in place.

        A field declared on ``cls`` wins over an embedded one of the same
        output name; between embedded records the first one wins.
        An embedded field whose type the type mapper overrides stays an
        ordinary property.
        """
        own: list[_Member] = []
        embedded: list[tuple[int, FieldDecl]] = []
        for decl in declared_fields(cls):
            if not decl.public:
                continue
            try:
                member = self._member(cls, decl)
                flatten = (
                    member is not None
                    and decl.embedded
                    and not self._overridden(decl)
                )
            except ReflectionError as exc:
                raise exc.locate(cls.__name__, decl.attr)
            if member is None:
                continue
            if flatten:
                embedded.append((len(own), decl))
            else:
                own.append(member)

        taken = {member.name for member in own}
        inserts: dict[int, list[_Member]] = {}
        for position, decl in embedded:
            inner = _strip_optional(_strip_annotated(decl.annotation))
            if self.is_ignored(inner):
                continue
            if not is_record(inner):
                raise MalformedAnnotation(
                    "embed requires a record type", type_name=cls.__name__, field=decl.attr
                )
            if inner in chain:
                raise UnsupportedType(
                    f"{inner.__name__} embeds itself", type_name=cls.__name__, field=decl.attr
                )
            for member in self._members(inner, chain | {inner}):
                if member.name in taken:
                    continue
                taken.add(member.name)
                inserts.setdefault(position, []).append(member)

        members: list[_Member] = []
        for index in range(len(own) + 1):
            members.extend(inserts.get(index, ()))
            if index < len(own):
                members.append(own[index])
        return members

    def _member(self, cls: type, decl: FieldDecl) -> _Member | None:
        name_tag = decl.tags.get(TAG_JSON)
        if name_tag is None:
            name_tag = decl.tags.get(TAG_YAML)
        if name_tag == IGNORE_MARKER:
            return None
        name, options = parse_name_tag(name_tag)

        annotations = parse_annotations(
            decl.tags.get(TAG_JSONSCHEMA),
            description=decl.tags.get(TAG_DESCRIPTION),
            extras=decl.tags.get(TAG_EXTRAS),
        )
        if annotations.ignored:
            return None
        if decl.embedded and annotations != FieldAnnotations():
            raise MalformedAnnotation("an embedded field cannot carry constraint tags")
        return _Member(
            name=name or decl.attr,
            decl=decl,
            annotations=annotations,
            options=options,
            owner=cls,
        )

    def _overridden(self, decl: FieldDecl) -> bool:
        inner = _strip_optional(_strip_annotated(decl.annotation))
        return apply_override(self.type_mapper, inner) is not None

    def _is_required(self, member: _Member) -> bool:
        if member.annotations.required:
            return True
        if self.required_from_annotation_only:
            return False
        if OMITEMPTY in member.options:
            return False
        return not _is_optional(member.decl.annotation)

    # -- composites -------------------------------------------------------

    def _union(self, tp: Any) -> Schema | None:
        alternatives = [arg for arg in get_args(tp) if arg is not NoneType]
        if not alternatives:
            return Schema(type="null")
        schemas = [s for s in (self.walk(arg) for arg in alternatives) if s is not None]
        if not schemas:
            return None
        if len(schemas) == 1:
            return schemas[0]
        return Schema(one_of=schemas)

    def _mapping(self, tp: Any) -> Schema | None:
        args = get_args(tp)
        value = self.walk(args[1] if len(args) == 2 else Any)
        if value is None:
            return None
        return Schema(type="object", pattern_properties={".*": value})

    def _array(self, tp: Any) -> Schema | None:
        args = get_args(tp)
        items = self.walk(args[0] if args else Any)
        if items is None:
            return None
        return Schema(type="array", items=items)

    def _tuple(self, tp: Any) -> Schema | None:
        args = get_args(tp)
        if not args or (len(args) == 2 and args[1] is Ellipsis):
            return self._array(tp)
        if any(arg != args[0] for arg in args[1:]):
            raise UnsupportedType(
                f"heterogeneous fixed-length tuple {_label(tp)} has no array form"
            )
        items = self.walk(args[0])
        if items is None:
            return None
        return Schema(
            type="array", items=items, min_items=len(args), max_items=len(args)
        )


def _strip_annotated(tp: Any) -> Any:
    while get_origin(tp) is Annotated:
        tp = get_args(tp)[0]
    return tp


def _is_union(tp: Any) -> bool:
    return get_origin(tp) is Union or isinstance(tp, types.UnionType)


def _is_optional(tp: Any) -> bool:
    tp = _strip_annotated(tp)
    return _is_union(tp) and NoneType in get_args(tp)


def _strip_optional(tp: Any) -> Any:
    if not _is_optional(tp):
        return tp
    remaining = [arg for arg in get_args(tp) if arg is not NoneType]
    return remaining[0] if len(remaining) == 1 else tp


def _label(tp: Any) -> str:
    if isinstance(tp, type):
        return tp.__name__
    return repr(tp)
