"""Field tags and declared-field introspection for record types.

A record is a dataclass or a pydantic model.  Each field may carry string
tags that drive its schema::

    @dataclass
    class User:
        id: int = schema_field(json="id", jsonschema="required")
        name: str = schema_field(jsonschema="minLength=1,maxLength=20")

    class Account(BaseModel):
        owner: User = Field(json_schema_extra=tags(jsonschema="required"))

Tags on dataclass fields live in ``field.metadata``; on pydantic fields in
``json_schema_extra``.  A pydantic ``alias`` stands in for the ``json`` tag
and ``description`` for ``jsonschema_description`` when those are unset.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, get_origin, get_type_hints

from pydantic import BaseModel

from schema_reflect.errors import UnsupportedType

TAG_JSON = "json"
TAG_YAML = "yaml"
TAG_JSONSCHEMA = "jsonschema"
TAG_DESCRIPTION = "jsonschema_description"
TAG_EXTRAS = "jsonschema_extras"
TAG_EMBED = "embed"


def tags(
    *,
    json: str | None = None,
    yaml: str | None = None,
    jsonschema: str | None = None,
    description: str | None = None,
    extras: str | None = None,
    embed: bool = False,
) -> dict[str, Any]:
    """Build a field tag mapping, leaving out unset tags."""
    values: dict[str, Any] = {
        TAG_JSON: json,
        TAG_YAML: yaml,
        TAG_JSONSCHEMA: jsonschema,
        TAG_DESCRIPTION: description,
        TAG_EXTRAS: extras,
    }
    result = {key: value for key, value in values.items() if value is not None}
    if embed:
        result[TAG_EMBED] = True
    return result


def schema_field(
    *,
    default: Any = dataclasses.MISSING,
    default_factory: Any = dataclasses.MISSING,
    json: str | None = None,
    yaml: str | None = None,
    jsonschema: str | None = None,
    description: str | None = None,
    extras: str | None = None,
    embed: bool = False,
) -> Any:
    """``dataclasses.field`` carrying schema tags in its metadata."""
    return dataclasses.field(
        default=default,
        default_factory=default_factory,
        metadata=tags(
            json=json,
            yaml=yaml,
            jsonschema=jsonschema,
            description=description,
            extras=extras,
            embed=embed,
        ),
    )


@dataclass(frozen=True)
class FieldDecl:
    """One field as declared on a record, before any flattening."""

    attr: str
    annotation: Any
    tags: dict[str, Any]

    @property
    def embedded(self) -> bool:
        return bool(self.tags.get(TAG_EMBED))

    @property
    def public(self) -> bool:
        return not self.attr.startswith("_")


def is_record(tp: Any) -> bool:
    if not isinstance(tp, type) or get_origin(tp) is not None:
        return False
    if dataclasses.is_dataclass(tp):
        return True
    return issubclass(tp, BaseModel) and tp is not BaseModel


def declared_fields(cls: type) -> list[FieldDecl]:
    """Fields of a record class in declaration order, inherited ones first."""
    if issubclass(cls, BaseModel):
        return [_pydantic_field(name, info) for name, info in cls.model_fields.items()]

    try:
        hints = get_type_hints(cls, include_extras=True)
    except (NameError, TypeError) as exc:
        raise UnsupportedType(
            f"cannot resolve field annotations: {exc}", type_name=cls.__name__
        ) from exc
    return [
        FieldDecl(
            attr=f.name,
            annotation=hints.get(f.name, f.type),
            tags=dict(f.metadata),
        )
        for f in dataclasses.fields(cls)
    ]


def _pydantic_field(name: str, info: Any) -> FieldDecl:
    extra = info.json_schema_extra
    field_tags = dict(extra) if isinstance(extra, dict) else {}
    if info.alias and TAG_JSON not in field_tags:
        field_tags[TAG_JSON] = info.alias
    if info.description and TAG_DESCRIPTION not in field_tags:
        field_tags[TAG_DESCRIPTION] = info.description
    return FieldDecl(attr=name, annotation=info.annotation, tags=field_tags)
