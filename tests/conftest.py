"""Record types shared by the reflection tests."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from ipaddress import IPv4Address
from typing import Any, Optional

from pydantic import AnyUrl

from schema_reflect import schema_field


@dataclass
class GrandfatherType:
    family_name: str = schema_field(json="family_name", jsonschema="required")


@dataclass
class SomeBaseType:
    some_base_property: int = schema_field(json="some_base_property")
    some_base_property_yaml: int = schema_field(yaml="some_base_property_yaml")
    # Private and ignored fields stay out of the output even when tagged required.
    _private_base_property: str = schema_field(json="i_am_private", jsonschema="required")
    some_ignored_base_property: str = schema_field(json="-", jsonschema="required")
    some_schema_ignored_property: str = schema_field(jsonschema="-,required")
    grandfather: GrandfatherType = schema_field(json="grand")
    some_untagged_base_property: bool = schema_field(jsonschema="required")
    _unexported_untagged: bool = False


@dataclass
class _NonExported:
    public_non_exported: int
    _private_non_exported: int = 0


class ProtoEnum(IntEnum):
    UNSET = 0
    GREAT = 1


@dataclass
class UserRecord:
    base: SomeBaseType = schema_field(embed=True)
    hidden: _NonExported = schema_field(embed=True)

    id: int = schema_field(json="id", jsonschema="required")
    name: str = schema_field(
        json="name",
        jsonschema=(
            "required,minLength=1,maxLength=20,pattern=.*,"
            "description=this is a property,title=the name,"
            "example=joe,example=lucy,default=alex"
        ),
    )
    friends: list[int] = schema_field(
        json="friends,omitempty", description="list of IDs, omitted when empty"
    )
    tags: dict[str, Any] = schema_field(json="tags,omitempty")

    test_flag: bool = schema_field()
    ignored_counter: int = schema_field(json="-")

    birth_date: datetime = schema_field(json="birth_date,omitempty")
    website: AnyUrl = schema_field(json="website,omitempty")
    ip_address: IPv4Address = schema_field(json="network_address,omitempty")

    photo: bytes = schema_field(json="photo,omitempty", jsonschema="required")

    feeling: ProtoEnum = schema_field(json="feeling,omitempty")
    age: int = schema_field(
        json="age",
        jsonschema="minimum=18,maximum=120,exclusiveMaximum=true,exclusiveMinimum=true",
    )
    email: str = schema_field(json="email", jsonschema="format=email")

    baz: str = schema_field(extras="foo=bar,hello=world")

    color: str = schema_field(json="color", jsonschema="enum=red,enum=green,enum=blue")
    rank: int = schema_field(json="rank,omitempty", jsonschema="enum=1,enum=2,enum=3")
    multiplier: float = schema_field(
        json="mult,omitempty", jsonschema="enum=1.0,enum=1.5,enum=2.0"
    )


USER_PROPERTY_ORDER = [
    "some_base_property",
    "some_base_property_yaml",
    "grand",
    "some_untagged_base_property",
    "public_non_exported",
    "id",
    "name",
    "friends",
    "tags",
    "test_flag",
    "birth_date",
    "website",
    "network_address",
    "photo",
    "feeling",
    "age",
    "email",
    "baz",
    "color",
    "rank",
    "mult",
]


def user_properties() -> dict[str, Any]:
    """Expected ``properties`` of the UserRecord definition."""
    return {
        "some_base_property": {"type": "integer"},
        "some_base_property_yaml": {"type": "integer"},
        "grand": {"$ref": "#/definitions/GrandfatherType"},
        "some_untagged_base_property": {"type": "boolean"},
        "public_non_exported": {"type": "integer"},
        "id": {"type": "integer"},
        "name": {
            "type": "string",
            "title": "the name",
            "description": "this is a property",
            "default": "alex",
            "examples": ["joe", "lucy"],
            "minLength": 1,
            "maxLength": 20,
            "pattern": ".*",
        },
        "friends": {
            "type": "array",
            "description": "list of IDs, omitted when empty",
            "items": {"type": "integer"},
        },
        "tags": {"type": "object", "patternProperties": {".*": {}}},
        "test_flag": {"type": "boolean"},
        "birth_date": {"type": "string", "format": "date-time"},
        "website": {"type": "string", "format": "uri"},
        "network_address": {"type": "string", "format": "ipv4"},
        "photo": {"type": "string", "media": {"binaryEncoding": "base64"}},
        "feeling": {"type": "string", "enum": ["UNSET", "GREAT"]},
        "age": {
            "type": "integer",
            "minimum": 18,
            "exclusiveMinimum": True,
            "maximum": 120,
            "exclusiveMaximum": True,
        },
        "email": {"type": "string", "format": "email"},
        "baz": {"type": "string", "foo": "bar", "hello": "world"},
        "color": {"type": "string", "enum": ["red", "green", "blue"]},
        "rank": {"type": "integer", "enum": [1, 2, 3]},
        "mult": {"type": "number", "enum": [1.0, 1.5, 2.0]},
    }


GRANDFATHER_DEFINITION = {
    "type": "object",
    "properties": {"family_name": {"type": "string"}},
    "required": ["family_name"],
    "additionalProperties": False,
}


@dataclass
class ChildOneOf:
    child1: str = schema_field(json="child1", jsonschema="oneof_required=group1")
    child2: str = schema_field(json="child2", jsonschema="oneof_required=group2")
    child3: Any = schema_field(
        json="child3", jsonschema="oneof_required=group2,oneof_type=string;array"
    )
    child4: str = schema_field(json="child4", jsonschema="oneof_required=group1")


@dataclass
class RootOneOf:
    field1: str = schema_field(json="field1", jsonschema="oneof_required=group1")
    field2: str = schema_field(json="field2", jsonschema="oneof_required=group2")
    field3: Any = schema_field(json="field3", jsonschema="oneof_type=string;array")
    field4: str = schema_field(json="field4", jsonschema="oneof_required=group1")
    field5: ChildOneOf = schema_field(json="child")


@dataclass
class TreeNode:
    value: int
    parent: Optional[TreeNode] = None
    children: list[TreeNode] = schema_field(
        json="children,omitempty", default_factory=list
    )


class CustomTime:
    """Stand-in for a type only a type mapper knows how to describe."""


@dataclass
class CustomTypeField:
    created_at: CustomTime = schema_field(json="CreatedAt")
