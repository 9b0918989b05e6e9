"""Tests for field annotation parsing."""

from __future__ import annotations

import pytest

from schema_reflect.annotations import (
    FieldAnnotations,
    parse_annotations,
    parse_extras,
    parse_name_tag,
    split_tokens,
)
from schema_reflect.errors import MalformedAnnotation


class TestSplitTokens:
    def test_empty(self):
        assert split_tokens(None) == []
        assert split_tokens("") == []

    def test_skips_empty_tokens(self):
        assert split_tokens("required,,minLength=1,") == ["required", "minLength=1"]

    def test_escaped_comma_stays_in_value(self):
        assert split_tokens(r"pattern=a\,b,required") == ["pattern=a,b", "required"]


class TestParseNameTag:
    def test_name_only(self):
        assert parse_name_tag("id") == ("id", frozenset())

    def test_name_with_options(self):
        assert parse_name_tag("friends,omitempty") == ("friends", frozenset({"omitempty"}))

    def test_options_without_name(self):
        assert parse_name_tag(",omitempty") == (None, frozenset({"omitempty"}))

    def test_missing(self):
        assert parse_name_tag(None) == (None, frozenset())


class TestParseAnnotations:
    def test_empty_tag(self):
        assert parse_annotations(None) == FieldAnnotations()

    def test_required_flag(self):
        assert parse_annotations("required").required is True

    def test_required_false(self):
        assert parse_annotations("required=false").required is False

    def test_ignore_marker_wins(self):
        ann = parse_annotations("-,required,minLength=nope")
        assert ann.ignored is True
        assert ann.required is False

    def test_string_bounds(self):
        ann = parse_annotations("minLength=1,maxLength=20,pattern=^[a-z]+$,format=email")
        assert ann.min_length == 1
        assert ann.max_length == 20
        assert ann.pattern == "^[a-z]+$"
        assert ann.format == "email"

    def test_value_may_contain_equals(self):
        assert parse_annotations("default=a=b").default == "a=b"

    def test_numeric_bounds_keep_integers(self):
        ann = parse_annotations("minimum=18,maximum=120.5,multipleOf=2")
        assert ann.minimum == 18
        assert isinstance(ann.minimum, int)
        assert ann.maximum == 120.5
        assert ann.multiple_of == 2

    def test_exclusive_bounds(self):
        ann = parse_annotations("exclusiveMinimum=true,exclusiveMaximum")
        assert ann.exclusive_minimum is True
        assert ann.exclusive_maximum is True

    def test_array_bounds(self):
        ann = parse_annotations("minItems=1,maxItems=3,uniqueItems")
        assert (ann.min_items, ann.max_items, ann.unique_items) == (1, 3, True)

    def test_enum_accumulates_in_order_with_duplicates(self):
        ann = parse_annotations("enum=b,enum=a,enum=b")
        assert ann.enum == ["b", "a", "b"]

    def test_examples_accumulate(self):
        ann = parse_annotations("example=joe,example=lucy,example=joe")
        assert ann.examples == ["joe", "lucy", "joe"]

    def test_generic_text_keys(self):
        ann = parse_annotations("title=the name,description=a property,default=alex")
        assert ann.title == "the name"
        assert ann.description == "a property"
        assert ann.default == "alex"

    def test_secondary_description(self):
        ann = parse_annotations("required", description="from the description tag")
        assert ann.description == "from the description tag"

    def test_inline_description_beats_secondary(self):
        ann = parse_annotations("description=inline", description="secondary")
        assert ann.description == "inline"

    def test_oneof_required(self):
        assert parse_annotations("oneof_required=group1").oneof_required == "group1"

    def test_oneof_types(self):
        ann = parse_annotations("oneof_type=string;array")
        assert ann.oneof_types == ["string", "array"]

    def test_extras_passed_through(self):
        ann = parse_annotations(None, extras="foo=bar,hello=world")
        assert ann.extras == {"foo": "bar", "hello": "world"}

    @pytest.mark.parametrize(
        "raw, message",
        [
            ("minLength=abc", "minLength expects an integer"),
            ("maxItems=-1", "must not be negative"),
            ("minimum=ten", "minimum expects a number"),
            ("maximum=inf", "must be finite"),
            ("exclusiveMinimum=yes", "expects true or false"),
            ("requried", "unknown annotation flag"),
            ("minlength=1", "unknown annotation key"),
            ("oneof_required=", "needs a group name"),
            ("oneof_type=string;widget", "not a JSON Schema type"),
            ("oneof_type=;", "at least one type"),
        ],
    )
    def test_rejects_malformed(self, raw: str, message: str):
        with pytest.raises(MalformedAnnotation, match=message):
            parse_annotations(raw)


class TestParseExtras:
    def test_keeps_order(self):
        assert list(parse_extras("b=1,a=2")) == ["b", "a"]

    def test_rejects_bare_token(self):
        with pytest.raises(MalformedAnnotation, match="key=value"):
            parse_extras("foo")
