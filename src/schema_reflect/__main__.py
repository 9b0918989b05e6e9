"""CLI entry point: python -m schema_reflect module:Type."""

from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path
from typing import Any

from schema_reflect.codec import to_json, to_yaml, write_schema
from schema_reflect.errors import ReflectionError
from schema_reflect.reflector import Reflector


def load_type(target: str) -> Any:
    """Import ``package.module:Qualified.Name`` and return the object."""
    module_name, sep, qualname = target.partition(":")
    if not sep or not module_name or not qualname:
        raise ValueError(f"Expected module:Type, got {target!r}")
    obj: Any = importlib.import_module(module_name)
    for part in qualname.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise ValueError(f"{module_name} has no attribute {qualname!r}") from None
    return obj


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="schema-reflect",
        description="Generate a JSON Schema document from a Python type",
    )
    parser.add_argument("type", help="Type to reflect, as module:Type")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write to this path (.json, .yaml or .yml) instead of stdout",
    )
    parser.add_argument(
        "--format", choices=["json", "yaml"], default="json", help="Stdout format"
    )
    parser.add_argument("--expand-root", action="store_true", default=False)
    parser.add_argument(
        "--annotation-only",
        action="store_true",
        default=False,
        help="Take required-ness only from the required flag",
    )
    parser.add_argument("--allow-additional", action="store_true", default=False)
    args = parser.parse_args(argv)

    reflector = Reflector(
        required_from_annotation_only=args.annotation_only,
        allow_additional_properties=args.allow_additional,
        expand_root_inline=args.expand_root,
    )
    try:
        schema = reflector.reflect(load_type(args.type))
    except (ImportError, ValueError, ReflectionError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.output is not None:
        path = write_schema(schema, args.output)
        print(f"Wrote schema to {path}")
    elif args.format == "yaml":
        print(to_yaml(schema), end="")
    else:
        print(to_json(schema))


if __name__ == "__main__":
    main()
