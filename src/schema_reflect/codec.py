"""JSON / YAML encoding of schema documents.  Not used by the engine."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from schema_reflect.models import Schema

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = {".yaml", ".yml"}


def to_json(schema: Schema, *, indent: int | None = 2) -> str:
    return json.dumps(schema.to_dict(), indent=indent, ensure_ascii=False)


def from_json(text: str) -> Schema:
    return _from_mapping(json.loads(text), "JSON")


def to_yaml(schema: Schema) -> str:
    return yaml.safe_dump(schema.to_dict(), sort_keys=False, allow_unicode=True)


def from_yaml(text: str) -> Schema:
    return _from_mapping(yaml.safe_load(text), "YAML")


def write_schema(schema: Schema, path: str | Path) -> Path:
    """Write a schema as JSON or YAML depending on the file suffix."""
    path = Path(path)
    if path.suffix in _YAML_SUFFIXES:
        text = to_yaml(schema)
    else:
        text = to_json(schema) + "\n"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    logger.info("Wrote schema to %s", path)
    return path


def read_schema(path: str | Path) -> Schema:
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    logger.debug("Read schema from %s", path)
    if path.suffix in _YAML_SUFFIXES:
        return from_yaml(text)
    return from_json(text)


def _from_mapping(data: Any, label: str) -> Schema:
    if data is None:
        raise ValueError(f"Empty schema {label}")
    if not isinstance(data, dict):
        raise ValueError(f"Schema {label} root must be a mapping")
    return Schema.model_validate(data)
