"""Definition registry -- one per reflect call.

Each record class moves through two states: unseen, then registered.  The
first ``resolve`` reserves the definition name before the walker recurses
into the class, so a self-referential or mutually-referential class gets a
``$ref`` back instead of being walked again.
"""

from __future__ import annotations

from schema_reflect.models import Schema


class DefinitionRegistry:
    """Maps record classes to their emitted definition names."""

    def __init__(self) -> None:
        self._names: dict[type, str] = {}
        self._schemas: dict[type, Schema] = {}
        self._references: dict[type, int] = {}

    def resolve(self, cls: type) -> tuple[Schema, bool]:
        """Return ``($ref node, is_new)`` for ``cls``.

        ``is_new`` tells the caller it must walk the class and ``define`` it.
        Distinct classes sharing a ``__name__`` share one definition name.
        """
        name = self._names.get(cls)
        if name is not None:
            self._references[cls] += 1
            return Schema.reference(name), False
        name = cls.__name__
        self._names[cls] = name
        self._references[cls] = 0
        return Schema.reference(name), True

    def define(self, cls: type, schema: Schema) -> None:
        if cls not in self._names:
            raise KeyError(f"{cls.__name__} was never reserved")
        self._schemas[cls] = schema

    def was_referenced(self, cls: type) -> bool:
        return self._references.get(cls, 0) > 0

    def definitions(self) -> dict[str, Schema]:
        """Filled definitions in reservation order."""
        return {
            self._names[cls]: self._schemas[cls]
            for cls in self._names
            if cls in self._schemas
        }
