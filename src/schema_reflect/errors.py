"""Reflection errors.

Every error aborts the whole ``reflect`` call.  The walker attaches the
record type and field where the error surfaced so the caller can find the
offending declaration.
"""

from __future__ import annotations


class ReflectionError(Exception):
    """Base class for all schema reflection failures."""

    def __init__(
        self,
        message: str,
        *,
        type_name: str | None = None,
        field: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.type_name = type_name
        self.field = field

    def locate(self, type_name: str, field: str) -> ReflectionError:
        """Attach declaration context unless an inner frame already did."""
        if self.type_name is None:
            self.type_name = type_name
            self.field = field
        return self

    @property
    def location(self) -> str:
        if self.type_name is None:
            return ""
        if self.field is None:
            return self.type_name
        return f"{self.type_name}.{self.field}"

    def __str__(self) -> str:
        location = self.location
        if location:
            return f"{location}: {self.message}"
        return self.message


class MalformedAnnotation(ReflectionError):
    """A field tag has an unknown key or a value that cannot be parsed."""


class UnsupportedType(ReflectionError):
    """A type has no structural shape and no override maps it."""


class OverrideRejected(ReflectionError):
    """Raised by a type mapper that refuses to map a type."""
