"""Error taxonomy for record binding.

:class:`PreconditionError` is raised: it marks a programming error in the
caller (binding something that is not a record instance).  Every
:class:`BindError` is collected instead, so one bad field never stops its
siblings from being bound.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class EnvtagError(Exception):
    """Root of all envtag errors."""


class PreconditionError(EnvtagError, TypeError):
    """The bind target is not a record instance."""


class Bound(StrEnum):
    MIN = "min"
    MAX = "max"


class BindError(EnvtagError):
    """A recoverable failure on one field (or one unassignable record).

    Attributes:
        code: Stable machine-readable identifier.
        field: Dotted field path, or None when the error is not tied to a field.
        key: Environment key from the field's directive, if any.
    """

    code = "BIND_ERROR"

    def __init__(self, message: str, *, field: str | None = None, key: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.key = key

    @property
    def detail(self) -> dict[str, Any]:
        """Structured payload for JSON output."""
        return {"field": self.field, "key": self.key}


class UnassignableError(BindError):
    code = "UNASSIGNABLE"

    def __init__(self, record_type: str, *, field: str | None = None) -> None:
        super().__init__(f"Unassignable record: {record_type} is frozen", field=field)
        self.record_type = record_type

    @property
    def detail(self) -> dict[str, Any]:
        return {**super().detail, "record_type": self.record_type}


class MissingRequiredError(BindError):
    code = "MISSING_REQUIRED"

    def __init__(self, key: str, *, field: str | None = None) -> None:
        super().__init__(f"Required env parameter {key} not filled", field=field, key=key)


class ConversionFailedError(BindError):
    code = "CONVERSION_FAILED"

    def __init__(
        self,
        field: str,
        raw: str,
        target_type: str,
        *,
        key: str | None = None,
        reason: str = "",
    ) -> None:
        message = f"Cannot convert {raw!r} to {target_type} for field {field}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, field=field, key=key)
        self.raw = raw
        self.target_type = target_type
        self.reason = reason

    @property
    def detail(self) -> dict[str, Any]:
        return {**super().detail, "raw": self.raw, "target_type": self.target_type}


class UnsupportedTypeError(BindError):
    code = "UNSUPPORTED_TYPE"

    def __init__(self, kind: str, field: str, key: str) -> None:
        super().__init__(f"Unsupported type: {kind}, field: {field}, env: {key}", field=field, key=key)
        self.kind = kind

    @property
    def detail(self) -> dict[str, Any]:
        return {**super().detail, "kind": self.kind}


class OutOfRangeError(BindError):
    code = "OUT_OF_RANGE"

    def __init__(self, field: str, key: str, value: Any, bound: Bound, bound_value: Any) -> None:
        relation = "below" if bound is Bound.MIN else "above"
        super().__init__(
            f"Value {value} of field {field} (env {key}) is {relation} {bound} {bound_value}",
            field=field,
            key=key,
        )
        self.value = value
        self.bound = bound
        self.bound_value = bound_value

    @property
    def detail(self) -> dict[str, Any]:
        return {
            **super().detail,
            "value": str(self.value),
            "bound": str(self.bound),
            "bound_value": str(self.bound_value),
        }
