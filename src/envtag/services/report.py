"""BindReport — serialisable summary of one bind pass for the CLI.

Mirrors the bound record as a flat list of annotated fields keyed by
dotted path, next to the structured errors from the ErrorCollection.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from pydantic import BaseModel, Field

from envtag.domain.duration import Duration
from envtag.domain.errors import BindError
from envtag.domain.policy import parse_directive
from envtag.services.records import is_record, iter_fields, record_type_of
from envtag.services.result import Aggregation, ErrorCollection


class ErrorEntry(BaseModel):
    """Structured error payload within a BindReport."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_error(cls, error: BindError) -> ErrorEntry:
        return cls(code=error.code, message=error.message, detail=error.detail)


class FieldEntry(BaseModel):
    """Current value of one annotated leaf field."""

    model_config = {"frozen": True}

    path: str
    key: str
    value: Any = None


class BindReport(BaseModel):
    """Outcome of binding one record.

    Attributes:
        ok: True when no field failed.
        record: Record type name.
        policy: Aggregation policy used for the pass.
        fields: Annotated leaf fields with their values after binding.
        errors: One entry per collected error.
    """

    model_config = {"frozen": True}

    ok: bool
    record: str
    policy: Aggregation
    fields: list[FieldEntry] = Field(default_factory=list)
    errors: list[ErrorEntry] = Field(default_factory=list)


def _display(value: Any) -> Any:
    if isinstance(value, Duration):
        return str(value)
    if isinstance(value, timedelta):
        return str(value)
    if isinstance(value, list):
        return [_display(item) for item in value]
    return value


def snapshot(record: Any, *, prefix: str = "") -> list[FieldEntry]:
    """List the annotated leaf fields of *record* with their current values."""
    entries: list[FieldEntry] = []
    for spec in iter_fields(record):
        path = f"{prefix}{spec.name}"
        value = getattr(record, spec.name, None)
        if record_type_of(spec.annotation) is not None:
            if is_record(value):
                entries.extend(snapshot(value, prefix=f"{path}."))
            continue
        policy = parse_directive(spec.directive)
        if policy is None or not policy.key:
            continue
        entries.append(FieldEntry(path=path, key=policy.key, value=_display(value)))
    return entries


def build_report(record: Any, errors: ErrorCollection) -> BindReport:
    return BindReport(
        ok=errors.ok,
        record=type(record).__name__,
        policy=errors.policy,
        fields=snapshot(record),
        errors=[ErrorEntry.from_error(e) for e in errors],
    )
