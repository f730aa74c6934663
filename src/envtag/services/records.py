"""Record introspection — dataclasses and pydantic models.

A record is an instance of a dataclass or of a ``pydantic.BaseModel``
subclass.  This module lists its fields in declaration order together
with their annotations and ``env`` directives, and tells nested records
apart from leaf fields.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Annotated, Any, get_origin, get_type_hints

from pydantic import BaseModel

from envtag.domain.policy import ENV_TAG, Env
from envtag.services.converters import unwrap_annotation


@dataclass(frozen=True, slots=True)
class RecordField:
    """One declared field of a record type."""

    name: str
    annotation: Any
    directive: str | None


def is_record_type(tp: Any) -> bool:
    """True for dataclass types and pydantic model types."""
    if not isinstance(tp, type) or get_origin(tp) is not None:
        return False
    return dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel)


def is_record(obj: Any) -> bool:
    """True for dataclass and pydantic model *instances* (not classes)."""
    return not isinstance(obj, type) and is_record_type(type(obj))


def is_frozen(record: Any) -> bool:
    cls = type(record)
    if isinstance(record, BaseModel):
        return bool(cls.model_config.get("frozen", False))
    params = getattr(cls, "__dataclass_params__", None)
    return bool(params is not None and params.frozen)


def record_type_of(annotation: Any) -> type | None:
    """Return the record type a field annotation declares, if any."""
    base, _ = unwrap_annotation(annotation)
    return base if is_record_type(base) else None


def _directive_from(markers: list[Any], metadata: Any = None) -> str | None:
    envs = [m.directive for m in markers if isinstance(m, Env)]
    if envs:
        return envs[-1]
    if metadata:
        return metadata.get(ENV_TAG)
    return None


def iter_fields(record: Any) -> Iterator[RecordField]:
    """Yield the fields of *record* in declaration order."""
    cls = type(record)

    if isinstance(record, BaseModel):
        for name, info in cls.model_fields.items():
            annotation = info.annotation
            if info.metadata:
                annotation = Annotated[(annotation, *info.metadata)]
            _, markers = unwrap_annotation(annotation)
            yield RecordField(name, annotation, _directive_from(markers))
        return

    hints = get_type_hints(cls, include_extras=True)
    for f in dataclasses.fields(record):
        annotation = hints.get(f.name, f.type)
        _, markers = unwrap_annotation(annotation)
        yield RecordField(f.name, annotation, _directive_from(markers, f.metadata))
