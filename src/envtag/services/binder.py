"""Field binding — resolve, convert, validate and write env values.

Binding is a single synchronous pass over the record, depth-first and in
declaration order.  Leaf fields go through :class:`FieldBinder`; nested
records are walked recursively.  Field errors are collected as
:class:`~envtag.domain.errors.BindError` instances and never abort sibling
fields unless the fail-fast policy is active.

Usage::

    @dataclass
    class Settings:
        port: Annotated[int, Env("PORT,defVal:8080,min:1,max:65535")] = 0
        hosts: Annotated[list[str], Env("HOSTS,required")] = field(default_factory=list)

    settings = Settings()
    errors = bind(settings)
    errors.raise_for_errors()
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Mapping
from typing import Any, TypeVar

from pydantic import ValidationError

from envtag.domain.errors import (
    BindError,
    Bound,
    ConversionFailedError,
    MissingRequiredError,
    OutOfRangeError,
    PreconditionError,
    UnassignableError,
    UnsupportedTypeError,
)
from envtag.domain.policy import FieldPolicy, parse_directive
from envtag.services.converters import (
    Converter,
    ConverterRegistry,
    ElementConversionError,
    build_default_registry,
    describe_annotation,
)
from envtag.services.records import (
    RecordField,
    is_frozen,
    is_record,
    iter_fields,
    record_type_of,
)
from envtag.services.result import Aggregation, ErrorCollection

logger = logging.getLogger(__name__)

R = TypeVar("R")

_FROZEN_ERRORS = frozenset({"frozen_field", "frozen_instance"})

_default_registry: ConverterRegistry | None = None


def default_registry() -> ConverterRegistry:
    """Shared registry with the built-in kinds (created on first use)."""
    global _default_registry
    if _default_registry is None:
        _default_registry = build_default_registry()
    return _default_registry


class FieldBinder:
    """Binds one leaf field from its policy.

    Values are never logged, only keys and where the value came from.
    """

    def __init__(self, environ: Mapping[str, str], registry: ConverterRegistry) -> None:
        self._environ = environ
        self._registry = registry

    def resolve(self, policy: FieldPolicy, *, field: str | None = None) -> str:
        """Return the raw string for *policy*.

        Environment value first (verbatim, even if empty), then a non-empty
        default, then ``""``.  A default satisfies ``required``.

        Raises:
            MissingRequiredError: Absent, no default, and required.
        """
        raw = self._environ.get(policy.key)
        if raw is not None:
            logger.debug("Resolved %s from environment", policy.key)
            return raw
        if policy.default:
            logger.debug("Resolved %s from default", policy.key)
            return policy.default
        if policy.required:
            raise MissingRequiredError(policy.key, field=field)
        return ""

    def convert(self, converter: Converter, raw: str, *, field: str, key: str) -> Any:
        try:
            return converter.parse(raw)
        except ElementConversionError as exc:
            raise ConversionFailedError(field, exc.raw, exc.kind, key=key, reason=str(exc)) from exc
        except ValueError as exc:
            raise ConversionFailedError(field, raw, converter.kind, key=key, reason=str(exc)) from exc

    def validate(self, converter: Converter, policy: FieldPolicy, value: Any, *, field: str) -> None:
        """Check *value* against the policy's min/max.

        Raises:
            ConversionFailedError: A bound does not parse.
            OutOfRangeError: The measured value falls outside a bound.
        """
        if converter.parse_bound is None or not policy.has_bounds:
            return
        measured = converter.measure(value)
        for bound, text in ((Bound.MIN, policy.min), (Bound.MAX, policy.max)):
            if not text:
                continue
            try:
                limit = converter.parse_bound(text)
            except ValueError as exc:
                raise ConversionFailedError(
                    field, text, f"{bound} bound of {converter.kind}", key=policy.key, reason=str(exc)
                ) from exc
            if (bound is Bound.MIN and measured < limit) or (bound is Bound.MAX and measured > limit):
                raise OutOfRangeError(field, policy.key, measured, bound, limit)

    def bind(self, record: Any, spec: RecordField, policy: FieldPolicy, *, path: str) -> None:
        """Resolve, convert, validate and write one leaf field.

        The field is written only after every step succeeded.

        Raises:
            BindError: Any field-level failure.
        """
        converter = self._registry.resolve(spec.annotation)
        if converter is None:
            raise UnsupportedTypeError(describe_annotation(spec.annotation), path, policy.key)

        raw = self.resolve(policy, field=path)
        if raw == "" and converter.skip_empty:
            logger.debug("Skipped %s: no value for %s", path, policy.key)
            return

        value = self.convert(converter, raw, field=path, key=policy.key)
        self.validate(converter, policy, value, field=path)
        self.assign(record, spec.name, value, path=path, raw=raw, kind=converter.kind, key=policy.key)
        logger.debug("Bound %s (%s) from %s", path, converter.kind, policy.key)

    def assign(self, record: Any, name: str, value: Any, *, path: str, raw: str, kind: str, key: str) -> None:
        """Write *value*, turning a refused assignment into a field error.

        Pydantic models can refuse a write: a ``Field(frozen=True)`` field, or
        a ``validate_assignment`` model whose constraints reject the value.

        Raises:
            UnassignableError: The field is read-only.
            ConversionFailedError: The model rejected the value.
        """
        try:
            setattr(record, name, value)
        except ValidationError as exc:
            if any(e["type"] in _FROZEN_ERRORS for e in exc.errors()):
                raise UnassignableError(type(record).__name__, field=path) from exc
            reason = "; ".join(e["msg"] for e in exc.errors())
            raise ConversionFailedError(path, raw, kind, key=key, reason=reason) from exc
        except AttributeError as exc:
            raise UnassignableError(type(record).__name__, field=path) from exc
        except TypeError as exc:
            raise ConversionFailedError(path, raw, kind, key=key, reason=str(exc)) from exc


class RecordBinder:
    """Walks a record and binds every annotated leaf field.

    Args:
        environ: Key-value source, ``os.environ`` by default.
        registry: Conversion registry, the shared default one if omitted.
        aggregation: Collect every error, or stop at the first one.
    """

    def __init__(
        self,
        *,
        environ: Mapping[str, str] | None = None,
        registry: ConverterRegistry | None = None,
        aggregation: Aggregation = Aggregation.COLLECT_ALL,
    ) -> None:
        self.aggregation = aggregation
        self._fields = FieldBinder(
            os.environ if environ is None else environ,
            registry or default_registry(),
        )

    def bind(self, record: Any) -> ErrorCollection:
        """Populate *record* in place.

        Raises:
            PreconditionError: *record* is not a record instance.
        """
        if not is_record(record):
            what = f"class {record.__name__}" if isinstance(record, type) else type(record).__name__
            raise PreconditionError(
                f"bind() needs a dataclass or pydantic model instance, got {what}"
            )

        result = ErrorCollection(policy=self.aggregation)
        if is_frozen(record):
            result.errors.append(UnassignableError(type(record).__name__))
            return result

        for error in self._walk(record, prefix=""):
            result.errors.append(error)
            if self.aggregation is Aggregation.FAIL_FAST:
                break

        logger.debug(
            "Bound %s: %d error(s), policy=%s", type(record).__name__, len(result), self.aggregation
        )
        return result

    def _walk(self, record: Any, *, prefix: str) -> Iterator[BindError]:
        for spec in iter_fields(record):
            path = f"{prefix}{spec.name}"
            nested_type = record_type_of(spec.annotation)
            if nested_type is not None:
                yield from self._walk_nested(record, spec, nested_type, path=path)
                continue

            policy = parse_directive(spec.directive)
            if policy is None or not policy.key:
                continue
            try:
                self._fields.bind(record, spec, policy, path=path)
            except BindError as exc:
                yield exc

    def _walk_nested(
        self, record: Any, spec: RecordField, nested_type: type, *, path: str
    ) -> Iterator[BindError]:
        nested = getattr(record, spec.name, None)
        if nested is None:
            try:
                nested = nested_type()
            except (TypeError, ValueError):
                policy = parse_directive(spec.directive)
                yield UnsupportedTypeError(nested_type.__name__, path, policy.key if policy else "")
                return
            setattr(record, spec.name, nested)

        if is_frozen(nested):
            yield UnassignableError(nested_type.__name__, field=path)
            return
        yield from self._walk(nested, prefix=f"{path}.")


def bind(
    record: Any,
    *,
    environ: Mapping[str, str] | None = None,
    registry: ConverterRegistry | None = None,
    fail_fast: bool = False,
) -> ErrorCollection:
    """Populate *record*'s annotated fields from the environment.

    Returns every field error (or only the first one with *fail_fast*).

    Raises:
        PreconditionError: *record* is not a dataclass or pydantic model instance.
    """
    aggregation = Aggregation.FAIL_FAST if fail_fast else Aggregation.COLLECT_ALL
    binder = RecordBinder(environ=environ, registry=registry, aggregation=aggregation)
    return binder.bind(record)


def load(
    record_cls: type[R],
    *,
    environ: Mapping[str, str] | None = None,
    registry: ConverterRegistry | None = None,
    fail_fast: bool = False,
) -> R:
    """Instantiate *record_cls* with no arguments and bind it.

    Raises:
        ExceptionGroup: One or more fields failed to bind.
    """
    record = record_cls()
    bind(record, environ=environ, registry=registry, fail_fast=fail_fast).raise_for_errors()
    return record
