"""Conversion registry — semantic kind to parse/validate capabilities.

Each supported kind registers one :class:`Converter`.  The binder looks
converters up by field annotation at bind time, so adding a type means
registering an entry rather than adding a branch to the binder::

    registry = build_default_registry()
    registry.register(
        Converter(kind="path", parse=Path, skip_empty=True),
        python_types=(Path,),
    )

All ``parse`` functions take the raw environment string and raise
``ValueError`` on malformed input.
"""

from __future__ import annotations

import math
import re
import struct
import types
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import timedelta
from functools import partial
from typing import Annotated, Any, Union, get_args, get_origin

from envtag.domain.duration import Duration
from envtag.domain.types import INT_WIDTHS, UINT_WIDTHS, Kind

LIST_SEP = ","

_SIGNED = re.compile(r"[+-]?[0-9]+")
_UNSIGNED = re.compile(r"[0-9]+")
_DECIMAL_FLOAT = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)
_HEX_FLOAT = re.compile(r"[+-]?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)[pP][+-]?[0-9]+")

_BOOL_VALUES: dict[str, bool] = {
    "1": True,
    "t": True,
    "T": True,
    "TRUE": True,
    "true": True,
    "True": True,
    "0": False,
    "f": False,
    "F": False,
    "FALSE": False,
    "false": False,
    "False": False,
}


# ── Scalar grammars ──────────────────────────────────────────────────


def parse_int(text: str, bits: int = 64) -> int:
    """Parse a base-10 signed integer that fits in *bits* bits."""
    if not _SIGNED.fullmatch(text):
        raise ValueError(f"invalid syntax {text!r}")
    value = int(text)
    limit = 1 << (bits - 1)
    if not -limit <= value < limit:
        raise ValueError(f"{text!r} out of range for int{bits}")
    return value


def parse_uint(text: str, bits: int = 64) -> int:
    """Parse a base-10 unsigned integer that fits in *bits* bits."""
    if not _UNSIGNED.fullmatch(text):
        raise ValueError(f"invalid syntax {text!r}")
    value = int(text)
    if value >= 1 << bits:
        raise ValueError(f"{text!r} out of range for uint{bits}")
    return value


def parse_bool(text: str) -> bool:
    try:
        return _BOOL_VALUES[text]
    except KeyError:
        raise ValueError(f"invalid syntax {text!r}") from None


def parse_float(text: str, bits: int = 64) -> float:
    """Parse a decimal, hex (``0x1p-2``) or ``inf``/``nan`` float literal.

    Finite literals that overflow the target width are rejected. 32-bit
    values are rounded to single precision.
    """
    if _HEX_FLOAT.fullmatch(text):
        value = float.fromhex(text)
    elif _DECIMAL_FLOAT.fullmatch(text):
        value = float(text)
    else:
        raise ValueError(f"invalid syntax {text!r}")

    literal_inf = "inf" in text.lower()
    if math.isinf(value) and not literal_inf:
        raise ValueError(f"{text!r} out of range for float{bits}")
    if bits == 32:
        try:
            value = struct.unpack("f", struct.pack("f", value))[0]
        except OverflowError:
            raise ValueError(f"{text!r} out of range for float32") from None
    return value


def parse_length(text: str) -> int:
    """Parse a length bound (string length, list element count)."""
    return parse_int(text, 64)


def parse_timedelta(text: str, *, bare_seconds: bool = False) -> timedelta:
    return Duration.parse(text, bare_seconds=bare_seconds).to_timedelta()


def _identity(value: Any) -> Any:
    return value


# ── Converter + registry ─────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class Converter:
    """Capabilities for one semantic kind.

    Attributes:
        kind: Registry key (a :class:`Kind` value or a custom string).
        parse: Raw string to native value.
        parse_bound: Parses ``min``/``max`` directive values. None means
            bounds are ignored for this kind.
        measure: Maps a parsed value to the quantity compared with bounds.
        skip_empty: Leave the field untouched when the raw string is empty.
        list_element: Whether ``list[...]`` of this kind is supported.
    """

    kind: str
    parse: Callable[[str], Any]
    parse_bound: Callable[[str], Any] | None = None
    measure: Callable[[Any], Any] = _identity
    skip_empty: bool = True
    list_element: bool = False


class ElementConversionError(ValueError):
    """One element of a list value failed its scalar conversion."""

    def __init__(self, raw: str, kind: str, reason: str) -> None:
        super().__init__(reason)
        self.raw = raw
        self.kind = kind


class ConverterRegistry:
    """Maps semantic kinds and Python types to converters."""

    def __init__(self) -> None:
        self._by_kind: dict[str, Converter] = {}
        self._by_type: dict[type, str] = {}

    def register(self, converter: Converter, *, python_types: Iterable[type] = ()) -> None:
        """Register *converter* and map *python_types* to its kind.

        Raises:
            ValueError: If another converter already owns the kind or a type.
        """
        existing = self._by_kind.get(converter.kind)
        if existing is not None and existing != converter:
            raise ValueError(f"converter conflict for kind {converter.kind!r}; already registered")
        for tp in python_types:
            owner = self._by_type.get(tp)
            if owner is not None and owner != converter.kind:
                raise ValueError(f"type {tp.__name__} is already mapped to kind {owner!r}")

        self._by_kind[converter.kind] = converter
        for tp in python_types:
            self._by_type[tp] = converter.kind

    def get(self, kind: str) -> Converter:
        """Return the converter registered for *kind*.

        Raises:
            KeyError: If *kind* is not registered.
        """
        try:
            return self._by_kind[kind]
        except KeyError:
            raise KeyError(f"no converter registered for kind {kind!r}") from None

    def kinds(self) -> list[str]:
        return sorted(self._by_kind)

    def python_types(self, kind: str) -> list[type]:
        return [tp for tp, owner in self._by_type.items() if owner == kind]

    def list_of(self, element: Converter) -> Converter:
        """Build the converter for ``list[element]``.

        The raw string is split on commas and every element goes through
        *element*'s scalar rule; the first failing element aborts the list.
        Bounds apply to the element count.
        """

        def parse(raw: str) -> list[Any]:
            values = []
            for item in raw.split(LIST_SEP):
                try:
                    values.append(element.parse(item))
                except ValueError as exc:
                    raise ElementConversionError(item, element.kind, str(exc)) from exc
            return values

        return Converter(
            kind=f"{Kind.LIST}[{element.kind}]",
            parse=parse,
            parse_bound=parse_length,
            measure=len,
        )

    def resolve(self, annotation: Any) -> Converter | None:
        """Find the converter for a field annotation, or None if unsupported."""
        base, markers = unwrap_annotation(annotation)

        if base is list or get_origin(base) is list:
            args = get_args(base)
            if len(args) != 1:
                return None
            element = self.resolve(args[0])
            if element is None or not element.list_element:
                return None
            return self.list_of(element)

        kind_markers = [m for m in markers if isinstance(m, Kind)]
        if kind_markers:
            return self._by_kind.get(kind_markers[-1])

        if isinstance(base, type) and get_origin(base) is None:
            kind = self._by_type.get(base)
            if kind is not None:
                return self._by_kind[kind]
        return None


def unwrap_annotation(annotation: Any) -> tuple[Any, list[Any]]:
    """Strip ``Annotated`` layers and ``X | None`` down to the declared type.

    Returns the bare type and the collected ``Annotated`` metadata,
    innermost first.
    """
    markers: list[Any] = []
    while True:
        origin = get_origin(annotation)
        if origin is Annotated:
            markers[:0] = annotation.__metadata__
            annotation = get_args(annotation)[0]
            continue
        if origin is Union or origin is types.UnionType:
            args = get_args(annotation)
            rest = [a for a in args if a is not type(None)]
            if len(rest) == 1 and len(args) == 2:
                annotation = rest[0]
                continue
        return annotation, markers


def describe_annotation(annotation: Any) -> str:
    """Short human-readable name for an annotation, e.g. ``list[Duration]``."""
    base, _ = unwrap_annotation(annotation)
    origin = get_origin(base)
    if origin is not None:
        args = ", ".join(describe_annotation(arg) for arg in get_args(base))
        name = getattr(origin, "__name__", None) or repr(origin).replace("typing.", "")
        return f"{name}[{args}]" if args else name
    return getattr(base, "__name__", None) or repr(base).replace("typing.", "")


def build_default_registry() -> ConverterRegistry:
    """Registry with every built-in kind."""
    registry = ConverterRegistry()
    registry.register(
        Converter(
            kind=Kind.STRING,
            parse=str,
            parse_bound=parse_length,
            measure=len,
            skip_empty=False,
            list_element=True,
        ),
        python_types=(str,),
    )
    for kind, bits in INT_WIDTHS.items():
        parse = partial(parse_int, bits=bits)
        registry.register(
            Converter(kind=kind, parse=parse, parse_bound=parse, list_element=True),
            python_types=(int,) if kind is Kind.INT else (),
        )
    for kind, bits in UINT_WIDTHS.items():
        parse = partial(parse_uint, bits=bits)
        registry.register(Converter(kind=kind, parse=parse, parse_bound=parse, list_element=True))
    registry.register(
        Converter(kind=Kind.BOOL, parse=parse_bool, list_element=True),
        python_types=(bool,),
    )
    for kind, bits in ((Kind.FLOAT32, 32), (Kind.FLOAT64, 64)):
        parse = partial(parse_float, bits=bits)
        registry.register(
            Converter(kind=kind, parse=parse, parse_bound=parse, list_element=True),
            python_types=(float,) if kind is Kind.FLOAT64 else (),
        )
    registry.register(
        Converter(
            kind=Kind.DURATION,
            parse=partial(Duration.parse, bare_seconds=True),
            parse_bound=Duration.parse,
        ),
        python_types=(Duration,),
    )
    registry.register(
        Converter(
            kind=Kind.TIMEDELTA,
            parse=partial(parse_timedelta, bare_seconds=True),
            parse_bound=parse_timedelta,
        ),
        python_types=(timedelta,),
    )
    return registry
