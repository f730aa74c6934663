"""Duration values — signed 64-bit nanosecond counts with a unit grammar.

Text grammar: ``[-+]?([0-9]*(\\.[0-9]*)?unit)+`` where unit is one of
``ns us µs μs ms s m h``.  ``0`` needs no unit.  With ``bare_seconds``
a bare canonical integer such as ``30`` is read as seconds; field values
accept that form, ``min``/``max`` bounds do not.

Examples:
    >>> parse_duration("1h30m")
    5400000000000
    >>> format_duration(parse_duration("90s"))
    '1m30s'
"""

from __future__ import annotations

import re
from datetime import timedelta
from typing import Any

from pydantic_core import core_schema

NANOSECOND = 1
MICROSECOND = 1000 * NANOSECOND
MILLISECOND = 1000 * MICROSECOND
SECOND = 1000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE

MAX_NANOSECONDS = (1 << 63) - 1

UNITS: dict[str, int] = {
    "ns": NANOSECOND,
    "us": MICROSECOND,
    "µs": MICROSECOND,  # micro sign
    "μs": MICROSECOND,  # greek mu
    "ms": MILLISECOND,
    "s": SECOND,
    "m": MINUTE,
    "h": HOUR,
}

_COMPONENT = re.compile(r"(?P<int>[0-9]*)(?:\.(?P<frac>[0-9]*))?(?P<unit>[^0-9.]*)")
_BARE_SECONDS = re.compile(r"0|-?[1-9][0-9]*")


def parse_duration(text: str, *, bare_seconds: bool = False) -> int:
    """Parse *text* into a count of nanoseconds.

    Args:
        text: Duration text, e.g. ``"1h30m"``.
        bare_seconds: Also accept a bare integer as a number of seconds.

    Raises:
        ValueError: If the text does not match the grammar or the result
            does not fit in a signed 64-bit integer.
    """
    if bare_seconds and _BARE_SECONDS.fullmatch(text):
        text += "s"

    rest = text
    negative = False
    if rest[:1] in ("-", "+"):
        negative = rest[0] == "-"
        rest = rest[1:]
    if rest == "0":
        return 0
    if not rest:
        raise ValueError(f"invalid duration {text!r}")

    total = 0
    pos = 0
    while pos < len(rest):
        match = _COMPONENT.match(rest, pos)
        # The pattern can match an empty string, so guard against no progress.
        if match is None or match.end() == pos:
            raise ValueError(f"invalid duration {text!r}")
        whole, frac, unit = match.group("int"), match.group("frac"), match.group("unit")
        if not whole and not frac:
            raise ValueError(f"invalid duration {text!r}")
        if not unit:
            raise ValueError(f"missing unit in duration {text!r}")
        scale = UNITS.get(unit)
        if scale is None:
            raise ValueError(f"unknown unit {unit!r} in duration {text!r}")

        value = int(whole or "0") * scale
        if frac:
            value += int(frac) * scale // 10 ** len(frac)
        total += value
        if total > MAX_NANOSECONDS + 1:
            raise ValueError(f"invalid duration {text!r}: overflow")
        pos = match.end()

    if negative:
        return -total
    if total > MAX_NANOSECONDS:
        raise ValueError(f"invalid duration {text!r}: overflow")
    return total


def _decimal(value: int, places: int) -> str:
    """Render ``value / 10**places`` without trailing fractional zeros."""
    whole, frac = divmod(value, 10**places)
    digits = str(frac).rjust(places, "0").rstrip("0")
    return f"{whole}.{digits}" if digits else str(whole)


def format_duration(nanoseconds: int) -> str:
    """Render a nanosecond count the way it would be written in the grammar.

    Examples:
        >>> format_duration(0)
        '0s'
        >>> format_duration(3_600_000_000_000)
        '1h0m0s'
        >>> format_duration(1_500_000)
        '1.5ms'
    """
    if nanoseconds == 0:
        return "0s"
    sign = "-" if nanoseconds < 0 else ""
    magnitude = abs(nanoseconds)

    if magnitude < MICROSECOND:
        return f"{sign}{magnitude}ns"
    if magnitude < MILLISECOND:
        return f"{sign}{_decimal(magnitude, 3)}µs"
    if magnitude < SECOND:
        return f"{sign}{_decimal(magnitude, 6)}ms"

    seconds, remainder = divmod(magnitude, SECOND)
    text = _decimal((seconds % 60) * SECOND + remainder, 9) + "s"
    minutes = seconds // 60
    if minutes:
        text = f"{minutes % 60}m{text}"
        hours = minutes // 60
        if hours:
            text = f"{hours}h{text}"
    return sign + text


class Duration(int):
    """Nanosecond count usable as a record field type.

    Arithmetic falls back to plain ``int``; wrap the result again when the
    duration formatting is wanted.
    """

    @classmethod
    def parse(cls, text: str, *, bare_seconds: bool = False) -> Duration:
        return cls(parse_duration(text, bare_seconds=bare_seconds))

    def to_timedelta(self) -> timedelta:
        # Truncate toward zero, so -1ns is a zero timedelta rather than -1µs.
        micros = abs(int(self)) // MICROSECOND
        return timedelta(microseconds=-micros if self < 0 else micros)

    def __str__(self) -> str:
        return format_duration(self)

    def __repr__(self) -> str:
        return f"Duration({format_duration(self)!r})"

    @classmethod
    def __get_pydantic_core_schema__(cls, source: Any, handler: Any) -> core_schema.CoreSchema:
        """Let pydantic models declare ``Duration`` fields."""
        return core_schema.no_info_after_validator_function(cls, core_schema.int_schema())
