"""Field directives — the ``env`` annotation grammar.

A directive is a comma-separated token list::

    KEY[,required][,defVal:<value>][,min:<value>][,max:<value>]

Token 0 is the environment key.  Modifiers after the key may appear in any
order; the first occurrence of each prefix wins and unknown tokens are
ignored.  Tokens are compared byte-for-byte, nothing is trimmed.

Directives attach to fields either through ``Annotated``::

    port: Annotated[int, Env("PORT,defVal:8080,min:1")] = 0

or, on dataclasses, through field metadata::

    port: int = field(default=0, metadata={"env": "PORT,defVal:8080"})
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel

ENV_TAG = "env"
REQUIRED = "required"
DEFAULT_PREFIX = "defVal"
MIN_PREFIX = "min"
MAX_PREFIX = "max"
PREFIX_SEP = ":"
TOKEN_SEP = ","


@dataclass(frozen=True, slots=True)
class Env:
    """``Annotated`` marker carrying a raw directive string."""

    directive: str


class FieldPolicy(BaseModel):
    """Binding directives for one field, derived once from its annotation.

    Attributes:
        key: Environment variable name. Empty means the field is skipped.
        required: Fail when the variable is absent and there is no default.
        default: Fallback used when the variable is absent.
        min: Lower bound, parsed with the field's own grammar at bind time.
        max: Upper bound, same rules as *min*.
    """

    model_config = {"frozen": True}

    key: str
    required: bool = False
    default: str | None = None
    min: str | None = None
    max: str | None = None

    @property
    def has_bounds(self) -> bool:
        return bool(self.min or self.max)


def tokenize(directive: str) -> list[str]:
    """Split a directive into raw tokens."""
    return directive.split(TOKEN_SEP)


def match_prefix(token: str, prefix: str) -> str | None:
    """Return the value of ``prefix:value`` tokens, or None if *token* has another prefix.

    Examples:
        >>> match_prefix("defVal:5", "defVal")
        '5'
        >>> match_prefix("defVal:", "defVal")
        ''
        >>> match_prefix("default:5", "defVal") is None
        True
    """
    head = prefix + PREFIX_SEP
    if token.startswith(head):
        return token[len(head) :]
    return None


def parse_directive(directive: str | None) -> FieldPolicy | None:
    """Turn a raw directive into a :class:`FieldPolicy`.

    Returns None for a missing or empty directive, meaning the field is
    left untouched.
    """
    if not directive:
        return None

    key, *modifiers = tokenize(directive)
    required = False
    found: dict[str, str] = {}
    for token in modifiers:
        if token == REQUIRED:
            required = True
            continue
        for prefix in (DEFAULT_PREFIX, MIN_PREFIX, MAX_PREFIX):
            value = match_prefix(token, prefix)
            if value is not None:
                found.setdefault(prefix, value)
                break

    return FieldPolicy(
        key=key,
        required=required,
        default=found.get(DEFAULT_PREFIX),
        min=found.get(MIN_PREFIX),
        max=found.get(MAX_PREFIX),
    )
