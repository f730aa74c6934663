"""ErrorCollection — the return contract of :func:`envtag.bind`.

INVARIANT: binding never raises for field-level problems.  Callers get an
ErrorCollection and decide for themselves whether a non-empty one is
fatal, typically via :meth:`ErrorCollection.raise_for_errors`.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import overload

from envtag.domain.errors import BindError


class Aggregation(StrEnum):
    """How a bind pass reacts to field errors."""

    COLLECT_ALL = "collect-all"
    FAIL_FAST = "fail-fast"


@dataclass
class ErrorCollection(Sequence[BindError]):
    """Errors gathered during one bind pass.

    Attributes:
        policy: Aggregation policy that was active for the pass.
        errors: Errors in field declaration order.
    """

    policy: Aggregation = Aggregation.COLLECT_ALL
    errors: list[BindError] = field(default_factory=list)

    @overload
    def __getitem__(self, index: int) -> BindError: ...

    @overload
    def __getitem__(self, index: slice) -> list[BindError]: ...

    def __getitem__(self, index: int | slice) -> BindError | list[BindError]:
        return self.errors[index]

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self) -> Iterator[BindError]:
        return iter(self.errors)

    @property
    def ok(self) -> bool:
        return not self.errors

    def of_type(self, error_type: type[BindError]) -> list[BindError]:
        return [e for e in self.errors if isinstance(e, error_type)]

    def raise_for_errors(self) -> None:
        """Raise an ``ExceptionGroup`` of all errors, if there are any."""
        if self.errors:
            raise ExceptionGroup(f"{len(self.errors)} field(s) failed to bind", list(self.errors))
