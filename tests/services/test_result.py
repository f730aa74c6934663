"""Tests for ErrorCollection and the aggregation policy."""

import pytest

from envtag.domain.errors import MissingRequiredError, UnsupportedTypeError
from envtag.services.result import Aggregation, ErrorCollection


class TestErrorCollection:
    def test_empty_is_ok_and_falsy(self) -> None:
        errors = ErrorCollection()
        assert errors.ok
        assert not errors
        assert len(errors) == 0
        assert errors.policy is Aggregation.COLLECT_ALL
        errors.raise_for_errors()

    def test_sequence_protocol(self) -> None:
        first = MissingRequiredError("A")
        second = UnsupportedTypeError("set", "f", "B")
        errors = ErrorCollection(errors=[first, second])
        assert errors
        assert not errors.ok
        assert errors[0] is first
        assert list(errors) == [first, second]
        assert second in errors

    def test_index_and_slice(self) -> None:
        first = MissingRequiredError("A")
        second = MissingRequiredError("B")
        errors = ErrorCollection(errors=[first, second])
        assert errors[-1] is second
        assert errors[1:] == [second]
        assert errors[:] == [first, second]

    def test_of_type(self) -> None:
        errors = ErrorCollection(errors=[MissingRequiredError("A"), UnsupportedTypeError("set", "f", "B")])
        assert [e.key for e in errors.of_type(MissingRequiredError)] == ["A"]

    def test_raise_for_errors(self) -> None:
        first = MissingRequiredError("A")
        errors = ErrorCollection(policy=Aggregation.FAIL_FAST, errors=[first])
        with pytest.raises(ExceptionGroup) as exc_info:
            errors.raise_for_errors()
        assert exc_info.value.exceptions == (first,)
        assert "1 field(s)" in str(exc_info.value)

    def test_policy_values(self) -> None:
        assert Aggregation("collect-all") is Aggregation.COLLECT_ALL
        assert Aggregation("fail-fast") is Aggregation.FAIL_FAST
