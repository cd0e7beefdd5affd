"""Tests for per-key Result types."""

from __future__ import annotations

import pytest

from taskboard_service.core.dataloader import (
    Err,
    KeyNotFoundError,
    NotFound,
    Ok,
    results_from_mapping,
    to_result,
)


class TestResultVariants:
    def test_ok_unwraps_to_value(self) -> None:
        result = Ok("alice")
        assert result.is_ok
        assert result.unwrap() == "alice"
        assert result.value_or("default") == "alice"

    def test_not_found_uses_default_and_raises_on_unwrap(self) -> None:
        result = NotFound(7)
        assert not result.is_ok
        assert result.value_or("default") == "default"
        with pytest.raises(KeyNotFoundError) as exc_info:
            result.unwrap()
        assert exc_info.value.key == 7
        assert isinstance(exc_info.value, LookupError)

    def test_err_never_falls_back_to_default(self) -> None:
        error = RuntimeError("boom")
        result = Err(error)
        assert not result.is_ok
        with pytest.raises(RuntimeError):
            result.value_or(None)
        with pytest.raises(RuntimeError):
            result.unwrap()

    def test_results_support_pattern_matching(self) -> None:
        match Ok(3):
            case Ok(value=value):
                matched = value
            case _:
                matched = None
        assert matched == 3


class TestToResult:
    @pytest.mark.parametrize(
        ("item", "expected"),
        [
            ("value", Ok("value")),
            (0, Ok(0)),
            ([], Ok([])),
            (None, NotFound("k")),
        ],
    )
    def test_coerces_plain_items(self, item: object, expected: object) -> None:
        assert to_result("k", item) == expected

    def test_passes_results_through(self) -> None:
        result = Err(ValueError("x"))
        assert to_result("k", result) is result

    def test_wraps_exceptions(self) -> None:
        error = ValueError("bad")
        assert to_result("k", error) == Err(error)


def test_results_from_mapping_aligns_with_keys() -> None:
    results = results_from_mapping([3, 1, 2], {1: "a", 3: "c"})

    assert results == [Ok("c"), Ok("a"), NotFound(2)]
