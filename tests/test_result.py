# tests/test_result.py

from __future__ import annotations

import pytest

from taskledger.domain.shared import Err, NotFoundError, Ok, is_err, is_ok, map_result, unwrap


def test_map_result() -> None:
    assert map_result(Ok(2), lambda v: v * 10) == Ok(20)
    failed = Err("nope")
    assert map_result(failed, lambda v: v * 10) is failed


def test_predicates() -> None:
    assert is_ok(Ok(1)) and not is_err(Ok(1))
    assert is_err(Err("x")) and not is_ok(Err("x"))


def test_unwrap_raises_contained_error() -> None:
    assert unwrap(Ok("value")) == "value"
    with pytest.raises(NotFoundError):
        unwrap(Err(NotFoundError("task", 3)))
    with pytest.raises(ValueError):
        unwrap(Err("plain string"))
