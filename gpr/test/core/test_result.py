"""Tests for gpr.core.result module."""

import pytest

from gpr.core.result import Err, Ok, Result, is_err, is_ok


class TestOk:
    """Tests for Ok type."""

    def test_ok_is_ok(self) -> None:
        """Ok.is_ok() returns True."""
        assert Ok(42).is_ok() is True
        assert Ok(42).is_err() is False

    def test_ok_unwrap(self) -> None:
        """Ok.unwrap() and unwrap_or() return the value."""
        assert Ok(42).unwrap() == 42
        assert Ok(42).unwrap_or(0) == 42

    def test_ok_map(self) -> None:
        """Ok.map() transforms the value; map_err leaves it alone."""
        assert Ok(21).map(lambda x: x * 2) == Ok(42)
        assert Ok(42).map_err(lambda e: f"error: {e}") == Ok(42)

    def test_ok_repr(self) -> None:
        """Ok has readable repr."""
        assert repr(Ok("abc")) == "Ok('abc')"

    def test_ok_frozen(self) -> None:
        """Ok is immutable."""
        result = Ok(42)
        with pytest.raises(AttributeError):
            result.value = 0  # type: ignore[misc]


class TestErr:
    """Tests for Err type."""

    def test_err_is_err(self) -> None:
        """Err.is_err() returns True."""
        assert Err("boom").is_err() is True
        assert Err("boom").is_ok() is False

    def test_err_unwrap_raises(self) -> None:
        """Err.unwrap() raises ValueError carrying the error."""
        with pytest.raises(ValueError, match="called unwrap on Err: boom"):
            Err("boom").unwrap()

    def test_err_unwrap_or(self) -> None:
        """Err.unwrap_or() returns the default."""
        assert Err("boom").unwrap_or(7) == 7

    def test_err_map(self) -> None:
        """Err.map() is a no-op; map_err() transforms the error."""
        assert Err("boom").map(lambda x: x * 2) == Err("boom")
        assert Err("boom").map_err(str.upper) == Err("BOOM")

    def test_err_repr(self) -> None:
        """Err has readable repr."""
        assert repr(Err(404)) == "Err(404)"


class TestTypeGuards:
    """Tests for is_ok / is_err helpers."""

    def test_guards(self) -> None:
        """Guards distinguish Ok from Err."""
        ok: Result[int, str] = Ok(1)
        err: Result[int, str] = Err("x")
        assert is_ok(ok) and not is_err(ok)
        assert is_err(err) and not is_ok(err)

    def test_pattern_matching(self) -> None:
        """Results support structural pattern matching."""
        result: Result[int, str] = Err("nope")
        match result:
            case Ok(value):
                pytest.fail(f"unexpected Ok({value})")
            case Err(error):
                assert error == "nope"
