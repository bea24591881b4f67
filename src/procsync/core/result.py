"""
Result - Explicit success/failure values for best-effort operations.

Per-unit sync steps return ``Ok(value)`` or ``Err(reason)`` instead of
raising, so the orchestrator can collect failures as warnings and keep
going. Fatal conditions are still raised as exceptions.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, Generic, TypeVar


T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


class Result(Generic[T, E]):
    """Base for ``Ok`` and ``Err``."""

    __slots__ = ()

    def is_ok(self) -> bool:
        raise NotImplementedError

    def is_err(self) -> bool:
        return not self.is_ok()

    def ok(self) -> T | None:
        raise NotImplementedError

    def err(self) -> E | None:
        raise NotImplementedError

    def unwrap(self) -> T:
        raise NotImplementedError

    def unwrap_or(self, default: T) -> T:
        return self.unwrap() if self.is_ok() else default

    def map(self, fn: Callable[[T], U]) -> Result[U, E]:
        raise NotImplementedError

    def and_then(self, fn: Callable[[T], Result[U, E]]) -> Result[U, E]:
        raise NotImplementedError

    def __bool__(self) -> bool:
        return self.is_ok()

    @staticmethod
    def collect_all(results: Iterable[Result[Any, E]]) -> Result[list[Any], list[E]]:
        """Combine results, gathering every error instead of stopping at the first."""
        values: list[Any] = []
        errors: list[E] = []
        for result in results:
            if result.is_ok():
                values.append(result.unwrap())
            else:
                errors.append(result.err())  # type: ignore[arg-type]
        if errors:
            return Err(errors)
        return Ok(values)


class Ok(Result[T, E]):
    """Successful result holding a value."""

    __slots__ = ("_value",)

    def __init__(self, value: T) -> None:
        self._value = value

    def is_ok(self) -> bool:
        return True

    def ok(self) -> T:
        return self._value

    def err(self) -> None:
        return None

    def unwrap(self) -> T:
        return self._value

    def map(self, fn: Callable[[T], U]) -> Result[U, E]:
        return Ok(fn(self._value))

    def and_then(self, fn: Callable[[T], Result[U, E]]) -> Result[U, E]:
        return fn(self._value)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Ok) and other._value == self._value

    def __hash__(self) -> int:
        return hash(("Ok", self._value))

    def __repr__(self) -> str:
        return f"Ok({self._value!r})"


class Err(Result[T, E]):
    """Failed result holding an error value."""

    __slots__ = ("_error",)

    def __init__(self, error: E) -> None:
        self._error = error

    def is_ok(self) -> bool:
        return False

    def ok(self) -> None:
        return None

    def err(self) -> E:
        return self._error

    def unwrap(self) -> T:
        raise ValueError(f"Called unwrap on Err: {self._error!r}")

    def map(self, fn: Callable[[T], U]) -> Result[U, E]:
        return Err(self._error)

    def and_then(self, fn: Callable[[T], Result[U, E]]) -> Result[U, E]:
        return Err(self._error)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Err) and other._error == self._error

    def __hash__(self) -> int:
        return hash(("Err", self._error))

    def __repr__(self) -> str:
        return f"Err({self._error!r})"


__all__ = ["Err", "Ok", "Result"]
