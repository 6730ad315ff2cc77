"""Two-branch result type threaded through the dispatch pipeline.

``Ok`` carries a success value, ``Err`` a failure value. Both expose the same
small combinator surface so pipeline steps can be chained without branching
at every call site:

- ``map(fn)`` transforms the ``Ok`` value, ``Err`` passes through untouched.
- ``map_err(fn)`` is the mirror image for ``Err``.
- ``bimap(on_err, on_ok)`` applies the matching function.
- ``fold(on_err, on_ok)`` collapses either branch into a plain value.

Instances are frozen; combinators always return new objects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

__all__ = ["Ok", "Err", "Result"]

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def map(self, fn: Callable[[T], Any]) -> "Ok[Any]":
        return Ok(fn(self.value))

    def map_err(self, fn: Callable[[Any], Any]) -> "Ok[T]":
        return self

    def bimap(self, on_err: Callable[[Any], Any], on_ok: Callable[[T], Any]) -> "Ok[Any]":
        return Ok(on_ok(self.value))

    def fold(self, on_err: Callable[[Any], Any], on_ok: Callable[[T], Any]) -> Any:
        return on_ok(self.value)


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    def is_ok(self) -> bool:
        return False

    def map(self, fn: Callable[[Any], Any]) -> "Err[E]":
        return self

    def map_err(self, fn: Callable[[E], Any]) -> "Err[Any]":
        return Err(fn(self.error))

    def bimap(self, on_err: Callable[[E], Any], on_ok: Callable[[Any], Any]) -> "Err[Any]":
        return Err(on_err(self.error))

    def fold(self, on_err: Callable[[E], Any], on_ok: Callable[[Any], Any]) -> Any:
        return on_err(self.error)


Result = Union[Ok[T], Err[E]]
