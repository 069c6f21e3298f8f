"""
Ok/Err values returned by the analysis engine.

A run either produces a PageGraph or a single AnalysisError; callers
branch on is_ok()/is_err() instead of catching exceptions from the core.
"""

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A completed run and its value."""
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> NoReturn:
        raise ValueError(f"Expected an error, run succeeded with {self.value!r}")


@dataclass(frozen=True)
class Err(Generic[E]):
    """A failed run and the error describing it."""
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise ValueError(f"Expected a value, run failed with {self.error}")

    def unwrap_err(self) -> E:
        return self.error


Result = Union[Ok[T], Err[E]]
