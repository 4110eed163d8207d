"""Success-or-failure values returned by every core operation."""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed outcome carrying exactly one error value."""

    error: E


Result = Union[Ok[T], Err[E]]


def is_ok(result: "Result") -> bool:
    return isinstance(result, Ok)


def is_err(result: "Result") -> bool:
    return isinstance(result, Err)
