"""Result type for explicit error handling in domain and storage operations.

A Result is either ``Ok(value)`` or ``Err(error)``. Tree validation and file
I/O report expected failures this way instead of raising, so callers can
decide whether a failure is fatal for the operation at hand.

Example usage:
    >>> def parse_priority(raw: int) -> Result[int, str]:
    ...     if not 1 <= raw <= 5:
    ...         return Err(f"Focus priority out of range: {raw}")
    ...     return Ok(raw)
    ...
    >>> result = parse_priority(3)
    >>> if isinstance(result, Ok):
    ...     print(result.value)
    3
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A successful result.

    Attributes:
        value: The success value of type T.
    """

    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """A failed result.

    Attributes:
        error: The error value of type E, usually a message string.
    """

    error: E


# Using Union here as TypeVar aliases don't work with | syntax at runtime
Result = Union[Ok[T], Err[E]]  # noqa: UP007


def flat_map(result: Ok[T] | Err[E], fn: Callable[[T], Ok[U] | Err[E]]) -> Ok[U] | Err[E]:
    """Chain operations that return Results.

    Used to go from raw JSON to validated models in one step: load the
    document, then validate what was loaded.

    Returns:
        The Result from applying fn, or the original Err.
    """
    if isinstance(result, Ok):
        return fn(result.value)
    return result
