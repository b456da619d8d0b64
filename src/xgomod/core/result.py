"""
Result Type Implementation.

A small Ok/Err result type used where failures are collected rather than
raised: every directive handler returns a Result, and the manifest parser
folds them into a statement list plus an error list.
"""

from dataclasses import dataclass
from typing import Generic, Iterable, List, Tuple, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Represents a successful computation."""
    value: T


@dataclass(frozen=True)
class Err(Generic[E]):
    """Represents a failed computation."""
    error: E


Result = Union[Ok[T], Err[E]]


def partition(results: Iterable[Result[T, E]]) -> Tuple[List[T], List[E]]:
    """Split results into (values, errors), preserving order within each."""
    values: List[T] = []
    errors: List[E] = []
    for result in results:
        if isinstance(result, Ok):
            values.append(result.value)
        else:
            errors.append(result.error)
    return values, errors
