"""Shared domain utilities for focustree.

Example usage:
    >>> from focustree.domain.shared import Ok, Err, Result
    >>>
    >>> def find_todo(todo_id: int) -> Result[dict, str]:
    ...     if todo_id < 0:
    ...         return Err("Todo not found")
    ...     return Ok({"id": todo_id, "text": "Example"})
"""

from focustree.domain.shared.result import Err, Ok, Result, flat_map

__all__ = [
    "Ok",
    "Err",
    "Result",
    "flat_map",
]
