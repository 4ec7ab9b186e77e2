"""
Error kinds raised by the comparison core and its repositories.

The HTTP layer maps them to responses in main.py:
InvalidInput -> 400, RepositoryUnavailable -> 503, MalformedRecord -> 500.
"""

from typing import Any, Optional


class GroceryCompareError(Exception):
    """Base class for all application errors."""


class InvalidInput(GroceryCompareError):
    """Caller supplied malformed list items or an invalid max distance."""


class RepositoryUnavailable(GroceryCompareError):
    """A store or price repository failed as a whole."""


class MalformedRecord(GroceryCompareError):
    """A raw storage record could not be mapped to a typed record."""

    def __init__(self, message: str, record: Optional[Any] = None):
        super().__init__(message)
        self.record = record
