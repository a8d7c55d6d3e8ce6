"""Result values returned across component boundaries.

``Ok`` carries a value, ``NotFound`` marks a legitimate absence (for example a
section that does not exist), and ``Failed`` marks an upstream error. Callers
branch with ``isinstance`` or ``match``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful result."""

    value: T


@dataclass(frozen=True)
class NotFound:
    """The requested thing does not exist. Not an error."""

    what: str = ""


@dataclass(frozen=True)
class Failed:
    """The operation failed upstream."""

    reason: str


Result = Union[Ok[T], NotFound, Failed]
