"""Pause policies between Google Tasks creation calls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class PacingPolicy(Protocol):
    """Decides how long to pause after a creation attempt."""

    def wait(self, attempt_index: int) -> float:
        """Seconds to pause after attempt number ``attempt_index`` (0-based)."""
        ...


@dataclass(frozen=True)
class FixedPacing:
    """Same pause after every attempt, regardless of how it went.

    ``FixedPacing(0)`` disables pausing.
    """

    seconds: float = 0.5

    def wait(self, attempt_index: int) -> float:
        return self.seconds
