"""Port: usage counter — notified after each completed assessment."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass(frozen=True, slots=True)
class UsageStats:
    total_analyses: int
    average_score: float
    last_updated: datetime | None


class UsageCounter(Protocol):
    """Best-effort tally of completed assessments."""

    def record(self, score: int) -> None:
        """Count one finished assessment with the given score."""
        ...

    def stats(self) -> UsageStats:
        ...
