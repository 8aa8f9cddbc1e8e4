"""In-memory usage counter — implements the UsageCounter port."""

from __future__ import annotations

from datetime import datetime, timezone

from repo_grader.domain.ports.usage_counter import UsageStats


class InMemoryUsageCounter:
    """Process-local, best-effort tally; resets on restart."""

    def __init__(self) -> None:
        self._total = 0
        self._score_sum = 0
        self._last_updated: datetime | None = None

    def record(self, score: int) -> None:
        self._total += 1
        self._score_sum += score
        self._last_updated = datetime.now(timezone.utc)

    def stats(self) -> UsageStats:
        average = self._score_sum / self._total if self._total else 0.0
        return UsageStats(
            total_analyses=self._total,
            average_score=round(average, 1),
            last_updated=self._last_updated,
        )
