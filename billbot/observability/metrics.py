"""In-process metrics collector — no external deps."""

from __future__ import annotations

import time
from collections import defaultdict
from dataclasses import dataclass, field

from billbot.types import EventOutcome


@dataclass
class MetricsCollector:
    webhook_count: int = 0
    event_count: int = 0
    outcome_counts: dict[str, int] = field(default_factory=lambda: defaultdict(int))
    failure_counts: dict[str, int] = field(default_factory=lambda: defaultdict(int))
    _start_time: float = field(default_factory=time.time)

    def record_webhook(self) -> None:
        self.webhook_count += 1

    def record_event(self, outcome: EventOutcome, error: str = "") -> None:
        self.event_count += 1
        self.outcome_counts[outcome.value] += 1
        if error:
            self.failure_counts[error] += 1

    def summary(self) -> dict:
        return {
            "uptime_seconds": int(time.time() - self._start_time),
            "webhooks": self.webhook_count,
            "events": self.event_count,
            "outcomes": dict(self.outcome_counts),
            "failures": dict(self.failure_counts),
        }
