"""Report cache passed explicitly to the services that use it."""

import hashlib
import json
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from food_health.domain.health import HealthReport


class ReportCache(Protocol):
    """Cache interface for computed health reports."""

    def get(self, key: str) -> HealthReport | None:
        """Return a cached report if present and not expired."""

    def set(self, key: str, report: HealthReport, ttl_seconds: int) -> None:
        """Store a report with a TTL in seconds."""


@dataclass
class _CacheEntry:
    report: HealthReport
    expires_at: datetime


@dataclass
class InMemoryReportCache(ReportCache):
    """Process-local report cache, bounded to `max_entries` reports."""

    max_entries: int = 1024
    _entries: dict[str, _CacheEntry] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> HealthReport | None:
        """Return a cached report if it hasn't expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if datetime.now(tz=UTC) >= entry.expires_at:
            self._entries.pop(key, None)
            return None
        return entry.report

    def set(self, key: str, report: HealthReport, ttl_seconds: int) -> None:
        """Store a report with a TTL, dropping expired and oldest entries."""
        now = datetime.now(tz=UTC)
        self._purge_expired(now)
        self._entries.pop(key, None)
        while self._entries and len(self._entries) >= self.max_entries:
            # Oldest first.
            self._entries.pop(next(iter(self._entries)))
        self._entries[key] = _CacheEntry(
            report=report, expires_at=now + timedelta(seconds=ttl_seconds)
        )

    def _purge_expired(self, now: datetime) -> None:
        expired = [
            key for key, entry in self._entries.items() if now >= entry.expires_at
        ]
        for key in expired:
            del self._entries[key]


def report_fingerprint(
    raw_nutrition: dict[str, object],
    ingredients_text: str | None,
    grams: float,
    meta: dict[str, object],
    additives: list[str] | None = None,
) -> str:
    """Return a stable key for one set of report inputs."""
    payload = json.dumps(
        {
            "nutrition": raw_nutrition,
            "ingredients": ingredients_text or "",
            "grams": grams,
            "meta": meta,
            "additives": list(additives or []),
        },
        sort_keys=True,
        default=str,
    )
    return "report:" + hashlib.sha256(payload.encode()).hexdigest()
