"""Tests for the report cache."""

from food_health.domain.health import CanonicalNutrition, HealthReport
from food_health.services.cache import InMemoryReportCache, report_fingerprint


def _report() -> HealthReport:
    return HealthReport(
        per_100g=CanonicalNutrition(),
        per_serving=CanonicalNutrition(),
        grams=30,
        flags=[],
        score=100,
        score_ten=10,
        stars=5.0,
        rating="Excellent",
    )


def test_cache_returns_stored_report() -> None:
    cache = InMemoryReportCache()
    report = _report()

    cache.set("key", report, ttl_seconds=60)

    assert cache.get("key") is report
    assert cache.get("other") is None


def test_cache_expires_entries() -> None:
    cache = InMemoryReportCache()

    cache.set("key", _report(), ttl_seconds=0)

    assert cache.get("key") is None


def test_cache_drops_expired_entries_on_write() -> None:
    cache = InMemoryReportCache()
    for index in range(1000):
        cache.set(f"k{index}", _report(), ttl_seconds=0)

    cache.set("fresh", _report(), ttl_seconds=60)

    assert len(cache) == 1
    assert cache.get("fresh") is not None


def test_cache_evicts_oldest_when_full() -> None:
    cache = InMemoryReportCache(max_entries=2)

    cache.set("first", _report(), ttl_seconds=60)
    cache.set("second", _report(), ttl_seconds=60)
    cache.set("first", _report(), ttl_seconds=60)
    cache.set("third", _report(), ttl_seconds=60)

    assert len(cache) == 2
    assert cache.get("second") is None
    assert cache.get("first") is not None
    assert cache.get("third") is not None

def test_fingerprint_is_stable_and_input_sensitive() -> None:
    first = report_fingerprint({"b": 1, "a": 2}, "oats", 30, {"name": "x"})
    reordered = report_fingerprint({"a": 2, "b": 1}, "oats", 30, {"name": "x"})
    different = report_fingerprint({"a": 2, "b": 1}, "oats", 45, {"name": "x"})

    assert first == reordered
    assert first != different
    assert first != report_fingerprint(
        {"b": 1, "a": 2}, "oats", 30, {"name": "x"}, ["en:e129"]
    )
    assert first.startswith("report:")
