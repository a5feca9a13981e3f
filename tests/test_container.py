"""Tests for container wiring."""

import asyncio

from food_health.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.health_report_service is not None
    assert container.quality_score_service.report_service is (
        container.health_report_service
    )
    asyncio.run(container.close_resources())


def test_build_container_bounds_report_cache(settings) -> None:
    container = build_container(
        settings.model_copy(update={"report_cache_max_entries": 5})
    )
    assert container.health_report_service.cache.max_entries == 5
    asyncio.run(container.close_resources())
