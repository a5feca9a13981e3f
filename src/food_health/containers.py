"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from food_health.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient
from food_health.adapters.supabase_nutrition_log_repository import (
    SupabaseNutritionLogRepository,
)
from food_health.config import Settings
from food_health.services.cache import InMemoryReportCache
from food_health.services.health_report import HealthReportService
from food_health.services.quality_scores import QualityScoreService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    health_report_service: HealthReportService
    quality_score_service: QualityScoreService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    product_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.off_base_url,
        user_agent=resolved_settings.off_user_agent,
    )
    health_report_service = HealthReportService(
        product_client=product_client,
        cache=InMemoryReportCache(
            max_entries=resolved_settings.report_cache_max_entries
        ),
        default_portion_g=resolved_settings.default_portion_g,
        v2_enabled=resolved_settings.score_v2_enabled,
        cache_ttl_seconds=resolved_settings.report_cache_ttl_seconds,
    )
    quality_score_service = QualityScoreService(
        report_service=health_report_service,
        repository=SupabaseNutritionLogRepository(supabase_client),
    )

    async def close_resources() -> None:
        await product_client.close()

    return AppContainer(
        settings=resolved_settings,
        health_report_service=health_report_service,
        quality_score_service=quality_score_service,
        close_resources=close_resources,
    )
