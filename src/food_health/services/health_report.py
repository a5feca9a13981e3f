"""Health report service composing canonicalization, flags, and scoring."""

import asyncio
import logging
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING

from food_health.adapters.openfoodfacts_client import ProductClient
from food_health.domain.canonicalize import (
    canonicalize_per_100g,
    per_serving_from_per_100g,
    to_nutrition_input,
    to_thresholds,
)
from food_health.domain.flagger import detect_flags
from food_health.domain.health import HealthReport, ProductMeta, ScoringInput
from food_health.domain.scoring import (
    score_product,
    score_rating,
    score_to_stars,
    score_to_ten,
)
from food_health.services.cache import ReportCache, report_fingerprint

_logger = logging.getLogger(__name__)

ULTRA_PROCESSED_NOVA_GROUP = 4

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


class ProductNotFoundError(LookupError):
    """Raised when a barcode is unknown to the product source."""


@dataclass
class HealthReportService:
    """Service that turns raw product data into a health report."""

    product_client: ProductClient
    cache: ReportCache
    default_portion_g: float = 30.0
    v2_enabled: bool = False
    cache_ttl_seconds: int = 3600
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    def build_report(
        self,
        raw_nutrition: dict[str, object],
        *,
        ingredients_text: str | None = None,
        grams: float | None = None,
        meta: ProductMeta | None = None,
        additives: list[str] | None = None,
    ) -> HealthReport:
        """Canonicalize, flag, and score one product."""
        resolved_meta = meta or ProductMeta()
        portion = grams or resolved_meta.portion_grams or self.default_portion_g
        cache_key = report_fingerprint(
            raw_nutrition,
            ingredients_text,
            portion,
            asdict(resolved_meta),
            additives,
        )
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        per_100g = canonicalize_per_100g(raw_nutrition)
        per_serving = per_serving_from_per_100g(per_100g, portion)
        flags = detect_flags(ingredients_text, to_thresholds(per_100g), additives)
        scoring_meta = ProductMeta(
            category=resolved_meta.category,
            name=resolved_meta.name,
            brand=resolved_meta.brand,
            is_ultra_processed=resolved_meta.is_ultra_processed,
            portion_grams=portion,
        )
        score = score_product(
            ScoringInput(
                per_100g=to_nutrition_input(per_100g),
                per_serving=to_nutrition_input(per_serving),
                meta=scoring_meta,
                flags=[flag.key for flag in flags],
            ),
            v2_enabled=self.v2_enabled,
            raw_per_100g=raw_nutrition,
        )
        report = HealthReport(
            per_100g=per_100g,
            per_serving=per_serving,
            grams=portion,
            flags=flags,
            score=score,
            score_ten=score_to_ten(score),
            stars=score_to_stars(score),
            rating=score_rating(score),
        )
        self.cache.set(cache_key, report, ttl_seconds=self.cache_ttl_seconds)
        return report

    async def report_for_barcode(
        self, barcode: str, grams: float | None = None
    ) -> HealthReport:
        """Fetch a product by barcode and build its report."""
        product = await self._call_with_retry(
            lambda: self.product_client.get_product(barcode),
            action=f"get_product:{barcode}",
        )
        if product is None:
            raise ProductNotFoundError(barcode)

        nutriments = product.get("nutriments")
        serving = product.get("serving_quantity")
        nova_group = product.get("nova_group")
        meta = ProductMeta(
            category=_as_str(product.get("categories")),
            name=_as_str(product.get("product_name")),
            brand=_as_str(product.get("brands")),
            is_ultra_processed=nova_group == ULTRA_PROCESSED_NOVA_GROUP,
        )
        return self.build_report(
            nutriments if isinstance(nutriments, dict) else {},
            ingredients_text=_as_str(product.get("ingredients_text")),
            grams=grams or _as_positive_float(serving),
            meta=meta,
            additives=_as_tags(product.get("additives_tags")),
        )

    async def _call_with_retry(
        self,
        func: "Callable[[], Awaitable[dict[str, object] | None]]",
        *,
        action: str,
    ) -> dict[str, object] | None:
        """Call the product source with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "Product %s failed (attempt %s/%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _as_str(value: object) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _as_tags(value: object) -> list[str] | None:
    if not isinstance(value, list):
        return None
    return [tag for tag in value if isinstance(tag, str)]


def _as_positive_float(value: object) -> float | None:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return None
    return number if number > 0 else None
