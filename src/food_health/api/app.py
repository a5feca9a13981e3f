"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import FastAPI, HTTPException, Query, Request, status

from food_health.api.admin import router as admin_router
from food_health.api.models import HealthReportRequest, HealthReportResponse
from food_health.app_logging import configure_logging
from food_health.containers import AppContainer
from food_health.services.health_report import ProductNotFoundError
from food_health.services.quality_scores import NutritionLogNotFoundError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/health-report")
    async def health_report(
        body: HealthReportRequest, request: Request
    ) -> HealthReportResponse:
        """Build a health report from a raw nutrition payload."""
        state_container: AppContainer = request.app.state.container
        report = state_container.health_report_service.build_report(
            body.nutrition,
            ingredients_text=body.ingredients_text,
            grams=body.grams,
            meta=body.meta.to_domain(),
            additives=body.additives,
        )
        return HealthReportResponse.from_domain(report)

    @app.get("/products/{barcode}/health-report")
    async def product_health_report(
        barcode: str,
        request: Request,
        grams: float | None = Query(default=None, gt=0),
    ) -> HealthReportResponse:
        """Build a health report for a product barcode."""
        state_container: AppContainer = request.app.state.container
        try:
            report = await state_container.health_report_service.report_for_barcode(
                barcode, grams
            )
        except ProductNotFoundError:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Product not found"
            ) from None
        return HealthReportResponse.from_domain(report)

    @app.post("/nutrition-logs/{log_id}/score")
    async def score_nutrition_log(log_id: UUID, request: Request) -> dict[str, object]:
        """Score a logged food and store its quality score."""
        state_container: AppContainer = request.app.state.container
        try:
            score = state_container.quality_score_service.score_log(log_id)
        except NutritionLogNotFoundError:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Log not found"
            ) from None
        logger.info("Scored nutrition log: log_id=%s score=%s", log_id, score)
        return {"log_id": str(log_id), "quality_score": score}

    return app
