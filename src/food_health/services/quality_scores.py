"""Quality score service for logged foods."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from food_health.domain.health import ProductMeta
from food_health.domain.logs import NutritionLogRecord
from food_health.services.health_report import HealthReportService

_logger = logging.getLogger(__name__)


class NutritionLogNotFoundError(LookupError):
    """Raised when a nutrition log row does not exist."""


class NutritionLogRepository(Protocol):
    """Persistence interface for logged foods and their scores."""

    def get_log(self, log_id: UUID) -> NutritionLogRecord | None:
        """Return a nutrition log by id."""

    def list_unscored_logs(self, limit: int) -> list[NutritionLogRecord]:
        """Return logs without a quality score."""

    def set_quality_score(self, log_id: UUID, score: int) -> None:
        """Persist the quality score for a log."""


@dataclass
class QualityScoreService:
    """Service that scores logged foods and stores the result."""

    report_service: HealthReportService
    repository: NutritionLogRepository

    def score_log(self, log_id: UUID) -> int:
        """Score a single log and persist its quality score."""
        record = self.repository.get_log(log_id)
        if record is None:
            raise NutritionLogNotFoundError(str(log_id))
        return self._score_record(record)

    def rescore_missing(self, limit: int = 100) -> dict[str, int]:
        """Score logs that have no quality score yet."""
        records = self.repository.list_unscored_logs(limit)
        scored = 0
        for record in records:
            self._score_record(record)
            scored += 1
        _logger.info("Rescored nutrition logs: scored=%s", scored)
        return {"scored": scored}

    def _score_record(self, record: NutritionLogRecord) -> int:
        report = self.report_service.build_report(
            record.nutrition_per_100g,
            ingredients_text=record.ingredients_text,
            grams=record.serving_grams,
            meta=ProductMeta(
                category=record.category,
                name=record.food_name,
                brand=record.brand,
            ),
        )
        self.repository.set_quality_score(record.id, report.score)
        return report.score
