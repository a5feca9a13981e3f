"""Supabase repository for logged foods and quality scores."""

import json
from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from food_health.domain.logs import NutritionLogRecord
from food_health.services.quality_scores import NutritionLogRepository

_COLUMNS = (
    "id, food_name, brand, category, serving_grams, nutrition_per_100g, "
    "ingredients_text, quality_score"
)


@dataclass
class SupabaseNutritionLogRepository(NutritionLogRepository):
    """Supabase implementation for nutrition log scoring."""

    client: Client

    def get_log(self, log_id: UUID) -> NutritionLogRecord | None:
        """Return a nutrition log by id."""
        response = (
            self.client.table("nutrition_logs")
            .select(_COLUMNS)
            .eq("id", str(log_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def list_unscored_logs(self, limit: int) -> list[NutritionLogRecord]:
        """Return logs whose quality score is still null."""
        response = (
            self.client.table("nutrition_logs")
            .select(_COLUMNS)
            .is_("quality_score", "null")
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def set_quality_score(self, log_id: UUID, score: int) -> None:
        """Update the quality score column."""
        self.client.table("nutrition_logs").update({"quality_score": score}).eq(
            "id", str(log_id)
        ).execute()


def _parse_row(row: dict[str, object]) -> NutritionLogRecord:
    nutrition = row.get("nutrition_per_100g") or {}
    if isinstance(nutrition, str):
        try:
            nutrition = json.loads(nutrition)
        except json.JSONDecodeError:
            nutrition = {}
    serving = row.get("serving_grams")
    score = row.get("quality_score")
    return NutritionLogRecord(
        id=UUID(str(row["id"])),
        food_name=str(row.get("food_name") or ""),
        brand=row.get("brand"),
        category=row.get("category"),
        serving_grams=float(serving) if serving is not None else None,
        nutrition_per_100g=nutrition if isinstance(nutrition, dict) else {},
        ingredients_text=row.get("ingredients_text"),
        quality_score=int(score) if score is not None else None,
    )
