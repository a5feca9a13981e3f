"""Domain models for logged foods."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class NutritionLogRecord:
    """Logged food row with the inputs needed for scoring."""

    id: UUID
    food_name: str
    brand: str | None
    category: str | None
    serving_grams: float | None
    nutrition_per_100g: dict[str, object]
    ingredients_text: str | None
    quality_score: int | None = None
