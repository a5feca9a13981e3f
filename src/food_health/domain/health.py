"""Domain models for food health scoring."""

from dataclasses import dataclass, field
from typing import Literal

Severity = Literal["good", "warning", "danger"]


@dataclass(frozen=True)
class CanonicalNutrition:
    """Nutrition in a fixed schema, per 100 g or per serving."""

    energy_kcal: float = 0.0
    sugars_g: float = 0.0
    saturated_fat_g: float = 0.0
    sodium_mg: float = 0.0
    fiber_g: float = 0.0
    protein_g: float = 0.0

    def as_dict(self) -> dict[str, float]:
        """Return the nutrition fields as a plain dict."""
        return {
            "energy_kcal": self.energy_kcal,
            "sugars_g": self.sugars_g,
            "saturated_fat_g": self.saturated_fat_g,
            "sodium_mg": self.sodium_mg,
            "fiber_g": self.fiber_g,
            "protein_g": self.protein_g,
        }


@dataclass(frozen=True)
class HealthFlag:
    """Advisory flag raised for an ingredient or nutrient level."""

    key: str
    label: str
    severity: Severity
    description: str | None = None


@dataclass(frozen=True)
class NutritionThresholds:
    """Per-100g snapshot consulted by the nutrition flag rules."""

    sugar_g_100g: float | None = None
    satfat_g_100g: float | None = None
    fiber_g_100g: float | None = None
    sodium_mg_100g: float | None = None
    protein_g_100g: float | None = None


@dataclass(frozen=True)
class NutritionInput:
    """Loosely named nutrition values consumed by the scorer."""

    calories: float | None = None
    protein: float | None = None
    carbs: float | None = None
    fat: float | None = None
    saturated_fat: float | None = None
    sugar: float | None = None
    fiber: float | None = None
    sodium: float | None = None


@dataclass(frozen=True)
class ProductMeta:
    """Product metadata used for category adjustments."""

    category: str | None = None
    name: str | None = None
    brand: str | None = None
    is_ultra_processed: bool = False
    portion_grams: float | None = None


@dataclass(frozen=True)
class ScoringInput:
    """Everything the scorer needs for one product."""

    per_100g: NutritionInput
    per_serving: NutritionInput
    meta: ProductMeta
    flags: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class HealthReport:
    """Result of running the full scoring pipeline."""

    per_100g: CanonicalNutrition
    per_serving: CanonicalNutrition
    grams: float
    flags: list[HealthFlag]
    score: int
    score_ten: int
    stars: float
    rating: str
