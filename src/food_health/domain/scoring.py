"""Health score calculation.

Scores run from 0 to 100, higher is healthier. The weights are calibrated
so a typical granola lands around 80-88 and a sour candy around 45-55.
"""

import logging
import math
from collections.abc import Mapping
from dataclasses import asdict

from food_health.domain.canonicalize import (
    canonicalize_per_100g,
    per_serving_from_per_100g,
    to_nutrition_input,
)
from food_health.domain.health import NutritionInput, ProductMeta, ScoringInput

_logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 50
DEFAULT_PORTION_G = 30.0

SUGAR_PENALTY = 0.30
SAT_FAT_PENALTY = 0.15
SODIUM_PENALTY = 0.10
ENERGY_DENSITY_PENALTY = 0.10
ULTRA_PROCESSED_PENALTY = 0.10
FIBER_BONUS = 0.10
PROTEIN_BONUS = 0.10
INGREDIENT_QUALITY = 0.05

# Per-serving sugar above this adds no further penalty. Without the cap the
# sugar term alone drags a 30 g serving of sour candy to 33, below its 42-58
# calibration band, while granola must still land at 78-88. Keep the cap
# unless both reference products are recalibrated.
SUGAR_CAP_G = 18.0
FIBER_CAP_G = 8.0
PROTEIN_CAP_G = 20.0

ULTRA_PROCESSED_KEYWORDS = (
    "soda",
    "candy",
    "chips",
    "crackers",
    "cookies",
    "instant",
    "frozen meal",
    "packaged snack",
)

ADDITIVE_FLAGS = frozenset(
    {
        "artificial_colors",
        "artificial_flavors",
        "preservatives",
        "high_fructose_corn_syrup",
        "trans_fats",
    }
)


def calculate_health_score(scoring_input: ScoringInput) -> int:
    """Calculate a 0-100 health score from per-serving nutrition and metadata."""
    per_100g = scoring_input.per_100g
    per_serving = scoring_input.per_serving
    meta = scoring_input.meta
    flags = scoring_input.flags

    sugar = min(_clamp0(per_serving.sugar), SUGAR_CAP_G)
    sat_fat = _clamp0(per_serving.saturated_fat)
    sodium = _clamp0(per_serving.sodium) / 1000
    fiber = _clamp0(per_serving.fiber)
    protein = _clamp0(per_serving.protein)
    energy_density = _clamp0(per_100g.calories) / 100

    ultra_processed = 1 if _is_ultra_processed(meta) else 0
    additives = 1 if _has_artificial_additives(flags) else 0
    category_bonus = _category_bonus(meta, per_serving)

    score = 100.0
    score -= SUGAR_PENALTY * sugar * 8
    score -= SAT_FAT_PENALTY * sat_fat * 10
    score -= SODIUM_PENALTY * sodium * 10
    score -= ENERGY_DENSITY_PENALTY * energy_density * 8
    score -= ULTRA_PROCESSED_PENALTY * ultra_processed * 15
    score -= INGREDIENT_QUALITY * additives * 10
    score += FIBER_BONUS * min(fiber, FIBER_CAP_G) * 2
    score += PROTEIN_BONUS * min(protein, PROTEIN_CAP_G) * 1.5
    score += category_bonus

    return _round_half_up(_clamp(score, 0, 100))


def score_to_ten(score: float) -> int:
    """Convert a 0-100 score to the legacy 0-10 scale."""
    return _round_half_up(_clamp(score / 10, 0, 10))


def score_to_stars(score: float) -> float:
    """Convert a 0-100 score to 0-5 stars in half-star steps."""
    stars = _clamp((score / 100) * 5, 0, 5)
    return _round_half_up(stars * 2) / 2


def score_rating(score: float) -> str:
    """Return the rating text shown next to a score."""
    if score >= 80:
        return "Excellent"
    if score >= 50:
        return "Average"
    return "Poor"


def validate_score(score: float, product_name: str | None = None) -> float:
    """Clamp an out-of-range score, logging the problem."""
    if math.isfinite(score) and 0 <= score <= 100:
        return score
    _logger.error(
        "[REPORT][V2][SCORE][ERROR] %s",
        {
            "stage": "validation",
            "score": score,
            "product_name": product_name,
            "message": "Score out of valid range (0-100)",
        },
    )
    if not math.isfinite(score):
        return NEUTRAL_SCORE
    return _round_half_up(_clamp(score, 0, 100))


def safe_score_v2(
    raw_per_100g: Mapping[str, object],
    per_serving: NutritionInput,
    meta: ProductMeta,
    flags: list[str] | None = None,
) -> int:
    """Score from a raw per-100g payload, canonicalizing it first.

    Falls back to the legacy per-serving score when canonical values are
    missing or the calculation fails.
    """
    try:
        per_100g = canonicalize_per_100g(raw_per_100g)
        grams = meta.portion_grams or DEFAULT_PORTION_G
        serving = per_serving_from_per_100g(per_100g, grams)

        missing = [
            name
            for name, value in (
                ("per_serving.sugars_g", serving.sugars_g),
                ("per_serving.saturated_fat_g", serving.saturated_fat_g),
                ("per_serving.sodium_mg", serving.sodium_mg),
                ("per_100g.energy_kcal", per_100g.energy_kcal),
            )
            if not math.isfinite(value)
        ]
        if missing:
            _logger.error(
                "[REPORT][V2][SCORE][DIAG_MISSING] %s",
                {"missing": missing, "product_name": meta.name},
            )
            return _legacy_score(per_serving)

        _logger.info(
            "[REPORT][V2][SCORE][INPUTS] %s",
            {
                "per_100g": per_100g.as_dict(),
                "per_serving": serving.as_dict(),
                "grams": grams,
            },
        )
        score = calculate_health_score(
            ScoringInput(
                per_100g=to_nutrition_input(per_100g),
                per_serving=to_nutrition_input(serving),
                meta=meta,
                flags=list(flags or []),
            )
        )
        _logger.info(
            "[REPORT][V2][SCORE][VALUE] %s",
            {"score": score, "grams": grams, "product_name": meta.name},
        )
        return score
    except Exception as exc:
        _logger.error(
            "[REPORT][V2][SCORE][ERROR] %s",
            {
                "stage": "v2_calculation",
                "message": str(exc),
                "product_name": getattr(meta, "name", None),
            },
        )
        return _legacy_score(per_serving)


def score_product(
    scoring_input: ScoringInput,
    *,
    v2_enabled: bool = False,
    raw_per_100g: Mapping[str, object] | None = None,
) -> int:
    """Score a product without ever raising.

    Any unexpected failure is logged and yields the neutral score of 50.
    """
    try:
        if v2_enabled and raw_per_100g is not None:
            return safe_score_v2(
                raw_per_100g,
                scoring_input.per_serving,
                scoring_input.meta,
                scoring_input.flags,
            )

        _logger.info(
            "[REPORT][V2][SCORE][INPUTS] %s",
            {
                "per_100g": asdict(scoring_input.per_100g),
                "per_serving": asdict(scoring_input.per_serving),
                "flags": scoring_input.flags,
            },
        )
        score = calculate_health_score(scoring_input)
        score = validate_score(score, scoring_input.meta.name)
        _logger.info(
            "[REPORT][V2][SCORE][VALUE] %s",
            {"score": score, "product_name": scoring_input.meta.name},
        )
        return score
    except Exception as exc:
        meta = getattr(scoring_input, "meta", None)
        _logger.error(
            "[REPORT][V2][SCORE][ERROR] %s",
            {
                "stage": "main_entry",
                "message": str(exc),
                "product_name": getattr(meta, "name", None),
            },
        )
        return NEUTRAL_SCORE


def _legacy_score(per_serving: NutritionInput) -> int:
    # Legacy callers passed per-serving values for both bases.
    return calculate_health_score(
        ScoringInput(per_100g=per_serving, per_serving=per_serving, meta=ProductMeta())
    )


def _is_ultra_processed(meta: ProductMeta) -> bool:
    if meta.is_ultra_processed:
        return True
    name = (meta.name or "").lower()
    category = (meta.category or "").lower()
    return any(
        keyword in name or keyword in category for keyword in ULTRA_PROCESSED_KEYWORDS
    )


def _has_artificial_additives(flags: list[str] | None) -> bool:
    if not flags:
        return False
    return any(flag in ADDITIVE_FLAGS for flag in flags)


def _category_bonus(meta: ProductMeta, per_serving: NutritionInput) -> float:
    category = (meta.category or "").lower()
    name = (meta.name or "").lower()

    if "cereal" in category or "breakfast" in category:
        fiber = _clamp0(per_serving.fiber)
        protein = _clamp0(per_serving.protein)
        if fiber >= 3 and protein >= 4:
            return 3
    if "candy" in category or "gum" in name or "candy" in name:
        return -5
    if "fruit" in category or "vegetable" in category:
        return 2
    return 0


def _to_number(value: object) -> float:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return 0.0 if math.isnan(number) else number


def _clamp0(value: object) -> float:
    return max(0.0, _to_number(value))


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
