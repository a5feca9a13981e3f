"""Canonicalize provider nutrition payloads into a fixed schema.

Each canonical field is resolved from an ordered list of candidate keys.
The first candidate holding a finite, strictly positive number wins, so a
reported zero is treated the same as a missing value.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass

from food_health.domain.health import (
    CanonicalNutrition,
    NutritionInput,
    NutritionThresholds,
)

KJ_TO_KCAL = 0.239006
SALT_TO_SODIUM = 0.393
GRAMS_TO_MG = 1000.0


@dataclass(frozen=True)
class FieldSource:
    """Ordered candidate keys sharing one scale factor."""

    keys: tuple[str, ...]
    scale: float = 1.0


_ENERGY = (
    FieldSource(
        (
            "energy-kcal_100g",
            "energy_kcal_100g",
            "energy-kcal",
            "energy_kcal",
            "calories_100g",
            "kcal",
            "calories",
        )
    ),
    FieldSource(
        (
            "energy-kj_100g",
            "energy_kj_100g",
            "energy-kj",
            "energy_kj",
            "energy_100g",
            "kj",
        ),
        scale=KJ_TO_KCAL,
    ),
)

_SUGARS = (
    FieldSource(
        ("sugars_100g", "sugar_100g", "sugars_g", "sugar_g", "sugars", "sugar")
    ),
)

_SATURATED_FAT = (
    FieldSource(
        (
            "saturated-fat_100g",
            "saturated_fat_100g",
            "saturated_fat_g",
            "satfat_g",
            "saturated-fat",
            "saturated_fat",
            "satfat",
        )
    ),
)

_SODIUM = (
    FieldSource(("sodium_mg_100g", "sodium_mg", "sodium_100g_mg")),
    FieldSource(("sodium_100g", "sodium_g"), scale=GRAMS_TO_MG),
    FieldSource(
        ("salt_100g", "salt_g", "salt"), scale=SALT_TO_SODIUM * GRAMS_TO_MG
    ),
)

_FIBER = (
    FieldSource(
        (
            "fiber_100g",
            "fibre_100g",
            "fiber_g",
            "fibre_g",
            "dietary_fiber",
            "fiber",
            "fibre",
        )
    ),
)

_PROTEIN = (
    FieldSource(("proteins_100g", "protein_100g", "protein_g", "proteins", "protein")),
)


def canonicalize_per_100g(raw: Mapping[str, object] | None) -> CanonicalNutrition:
    """Map an arbitrary per-100g payload to canonical nutrition."""
    if not isinstance(raw, Mapping):
        return CanonicalNutrition()
    return CanonicalNutrition(
        energy_kcal=_resolve(raw, _ENERGY),
        sugars_g=_resolve(raw, _SUGARS),
        saturated_fat_g=_resolve(raw, _SATURATED_FAT),
        sodium_mg=_resolve(raw, _SODIUM),
        fiber_g=_resolve(raw, _FIBER),
        protein_g=_resolve(raw, _PROTEIN),
    )


def per_serving_from_per_100g(
    per_100g: CanonicalNutrition, grams: float
) -> CanonicalNutrition:
    """Scale per-100g values linearly to a portion in grams."""
    factor = grams / 100
    return CanonicalNutrition(
        energy_kcal=per_100g.energy_kcal * factor,
        sugars_g=per_100g.sugars_g * factor,
        saturated_fat_g=per_100g.saturated_fat_g * factor,
        sodium_mg=per_100g.sodium_mg * factor,
        fiber_g=per_100g.fiber_g * factor,
        protein_g=per_100g.protein_g * factor,
    )


def to_nutrition_input(nutrition: CanonicalNutrition) -> NutritionInput:
    """Rename canonical fields to the scorer's input names."""
    return NutritionInput(
        calories=nutrition.energy_kcal,
        protein=nutrition.protein_g,
        saturated_fat=nutrition.saturated_fat_g,
        sugar=nutrition.sugars_g,
        fiber=nutrition.fiber_g,
        sodium=nutrition.sodium_mg,
    )


def to_thresholds(per_100g: CanonicalNutrition) -> NutritionThresholds:
    """Build the snapshot consumed by the nutrition flag rules."""
    return NutritionThresholds(
        sugar_g_100g=per_100g.sugars_g,
        satfat_g_100g=per_100g.saturated_fat_g,
        fiber_g_100g=per_100g.fiber_g,
        sodium_mg_100g=per_100g.sodium_mg,
        protein_g_100g=per_100g.protein_g,
    )


def pick(
    raw: Mapping[str, object], keys: tuple[str, ...], scale: float = 1.0
) -> float | None:
    """Return the first positive finite value among keys, scaled."""
    for key in keys:
        value = _as_float(raw.get(key))
        if value is None:
            continue
        scaled = value * scale
        if math.isfinite(scaled) and scaled > 0:
            return scaled
    return None


def _resolve(raw: Mapping[str, object], sources: tuple[FieldSource, ...]) -> float:
    for source in sources:
        value = pick(raw, source.keys, source.scale)
        if value is not None:
            return value
    return 0.0


def _as_float(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, int | float):
            return float(value)
        if isinstance(value, str):
            return float(value.strip())
    except (ValueError, OverflowError):
        return None
    return None
