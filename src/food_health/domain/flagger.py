"""Deterministic health flag detection."""

import re
from collections.abc import Iterable, Mapping

from food_health.domain.flag_rules import (
    ADDITIVE_TAG_KEYS,
    INGREDIENT_RULES,
    NUTRITION_RULES,
)
from food_health.domain.health import HealthFlag, NutritionThresholds

_THRESHOLD_FIELDS = (
    "sugar_g_100g",
    "satfat_g_100g",
    "fiber_g_100g",
    "sodium_mg_100g",
    "protein_g_100g",
)

# "en:e322i" -> "e322"
_ADDITIVE_TAG = re.compile(r"^(?:[a-z]{2}:)?(e\d{3,4})")


def detect_ingredient_flags(ingredients_text: object) -> list[HealthFlag]:
    """Return flags for every ingredient rule matching the text."""
    if not ingredients_text or not isinstance(ingredients_text, str):
        return []
    text = ingredients_text.lower().strip()
    return [rule.flag for rule in INGREDIENT_RULES if rule.test(text)]


def detect_additive_flags(additives: object) -> list[HealthFlag]:
    """Return ingredient-rule flags for known additive tags, in rule order."""
    if not additives or isinstance(additives, str | bytes):
        return []
    if not isinstance(additives, Iterable):
        return []
    keys = set()
    for tag in additives:
        if not isinstance(tag, str):
            continue
        match = _ADDITIVE_TAG.match(tag.strip().lower())
        if match and match.group(1) in ADDITIVE_TAG_KEYS:
            keys.add(ADDITIVE_TAG_KEYS[match.group(1)])
    return [rule.flag for rule in INGREDIENT_RULES if rule.key in keys]


def detect_nutrition_flags(
    nutrition: NutritionThresholds | Mapping[str, object] | None,
) -> list[HealthFlag]:
    """Return flags for every nutrition threshold rule that holds."""
    snapshot = _as_thresholds(nutrition)
    return [rule.flag for rule in NUTRITION_RULES if rule.test(snapshot)]


def detect_flags(
    ingredients_text: object,
    nutrition: NutritionThresholds | Mapping[str, object] | None,
    additives: object = None,
) -> list[HealthFlag]:
    """Combine ingredient, additive and nutrition flags, unique by key.

    On a key collision the later source wins but keeps the position where
    the key was first seen.
    """
    combined: dict[str, HealthFlag] = {}
    for flag in detect_ingredient_flags(ingredients_text):
        combined[flag.key] = flag
    for flag in detect_additive_flags(additives):
        combined[flag.key] = flag
    for flag in detect_nutrition_flags(nutrition):
        combined[flag.key] = flag
    return list(combined.values())


def _as_thresholds(
    nutrition: NutritionThresholds | Mapping[str, object] | None,
) -> NutritionThresholds:
    if isinstance(nutrition, NutritionThresholds):
        return nutrition
    if not isinstance(nutrition, Mapping):
        return NutritionThresholds()
    return NutritionThresholds(
        **{name: _as_number(nutrition.get(name)) for name in _THRESHOLD_FIELDS}
    )


def _as_number(raw: object) -> float | None:
    if isinstance(raw, bool) or not isinstance(raw, int | float):
        return None
    try:
        return float(raw)
    except OverflowError:
        return None
