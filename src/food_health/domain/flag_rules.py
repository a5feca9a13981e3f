"""Static rule tables for health flag detection.

Rules are evaluated in declaration order. Every rule is independent, so
several rules may fire for the same input (e.g. both sodium tiers).
"""

import re
from collections.abc import Callable
from dataclasses import dataclass

from food_health.domain.health import HealthFlag, NutritionThresholds


@dataclass(frozen=True)
class IngredientRule:
    """Regex rule matched against lower-cased ingredient text."""

    key: str
    pattern: re.Pattern[str]
    flag: HealthFlag

    def test(self, text: str) -> bool:
        """Return True when the rule matches the ingredient text."""
        return self.pattern.search(text) is not None


@dataclass(frozen=True)
class NutritionRule:
    """Threshold rule evaluated against a per-100g snapshot."""

    key: str
    test: Callable[[NutritionThresholds], bool]
    flag: HealthFlag


def _value(value: float | None) -> float:
    return value or 0


INGREDIENT_RULES: tuple[IngredientRule, ...] = (
    IngredientRule(
        key="aspartame",
        pattern=re.compile(r"\baspartame\b|\be\s?951\b"),
        flag=HealthFlag(
            key="aspartame",
            label="Aspartame",
            severity="warning",
            description="Artificial sweetener (E951).",
        ),
    ),
    IngredientRule(
        key="acesulfame_k",
        pattern=re.compile(r"acesulfame[\s-]*(k|potassium)?|\be\s?950\b"),
        flag=HealthFlag(
            key="acesulfame_k",
            label="Acesulfame-K",
            severity="warning",
            description="Artificial sweetener (E950).",
        ),
    ),
    IngredientRule(
        key="sucralose",
        pattern=re.compile(r"\bsucralose\b|\be\s?955\b"),
        flag=HealthFlag(
            key="sucralose",
            label="Sucralose",
            severity="warning",
            description="Artificial sweetener (E955).",
        ),
    ),
    IngredientRule(
        key="saccharin",
        pattern=re.compile(r"\bsaccharin\b|\be\s?954\b"),
        flag=HealthFlag(
            key="saccharin",
            label="Saccharin",
            severity="warning",
            description="Artificial sweetener (E954).",
        ),
    ),
    IngredientRule(
        key="nitrites_nitrates",
        pattern=re.compile(r"\bnitrit(e|es)\b|\bnitrat(e|es)\b|\be\s?25[0-2]\b"),
        flag=HealthFlag(
            key="nitrites_nitrates",
            label="Nitrites/Nitrates",
            severity="danger",
            description="Curing agents linked to processed-meat risk.",
        ),
    ),
    IngredientRule(
        key="artificial_colors",
        pattern=re.compile(
            r"artificial colou?rs?|fd&c|"
            r"\b(red|yellow|blue|green)\s?(no\.?\s?)?\d{1,2}\b( lake)?|"
            r"allura red|tartrazine|sunset yellow|brilliant blue"
        ),
        flag=HealthFlag(
            key="artificial_colors",
            label="Artificial colors",
            severity="warning",
            description="Synthetic dyes such as Red 40 or Yellow 5.",
        ),
    ),
    IngredientRule(
        key="trans_fats",
        pattern=re.compile(r"partially[\s-]hydrogenated"),
        flag=HealthFlag(
            key="trans_fats",
            label="Trans fats",
            severity="danger",
            description="Partially hydrogenated oils contain trans fats.",
        ),
    ),
    IngredientRule(
        key="high_fructose_corn_syrup",
        pattern=re.compile(r"high[\s-]fructose corn syrup|\bhfcs\b"),
        flag=HealthFlag(
            key="high_fructose_corn_syrup",
            label="High-fructose corn syrup",
            severity="warning",
            description="Highly refined added sugar.",
        ),
    ),
    IngredientRule(
        key="msg",
        pattern=re.compile(r"monosodium glutamate|\bmsg\b|\be\s?621\b"),
        flag=HealthFlag(
            key="msg",
            label="MSG",
            severity="warning",
            description="Monosodium glutamate (E621).",
        ),
    ),
    IngredientRule(
        key="preservatives",
        pattern=re.compile(
            r"\bbha\b|\bbht\b|\btbhq\b|sodium benzoate|potassium sorbate"
        ),
        flag=HealthFlag(
            key="preservatives",
            label="Preservatives of concern",
            severity="warning",
            description="Contains BHA, BHT, TBHQ, benzoate or sorbate.",
        ),
    ),
    IngredientRule(
        key="artificial_flavors",
        pattern=re.compile(r"artificial(ly)? flavou?r(s|ed|ing)?"),
        flag=HealthFlag(
            key="artificial_flavors",
            label="Artificial flavors",
            severity="warning",
        ),
    ),
)

# OpenFoodFacts additive tags (E-numbers) mapped onto ingredient rule keys.
ADDITIVE_TAG_KEYS: dict[str, str] = {
    "e102": "artificial_colors",
    "e104": "artificial_colors",
    "e110": "artificial_colors",
    "e122": "artificial_colors",
    "e124": "artificial_colors",
    "e127": "artificial_colors",
    "e129": "artificial_colors",
    "e132": "artificial_colors",
    "e133": "artificial_colors",
    "e143": "artificial_colors",
    "e202": "preservatives",
    "e211": "preservatives",
    "e249": "nitrites_nitrates",
    "e250": "nitrites_nitrates",
    "e251": "nitrites_nitrates",
    "e252": "nitrites_nitrates",
    "e319": "preservatives",
    "e320": "preservatives",
    "e321": "preservatives",
    "e621": "msg",
    "e950": "acesulfame_k",
    "e951": "aspartame",
    "e954": "saccharin",
    "e955": "sucralose",
}


NUTRITION_RULES: tuple[NutritionRule, ...] = (
    NutritionRule(
        key="high_sugar",
        test=lambda n: _value(n.sugar_g_100g) >= 22.5,
        flag=HealthFlag(
            key="high_sugar", label="Sugar ≥22.5 g/100g", severity="warning"
        ),
    ),
    NutritionRule(
        key="high_saturated_fat",
        test=lambda n: _value(n.satfat_g_100g) >= 5,
        flag=HealthFlag(
            key="high_saturated_fat",
            label="Saturated fat ≥5 g/100g",
            severity="warning",
        ),
    ),
    NutritionRule(
        key="high_sodium",
        test=lambda n: _value(n.sodium_mg_100g) >= 600,
        flag=HealthFlag(
            key="high_sodium", label="Sodium ≥600 mg/100g", severity="warning"
        ),
    ),
    NutritionRule(
        key="very_high_sodium",
        test=lambda n: _value(n.sodium_mg_100g) >= 1500,
        flag=HealthFlag(
            key="very_high_sodium",
            label="Sodium ≥1500 mg/100g",
            severity="danger",
        ),
    ),
    NutritionRule(
        key="low_fiber",
        test=lambda n: _value(n.fiber_g_100g) <= 2,
        flag=HealthFlag(key="low_fiber", label="Fiber ≤2 g/100g", severity="warning"),
    ),
    NutritionRule(
        key="high_fiber",
        test=lambda n: _value(n.fiber_g_100g) >= 6,
        flag=HealthFlag(key="high_fiber", label="Fiber ≥6 g/100g", severity="good"),
    ),
    NutritionRule(
        key="high_protein",
        test=lambda n: _value(n.protein_g_100g) >= 12,
        flag=HealthFlag(
            key="high_protein", label="Protein ≥12 g/100g", severity="good"
        ),
    ),
)
