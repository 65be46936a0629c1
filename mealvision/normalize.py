"""Turn a loosely-shaped model reply into a canonical ``MealAnalysisResult``."""
import logging
import math
from collections.abc import Iterable, Mapping
from typing import Any, NamedTuple, Optional

from mealvision.constants import (
    CALORIE_MISMATCH_TOLERANCE,
    DEFAULT_CONFIDENCE,
    DEFAULT_SERVING_SIZE,
    MSG_CALORIE_MISMATCH,
    MSG_SKIPPED_INGREDIENT,
    UNKNOWN_INGREDIENT_EN,
    UNKNOWN_INGREDIENT_HE,
    UNKNOWN_MEAL_EN,
    UNKNOWN_MEAL_HE,
)
from mealvision.models import (
    EditedIngredient,
    Ingredient,
    MealAnalysisResult,
    RawAnalysis,
    RawIngredient,
)

logger = logging.getLogger(__name__)

# canonical ingredient field -> accepted keys, first non-zero wins
INGREDIENT_ALIASES: dict[str, tuple[str, ...]] = {
    "calories": ("calories",),
    "protein": ("protein", "protein_g"),
    "carbs": ("carbs", "carbs_g"),
    "fat": ("fat", "fats_g", "fat_g"),
    "fiber": ("fiber", "fiber_g"),
    "sugar": ("sugar", "sugar_g"),
    "sodium_mg": ("sodium_mg", "sodium"),
}

INGREDIENT_EXTRA_NUMBERS = (
    "cholesterol_mg",
    "saturated_fats_g",
    "polyunsaturated_fats_g",
    "monounsaturated_fats_g",
    "omega_3_g",
    "omega_6_g",
    "soluble_fiber_g",
    "insoluble_fiber_g",
    "alcohol_g",
    "caffeine_mg",
    "serving_size_g",
)

MEAL_REQUIRED_NUMBERS = ("calories", "protein", "carbs", "fat", "fiber", "sugar", "sodium")

MEAL_EXTENDED_NUMBERS = (
    "saturated_fats_g",
    "polyunsaturated_fats_g",
    "monounsaturated_fats_g",
    "omega_3_g",
    "omega_6_g",
    "soluble_fiber_g",
    "insoluble_fiber_g",
    "cholesterol_mg",
    "alcohol_g",
    "caffeine_mg",
    "liquids_ml",
    "serving_size_g",
    "glycemic_index",
    "insulin_index",
)

# canonical meal text field -> accepted keys, first non-empty wins
MEAL_TEXT_ALIASES: dict[str, tuple[str, ...]] = {
    "description": ("description",),
    "cooking_method": ("cooking_method", "cookingMethod"),
    "food_category": ("food_category", "foodCategory"),
    "recommendations": ("recommendations", "healthNotes"),
    "health_notes": ("recommendations", "health_notes"),
    "processing_level": ("processing_level",),
}

MEAL_JSON_FIELDS = ("allergens_json", "vitamins_json", "micronutrients_json", "additives_json")
INGREDIENT_JSON_FIELDS = ("vitamins_json", "micronutrients_json", "allergens_json")


class IngredientTotals(NamedTuple):
    calories: float
    protein: float
    carbs: float
    fat: float


# ── coercion helpers ──────────────────────────────────────────────────────────


def to_number(value: Any) -> float:
    """Finite float for numbers and numeric strings, 0.0 for anything else."""
    match value:
        case bool():
            return float(value)
        case int() | float():
            try:
                number = float(value)
            except OverflowError:
                return 0.0
        case str() as s if s.strip():
            try:
                number = float(s.strip())
            except ValueError:
                return 0.0
        case _:
            return 0.0
    return number if math.isfinite(number) else 0.0


def optional_number(value: Any) -> Optional[float]:
    """Like ``to_number`` but None for absent, zero or non-numeric values."""
    return to_number(value) or None


def first_number(raw: Mapping[str, Any], keys: Iterable[str]) -> float:
    return next(filter(None, map(lambda k: to_number(raw.get(k)), keys)), 0.0)


def first_text(raw: Mapping[str, Any], keys: Iterable[str], default: str = "") -> str:
    values = map(lambda k: raw.get(k), keys)
    found = next(filter(None, values), None)
    return str(found) if found is not None else default


def json_object(value: Any) -> dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}


# ── ingredients ───────────────────────────────────────────────────────────────


def normalize_ingredient(
    raw: RawIngredient | EditedIngredient | Mapping[str, Any], is_hebrew: bool = False
) -> Ingredient:
    placeholder = UNKNOWN_INGREDIENT_HE if is_hebrew else UNKNOWN_INGREDIENT_EN
    aliased = {field: first_number(raw, keys) for field, keys in INGREDIENT_ALIASES.items()}
    extras = {field: to_number(raw.get(field)) for field in INGREDIENT_EXTRA_NUMBERS}
    blobs = {field: json_object(raw.get(field)) for field in INGREDIENT_JSON_FIELDS}
    return Ingredient(
        name=first_text(raw, ("name",), placeholder),
        glycemic_index=optional_number(raw.get("glycemic_index")),
        insulin_index=optional_number(raw.get("insulin_index")),
        **aliased,
        **extras,
        **blobs,
    )


def normalize_ingredients(raw_list: Any, is_hebrew: bool = False) -> tuple[Ingredient, ...]:
    """Validate a list of ingredient objects; non-objects are dropped."""
    match raw_list:
        case list() | tuple():
            pass
        case _:
            return ()

    def _is_object(item: Any) -> bool:
        match item:
            case Ingredient() | Mapping():
                return True
            case _:
                logger.debug(MSG_SKIPPED_INGREDIENT, item)
                return False

    return tuple(
        map(
            lambda item: item
            if isinstance(item, Ingredient)
            else normalize_ingredient(item, is_hebrew),
            filter(_is_object, raw_list),
        )
    )


# ── meal ──────────────────────────────────────────────────────────────────────


def normalize_analysis(raw: RawAnalysis | Mapping[str, Any], is_hebrew: bool = False) -> MealAnalysisResult:
    """Fill every canonical field of a meal analysis, then check ingredient totals."""
    placeholder = UNKNOWN_MEAL_HE if is_hebrew else UNKNOWN_MEAL_EN
    required = {field: to_number(raw.get(field)) for field in MEAL_REQUIRED_NUMBERS}
    extended = {field: optional_number(raw.get(field)) for field in MEAL_EXTENDED_NUMBERS}
    texts = {field: first_text(raw, keys) for field, keys in MEAL_TEXT_ALIASES.items()}
    blobs = {field: json_object(raw.get(field)) for field in MEAL_JSON_FIELDS}
    risk_notes = raw.get("health_risk_notes")

    result = MealAnalysisResult(
        name=first_text(raw, ("name",), placeholder),
        confidence=to_number(raw.get("confidence")) or DEFAULT_CONFIDENCE,
        ingredients=normalize_ingredients(raw.get("ingredients"), is_hebrew),
        serving_size=first_text(raw, ("serving_size", "servingSize"), DEFAULT_SERVING_SIZE),
        health_risk_notes=str(risk_notes) if risk_notes else None,
        **required,
        **extended,
        **texts,
        **blobs,
    )
    check_ingredient_totals(result)
    return result


def ingredient_totals(ingredients: Iterable[Ingredient]) -> IngredientTotals:
    items = list(ingredients)
    return IngredientTotals(
        calories=sum(i.calories for i in items),
        protein=sum(i.protein for i in items),
        carbs=sum(i.carbs for i in items),
        fat=sum(i.fat for i in items),
    )


def check_ingredient_totals(result: MealAnalysisResult) -> bool:
    """Log a warning when ingredient calories stray >20% from the meal total.

    Returns True when the totals agree (or there are no ingredients).
    """
    match result.ingredients:
        case ():
            return True
        case ingredients:
            totals = ingredient_totals(ingredients)

    difference = abs(totals.calories - result.calories)
    match difference > result.calories * CALORIE_MISMATCH_TOLERANCE:
        case True:
            logger.warning(MSG_CALORIE_MISMATCH, result.calories, totals.calories, difference)
            return False
        case False:
            return True
