"""Nutrition records returned by the analysis service.

``Ingredient`` and ``MealAnalysisResult`` are the canonical, fully-defaulted
shapes. The ``Raw*`` / ``EditedIngredient`` typed dicts describe the loose
objects that arrive from the model or the caller; ``mealvision.normalize``
turns them into canonical records.
"""
from dataclasses import asdict, dataclass, field
from typing import Any, Optional, TypedDict


@dataclass(frozen=True)
class Ingredient:
    name: str
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0
    sodium_mg: float = 0.0
    cholesterol_mg: float = 0.0
    saturated_fats_g: float = 0.0
    polyunsaturated_fats_g: float = 0.0
    monounsaturated_fats_g: float = 0.0
    omega_3_g: float = 0.0
    omega_6_g: float = 0.0
    soluble_fiber_g: float = 0.0
    insoluble_fiber_g: float = 0.0
    alcohol_g: float = 0.0
    caffeine_mg: float = 0.0
    serving_size_g: float = 0.0
    glycemic_index: Optional[float] = None
    insulin_index: Optional[float] = None
    vitamins_json: dict[str, Any] = field(default_factory=dict)
    micronutrients_json: dict[str, Any] = field(default_factory=dict)
    allergens_json: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# Meal-level fields left as None when the model does not provide them.
EXTENDED_FIELDS = (
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
    "health_risk_notes",
)


@dataclass(frozen=True)
class MealAnalysisResult:
    name: str
    description: str = ""
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0
    sodium: float = 0.0
    confidence: float = 0.0
    ingredients: tuple[Ingredient, ...] = ()
    cooking_method: str = ""
    food_category: str = ""
    recommendations: str = ""
    serving_size: str = ""
    health_notes: str = ""
    processing_level: str = ""
    saturated_fats_g: Optional[float] = None
    polyunsaturated_fats_g: Optional[float] = None
    monounsaturated_fats_g: Optional[float] = None
    omega_3_g: Optional[float] = None
    omega_6_g: Optional[float] = None
    soluble_fiber_g: Optional[float] = None
    insoluble_fiber_g: Optional[float] = None
    cholesterol_mg: Optional[float] = None
    alcohol_g: Optional[float] = None
    caffeine_mg: Optional[float] = None
    liquids_ml: Optional[float] = None
    serving_size_g: Optional[float] = None
    glycemic_index: Optional[float] = None
    insulin_index: Optional[float] = None
    health_risk_notes: Optional[str] = None
    allergens_json: dict[str, Any] = field(default_factory=dict)
    vitamins_json: dict[str, Any] = field(default_factory=dict)
    micronutrients_json: dict[str, Any] = field(default_factory=dict)
    additives_json: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict; extended fields that are absent are omitted."""
        data = asdict(self)
        data["ingredients"] = list(map(Ingredient.to_dict, self.ingredients))
        return {
            key: value
            for key, value in data.items()
            if not (key in EXTENDED_FIELDS and value is None)
        }


class EditedIngredient(TypedDict, total=False):
    name: str
    calories: float
    protein: float


class RawIngredient(TypedDict, total=False):
    name: str
    calories: Any
    protein: Any
    protein_g: Any
    carbs: Any
    carbs_g: Any
    fat: Any
    fat_g: Any
    fats_g: Any
    fiber: Any
    fiber_g: Any
    sugar: Any
    sugar_g: Any
    sodium: Any
    sodium_mg: Any
    glycemic_index: Any
    insulin_index: Any


class RawAnalysis(TypedDict, total=False):
    name: str
    description: str
    calories: Any
    protein: Any
    carbs: Any
    fat: Any
    fiber: Any
    sugar: Any
    sodium: Any
    confidence: Any
    ingredients: list[RawIngredient]
    cooking_method: str
    cookingMethod: str
    food_category: str
    foodCategory: str
    recommendations: str
    healthNotes: str
    health_notes: str
    serving_size: str
    servingSize: str
