"""System prompts for meal analysis, in English and Hebrew."""
import json
from collections.abc import Mapping, Sequence
from typing import Any

from mealvision.models import Ingredient, MealAnalysisResult

ANALYSIS_PROMPT_EN = """You are a professional nutrition expert analyzing meal images. Analyze the image and return accurate JSON with this information:

{
  "name": "meal_name_in_english",
  "description": "brief_meal_description",
  "calories": total_calories_number,
  "protein": total_protein_grams,
  "carbs": total_carbs_grams,
  "fat": total_fat_grams,
  "fiber": total_fiber_grams,
  "sugar": total_sugar_grams,
  "sodium": total_sodium_milligrams,
  "ingredients": [
    {
      "name": "ingredient_name",
      "calories": calories_number,
      "protein": protein_grams,
      "carbs": carbs_grams,
      "fat": fat_grams,
      "fiber": fiber_grams,
      "sugar": sugar_grams,
      "sodium_mg": sodium_milligrams
    }
  ],
  "cooking_method": "cooking_method",
  "food_category": "food_category",
  "confidence": confidence_0_to_100,
  "recommendations": "health_recommendations_and_notes"
}

Important:
- Identify each ingredient separately with accurate nutritional values
- Calculate nutritional values based on estimated quantities
- Provide only numeric values (no text)
- Ensure ingredient totals match overall totals
- Be precise with portion estimates"""

ANALYSIS_PROMPT_HE = """אתה מומחה תזונה מקצועי המנתח תמונות של ארוחות. נתח את התמונה ותחזיר JSON מדויק עם המידע הבא:

{
  "name": "שם הארוחה בעברית",
  "description": "תיאור קצר של הארוחה",
  "calories": מספר_קלוריות_כולל,
  "protein": מספר_גרמי_חלבון,
  "carbs": מספר_גרמי_פחמימות,
  "fat": מספר_גרמי_שומן,
  "fiber": מספר_גרמי_סיבים,
  "sugar": מספר_גרמי_סוכר,
  "sodium": מספר_מיליגרם_נתרן,
  "ingredients": [
    {
      "name": "שם המרכיב בעברית",
      "calories": מספר_קלוריות,
      "protein": מספר_גרמי_חלבון,
      "carbs": מספר_גרמי_פחמימות,
      "fat": מספר_גרמי_שומן,
      "fiber": מספר_גרמי_סיבים,
      "sugar": מספר_גרמי_סוכר,
      "sodium_mg": מספר_מיליגרם_נתרן
    }
  ],
  "cooking_method": "שיטת_הכנה",
  "food_category": "קטגוריית_מזון",
  "confidence": מספר_בין_0_ל_100,
  "recommendations": "המלצות_בריאותיות_והערות"
}

חשוב:
- זהה כל מרכיב בנפרד עם ערכים תזונתיים מדויקים
- חשב ערכים תזונתיים על בסיס כמויות מוערכות
- תן ערכים מספריים בלבד (לא טקסט)
- ודא שסכום המרכיבים תואם לסך הכולל
- השתמש בשמות עבריים למרכיבים"""

# (english, hebrew) pairs
_CONTEXT_HEADER = ("\n\nAdditional context:\n", "\n\nהקשר נוסף:\n")
_CONTEXT_FEEDBACK = ('- User provided feedback: "{}"\n', '- המשתמש הוסיף הערה: "{}"\n')
_CONTEXT_EDITED = ("- User edited {} ingredients:\n", "- המשתמש ערך {} מרכיבים:\n")
_CONTEXT_FOOTER = (
    "\nPlease incorporate this information when updating the analysis.",
    "\nאנא התחשב במידע זה בעת עדכון הניתוח.",
)
_UPDATE_INTRO = (
    "You are a nutrition expert updating an existing meal analysis based on user feedback.",
    "אתה מומחה תזונה המעדכן ניתוח ארוחה קיים על בסיס משוב מהמשתמש.",
)
_UPDATE_ORIGINAL = ("\n\nOriginal analysis:\n{}", "\n\nניתוח מקורי:\n{}")
_UPDATE_INSTRUCTION = (
    '\n\nUser feedback: "{}"\n\nPlease update the analysis according to the feedback '
    "and return updated JSON in the same format.",
    '\n\nמשוב מהמשתמש: "{}"\n\nאנא עדכן את הניתוח בהתאם למשוב והחזר JSON מעודכן באותו פורמט.',
)


def _pick(pair: tuple[str, str], is_hebrew: bool) -> str:
    return pair[1] if is_hebrew else pair[0]


def _fmt_number(value: float) -> str:
    return f"{value:g}"


def _edited_line(position: int, ingredient: Ingredient) -> str:
    return (
        f"  {position}. {ingredient.name}: {_fmt_number(ingredient.calories)} cal, "
        f"{_fmt_number(ingredient.protein)}g protein\n"
    )


def build_analysis_prompt(is_hebrew: bool) -> str:
    return ANALYSIS_PROMPT_HE if is_hebrew else ANALYSIS_PROMPT_EN


def build_update_context(
    update_text: str | None,
    edited_ingredients: Sequence[Ingredient],
    is_hebrew: bool = False,
) -> str:
    """Describe the user's feedback and hand-edited ingredients for the model."""
    context = _pick(_CONTEXT_HEADER, is_hebrew)
    if update_text:
        context += _pick(_CONTEXT_FEEDBACK, is_hebrew).format(update_text)
    if edited_ingredients:
        context += _pick(_CONTEXT_EDITED, is_hebrew).format(len(edited_ingredients))
        context += "".join(
            map(lambda pair: _edited_line(*pair), enumerate(edited_ingredients, start=1))
        )
    return context + _pick(_CONTEXT_FOOTER, is_hebrew)


def serialize_analysis(analysis: MealAnalysisResult | Mapping[str, Any]) -> str:
    match analysis:
        case MealAnalysisResult():
            data: Any = analysis.to_dict()
        case _:
            data = dict(analysis)
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def build_update_prompt(
    original_analysis: MealAnalysisResult | Mapping[str, Any],
    update_text: str,
    is_hebrew: bool,
) -> str:
    return (
        _pick(_UPDATE_INTRO, is_hebrew)
        + _pick(_UPDATE_ORIGINAL, is_hebrew).format(serialize_analysis(original_analysis))
        + _pick(_UPDATE_INSTRUCTION, is_hebrew).format(update_text)
    )
