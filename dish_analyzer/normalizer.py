"""Turn raw provider text into a validated NutritionRecord."""

import logging
from typing import Any, Dict, Optional

from dish_analyzer.errors import UnidentifiableDish
from dish_analyzer.lexicon import lookup
from dish_analyzer.models import NutritionRecord
from dish_analyzer.utils import extract_json, to_int

logger = logging.getLogger(__name__)

DEFAULT_CALORIES = 350
DEFAULT_PROTEIN_G = 12
DEFAULT_CARBS_G = 50
DEFAULT_FAT_G = 10

UNKNOWN_NAME = "unknown"
MIN_NAME_LENGTH = 2


def _parse(raw_text: str) -> Dict[str, Any]:
    try:
        return extract_json(raw_text)
    except ValueError as e:
        logger.info("Provider output is not usable JSON (%s)", e)
        return {}


def normalize(raw_text: str, caption: Optional[str] = None) -> NutritionRecord:
    """
    Validate and repair a provider answer.

    A caption, when present, beats an uncertain model name: empty or "unknown"
    names are replaced by the lexicon entry for the caption. Without a caption
    a nameless answer raises UnidentifiableDish.

    If the model named the dish but gave no calories, the calories become 350
    and each macro that came back as zero is filled with its default.
    """
    parsed = _parse(raw_text or "")

    meal_name = str(parsed.get("meal_name") or "").strip()
    calories = to_int(parsed.get("calories"))
    protein_g = to_int(parsed.get("protein_g"))
    carbs_g = to_int(parsed.get("carbs_g"))
    fat_g = to_int(parsed.get("fat_g"))

    if (not meal_name or meal_name.lower() == UNKNOWN_NAME) and caption:
        logger.info("No dish name from provider, classifying caption %r", caption)
        return lookup(caption)

    if len(meal_name) < MIN_NAME_LENGTH:
        if caption:
            return lookup(caption)
        raise UnidentifiableDish()

    if calories <= 0:
        logger.info("Provider named %r without calories, filling defaults", meal_name)
        calories = DEFAULT_CALORIES
        protein_g = protein_g if protein_g > 0 else DEFAULT_PROTEIN_G
        carbs_g = carbs_g if carbs_g > 0 else DEFAULT_CARBS_G
        fat_g = fat_g if fat_g > 0 else DEFAULT_FAT_G

    return NutritionRecord(
        name=meal_name,
        calories=calories,
        protein_g=max(protein_g, 0),
        carbs_g=max(carbs_g, 0),
        fat_g=max(fat_g, 0),
    )
