"""
Built-in Indian dish lookup table.

Values are approximate totals for one typical serving:
- kcal
- protein (g)
- carbs (g)
- fat (g)

Rules are checked in order and the first keyword hit wins, so broader
keywords ("curry", "bread") sit below the dishes that usually mention them.
"""

from typing import Optional, Sequence

from dish_analyzer.models import DishRule, NutritionRecord

DEFAULT_MEAL = NutritionRecord("Indian Meal", 350, 12, 50, 10)

DISH_RULES = (
    DishRule(("dal", "lentil", "daal"), NutritionRecord("Dal Chawal", 380, 14, 62, 8)),
    DishRule(("rice", "chawal", "biryani"), NutritionRecord("Rice with Curry", 350, 10, 65, 6)),
    DishRule(("roti", "chapati", "paratha"), NutritionRecord("Roti with Sabzi", 320, 10, 48, 10)),
    DishRule(("paneer", "cottage cheese"), NutritionRecord("Paneer Curry", 280, 18, 8, 20)),
    DishRule(("idli", "dosa", "sambar"), NutritionRecord("Idli with Sambar", 220, 8, 38, 4)),
    DishRule(("curry", "sabzi", "vegetable"), NutritionRecord("Indian Curry", 250, 8, 30, 10)),
    DishRule(("bread", "naan"), NutritionRecord("Naan with Curry", 400, 12, 55, 14)),
)


def lookup(caption: Optional[str], rules: Sequence[DishRule] = DISH_RULES) -> NutritionRecord:
    """Map a free-text caption to a dish estimate. Never fails."""
    text = (caption or "").lower()
    for rule in rules:
        if rule.matches(text):
            return rule.record
    return DEFAULT_MEAL
