"""Prompts for the AI providers."""

NUTRITION_JSON_SHAPE = '{"meal_name":"exact dish name","calories":300,"protein_g":12,"carbs_g":45,"fat_g":8}'

VISION_JSON_PROMPT = f"""Identify the Indian food in this image. Name the dish (e.g. Dal Chawal, Paneer Tikka, Rice with Curry). Estimate calories, protein_g, carbs_g, fat_g for the visible portion.
Return ONLY valid JSON: {NUTRITION_JSON_SHAPE}"""

VISION_CHAT_PROMPT = (
    "Identify the Indian food in this image. Name the dish (e.g. Dal Chawal, Paneer Tikka). "
    "Estimate calories, protein_g, carbs_g, fat_g. "
    'Return ONLY valid JSON: {"meal_name":"name","calories":N,"protein_g":N,"carbs_g":N,"fat_g":N}'
)

CAPTION_TO_JSON_PROMPT = (
    'Food: "{caption}". Give Indian dish name and nutrition. '
    'Reply with ONLY valid JSON: {{"meal_name":"name","calories":N,"protein_g":N,"carbs_g":N,"fat_g":N}}'
)
