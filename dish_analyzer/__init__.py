"""
Dish photo analyzer:
- lexicon: built-in Indian dish lookup by caption keywords
- normalizer: provider text -> validated nutrition record
- providers: Gemini / OpenAI / Replicate / Hugging Face adapters
- services: provider cascade
- main: FastAPI app
"""
