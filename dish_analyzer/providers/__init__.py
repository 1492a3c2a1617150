"""
AI provider adapters, in cascade order:
- gemini: vision model answering with nutrition JSON (model list with fallthrough)
- openai_vision: chat-completion vision model, single model
- replicate: BLIP caption only
- huggingface: caption, then caption → nutrition JSON
"""

from dish_analyzer.providers.base import ImageAnalysisProvider, ProviderOutput
from dish_analyzer.providers.factory import build_providers

__all__ = ["ImageAnalysisProvider", "ProviderOutput", "build_providers"]
