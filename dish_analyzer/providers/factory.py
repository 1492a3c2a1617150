"""Provider factory.

Builds the cascade from whatever credentials are set. Order is fixed:

    Gemini (vision JSON) → OpenAI (vision chat) → Replicate (caption) → Hugging Face (caption + infer)

A provider without a credential is left out entirely, so it is never called.
"""

import logging
from typing import List, Optional

from dish_analyzer.config import ProviderCredentials, get_credentials
from dish_analyzer.providers.base import ImageAnalysisProvider
from dish_analyzer.providers.gemini import GeminiProvider
from dish_analyzer.providers.huggingface import HuggingFaceProvider
from dish_analyzer.providers.openai_vision import OpenAIVisionProvider
from dish_analyzer.providers.replicate import ReplicateCaptionProvider

logger = logging.getLogger(__name__)


def build_providers(credentials: Optional[ProviderCredentials] = None) -> List[ImageAnalysisProvider]:
    credentials = credentials or get_credentials()
    providers: List[ImageAnalysisProvider] = []

    if credentials.gemini_api_key:
        providers.append(GeminiProvider(credentials.gemini_api_key))
    if credentials.openai_api_key:
        providers.append(OpenAIVisionProvider(credentials.openai_api_key))
    if credentials.replicate_api_token:
        providers.append(ReplicateCaptionProvider(credentials.replicate_api_token))
    if credentials.huggingface_token:
        providers.append(HuggingFaceProvider(credentials.huggingface_token))

    logger.info("Configured providers: %s", [p.name for p in providers] or "none")
    return providers
