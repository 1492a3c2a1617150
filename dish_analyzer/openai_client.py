import logging
from functools import lru_cache

from openai import OpenAI

from dish_analyzer.config import PROVIDER_TIMEOUT_S

logger = logging.getLogger(__name__)


@lru_cache
def get_openai_client(api_key: str) -> OpenAI:
    if not api_key:
        raise RuntimeError("OPENAI_API_KEY is not set")
    logger.info("Initializing OpenAI client")
    return OpenAI(api_key=api_key, timeout=PROVIDER_TIMEOUT_S, max_retries=0)
