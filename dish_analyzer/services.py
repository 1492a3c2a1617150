"""Cascade over the AI providers: first usable nutrition record wins."""

import logging
import time
from typing import List, Optional, Sequence

from dish_analyzer.config import CREDENTIAL_ENV_VARS
from dish_analyzer.errors import (
    AdapterFailure,
    AllProvidersFailed,
    ConfigurationError,
    UnidentifiableDish,
)
from dish_analyzer.image_preprocess import prepare_image
from dish_analyzer.lexicon import lookup
from dish_analyzer.models import AnalysisRequest, Caption, NutritionRecord
from dish_analyzer.normalizer import normalize
from dish_analyzer.providers import ImageAnalysisProvider, ProviderOutput, build_providers

logger = logging.getLogger(__name__)

SETUP_HINT = "Set one of these environment variables: " + ", ".join(CREDENTIAL_ENV_VARS) + "."


def to_record(output: ProviderOutput) -> NutritionRecord:
    """Captions go straight to the lexicon; everything else through the normalizer."""
    if isinstance(output, Caption):
        return lookup(output.text)
    return normalize(output.text or "{}", output.caption)


class FoodImageAnalyzer:
    """
    Tries providers strictly in order, one at a time.

    A provider error or an answer the normalizer cannot use just moves the
    cascade on; only running out of providers is an error for the caller.
    """

    def __init__(self, providers: Sequence[ImageAnalysisProvider]):
        self.providers = list(providers)

    def analyze(self, request: AnalysisRequest) -> NutritionRecord:
        if not self.providers:
            raise ConfigurationError(f"AI detection is not configured. {SETUP_HINT}")

        failures: List[Exception] = []
        for provider in self.providers:
            t = time.time()
            logger.info("[PIPELINE] Trying provider %s", provider.name)
            try:
                record = to_record(provider.analyze(request))
            except (AdapterFailure, UnidentifiableDish) as e:
                logger.warning(
                    "[PIPELINE] %s failed in %sms: %s",
                    provider.name,
                    round((time.time() - t) * 1000, 2),
                    e,
                )
                failures.append(e)
                continue
            except Exception as e:
                logger.exception("[PIPELINE] %s raised unexpectedly", provider.name)
                failures.append(AdapterFailure(provider.name, f"unexpected error: {e}"))
                continue

            logger.info(
                "[PIPELINE] %s succeeded in %sms: %s",
                provider.name,
                round((time.time() - t) * 1000, 2),
                record,
            )
            return record

        raise AllProvidersFailed(f"AI detection failed. {SETUP_HINT}", failures)


def analyze_image_base64(
    image_base64: str,
    providers: Optional[Sequence[ImageAnalysisProvider]] = None,
) -> NutritionRecord:
    """Entry point for callers holding a base64 string or data URI."""
    request = AnalysisRequest.from_image_base64(image_base64)
    if providers is None:
        providers = build_providers()
    if providers:
        request = prepare_image(request)
    return FoodImageAnalyzer(providers).analyze(request)
