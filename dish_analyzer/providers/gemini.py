"""Gemini vision provider: image + prompt in, nutrition JSON text out."""

import logging
from typing import Optional, Sequence

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from dish_analyzer.config import GEMINI_MODELS, PROVIDER_TIMEOUT_S
from dish_analyzer.errors import AdapterFailure
from dish_analyzer.models import AnalysisRequest, RawAnalysis
from dish_analyzer.prompts import VISION_JSON_PROMPT
from dish_analyzer.providers.base import ImageAnalysisProvider

logger = logging.getLogger(__name__)


def _finish_reason(response) -> str:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return "No response"
    reason = getattr(candidates[0], "finish_reason", None)
    return str(reason) if reason else "No response"


class GeminiProvider(ImageAnalysisProvider):
    name = "Gemini"

    def __init__(self, api_key: str, models: Sequence[str] = GEMINI_MODELS, client=None):
        self.models = tuple(models)
        self.client = client or genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(PROVIDER_TIMEOUT_S * 1000)),
        )

    def _generate(self, model: str, request: AnalysisRequest) -> str:
        response = self.client.models.generate_content(
            model=model,
            contents=[
                types.Part.from_bytes(data=request.image_bytes, mime_type=request.mime_type),
                VISION_JSON_PROMPT,
            ],
            config=types.GenerateContentConfig(temperature=0.1, max_output_tokens=512),
        )
        text = (response.text or "").strip()
        if not text:
            raise AdapterFailure(self.name, f"{model} blocked or empty: {_finish_reason(response)}")
        return text

    def analyze(self, request: AnalysisRequest) -> RawAnalysis:
        last_error: Optional[AdapterFailure] = None

        for model in self.models:
            try:
                text = self._generate(model, request)
            except AdapterFailure as e:
                last_error = e
            except genai_errors.APIError as e:
                last_error = AdapterFailure(self.name, f"{model}: {e.message or e}", e.code)
            except Exception as e:
                last_error = AdapterFailure(self.name, f"{model}: {e}")
            else:
                logger.info("Gemini model=%s answered, length: %s", model, len(text))
                return RawAnalysis(text=text)

            logger.info("Gemini model=%s unusable, trying next: %s", model, last_error)

        raise last_error or AdapterFailure(self.name, "no models configured")
