"""
Hugging Face Inference API provider, in two stages:

1) caption the image with the first captioning model that answers
2) ask a text model to turn that caption into the nutrition JSON

Stage 2 is best effort: if it fails, the caption alone is returned and the
normalizer classifies it with the lexicon.
"""

import logging
import time
from typing import Any, Callable, Optional, Sequence

import requests

from dish_analyzer.config import (
    HF_CAPTION_MODELS,
    HF_INFERENCE_URL,
    HF_LOADING_RETRY_DELAY,
    HF_TEXT_MODEL,
    PROVIDER_TIMEOUT_S,
)
from dish_analyzer.errors import AdapterFailure
from dish_analyzer.models import AnalysisRequest, RawAnalysis
from dish_analyzer.prompts import CAPTION_TO_JSON_PROMPT
from dish_analyzer.providers.base import ImageAnalysisProvider

logger = logging.getLogger(__name__)

# Model removed from the serverless API: permanent, go to the next model.
MODEL_RETIRED_STATUS = 410
# Model is cold and still loading: transient, retry once after a delay.
MODEL_LOADING_STATUS = 503


def _generated_text(payload: Any) -> str:
    if isinstance(payload, str):
        return payload.strip()
    if isinstance(payload, list) and payload and isinstance(payload[0], dict):
        return str(payload[0].get("generated_text") or "").strip()
    if isinstance(payload, dict):
        return str(payload.get("generated_text") or "").strip()
    return ""


class HuggingFaceProvider(ImageAnalysisProvider):
    name = "HuggingFace"

    def __init__(
        self,
        token: str,
        caption_models: Sequence[str] = HF_CAPTION_MODELS,
        text_model: str = HF_TEXT_MODEL,
        session=None,
        sleep: Callable[[float], None] = time.sleep,
        retry_delay: float = HF_LOADING_RETRY_DELAY,
    ):
        self.token = token
        self.caption_models = tuple(caption_models)
        self.text_model = text_model
        self.session = session or requests
        self.sleep = sleep
        self.retry_delay = retry_delay

    def _post(self, model: str, **kwargs):
        headers = {"Authorization": f"Bearer {self.token}"}
        headers.update(kwargs.pop("headers", {}))
        return self.session.post(
            f"{HF_INFERENCE_URL}/{model}",
            headers=headers,
            timeout=PROVIDER_TIMEOUT_S,
            **kwargs,
        )

    def _caption_once(self, model: str, request: AnalysisRequest):
        return self._post(
            model,
            headers={"Content-Type": "application/octet-stream"},
            data=request.image_bytes,
        )

    def _caption(self, request: AnalysisRequest) -> str:
        for model in self.caption_models:
            try:
                response = self._caption_once(model, request)
                if response.status_code == MODEL_RETIRED_STATUS:
                    logger.info("HF caption model %s is retired, skipping", model)
                    continue
                if response.status_code == MODEL_LOADING_STATUS:
                    logger.info("HF caption model %s is loading, retrying in %ss", model, self.retry_delay)
                    self.sleep(self.retry_delay)
                    response = self._caption_once(model, request)
                if not response.ok:
                    logger.info("HF caption model %s returned status=%s", model, response.status_code)
                    continue
                caption = _generated_text(response.json())
            except (requests.RequestException, ValueError) as e:
                logger.info("HF caption model %s failed: %s", model, e)
                continue

            if caption:
                logger.info("HF caption from %s: %s", model, caption)
                return caption

        raise AdapterFailure(self.name, "no captioning model produced a caption")

    def _infer(self, caption: str) -> Optional[str]:
        try:
            response = self._post(
                self.text_model,
                headers={"Content-Type": "application/json"},
                json={
                    "inputs": CAPTION_TO_JSON_PROMPT.format(caption=caption),
                    "parameters": {"max_new_tokens": 120, "return_full_text": False},
                },
            )
            if not response.ok:
                logger.info("HF text model %s returned status=%s", self.text_model, response.status_code)
                return None
            return _generated_text(response.json()) or None
        except (requests.RequestException, ValueError) as e:
            logger.info("HF text model %s failed: %s", self.text_model, e)
            return None

    def analyze(self, request: AnalysisRequest) -> RawAnalysis:
        caption = self._caption(request)
        text = self._infer(caption)
        return RawAnalysis(text=text or "", caption=caption)
