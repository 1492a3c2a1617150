"""OpenAI chat-completion vision provider."""

import logging

import openai

from dish_analyzer.config import OPENAI_VISION_MODEL
from dish_analyzer.errors import AdapterFailure
from dish_analyzer.models import AnalysisRequest, RawAnalysis
from dish_analyzer.openai_client import get_openai_client
from dish_analyzer.prompts import VISION_CHAT_PROMPT
from dish_analyzer.providers.base import ImageAnalysisProvider

logger = logging.getLogger(__name__)


class OpenAIVisionProvider(ImageAnalysisProvider):
    name = "OpenAI"

    def __init__(self, api_key: str, model: str = OPENAI_VISION_MODEL, client=None):
        self.model = model
        self.client = client or get_openai_client(api_key)

    def analyze(self, request: AnalysisRequest) -> RawAnalysis:
        logger.info(
            "Analyzing image with content_type=%s, b64_len=%s, model_used=%s",
            request.mime_type,
            len(request.base64),
            self.model,
        )
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "image_url", "image_url": {"url": request.data_uri}},
                            {"type": "text", "text": VISION_CHAT_PROMPT},
                        ],
                    }
                ],
                max_tokens=256,
                temperature=0.1,
            )
        except openai.OpenAIError as e:
            raise AdapterFailure(self.name, str(e), getattr(e, "status_code", None)) from e

        text = (response.choices[0].message.content or "").strip() if response.choices else ""
        if not text:
            raise AdapterFailure(self.name, "empty response")

        logger.info("OpenAI raw response: %s", text)
        return RawAnalysis(text=text)
