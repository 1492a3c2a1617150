"""Replicate BLIP captioning: returns a caption only, never nutrition."""

import logging

import requests

from dish_analyzer.config import (
    PROVIDER_TIMEOUT_S,
    REPLICATE_API_URL,
    REPLICATE_BLIP_VERSION,
    REPLICATE_WAIT_S,
)
from dish_analyzer.errors import AdapterFailure
from dish_analyzer.models import AnalysisRequest, Caption
from dish_analyzer.providers.base import ImageAnalysisProvider

logger = logging.getLogger(__name__)


def _caption_from_output(output) -> str:
    if isinstance(output, str):
        return output.strip()
    if isinstance(output, list) and output and isinstance(output[0], str):
        return output[0].strip()
    return ""


class ReplicateCaptionProvider(ImageAnalysisProvider):
    name = "Replicate"

    def __init__(self, api_token: str, version: str = REPLICATE_BLIP_VERSION, session=None):
        self.api_token = api_token
        self.version = version
        self.session = session or requests

    def analyze(self, request: AnalysisRequest) -> Caption:
        try:
            response = self.session.post(
                REPLICATE_API_URL,
                headers={
                    "Authorization": f"Bearer {self.api_token}",
                    "Content-Type": "application/json",
                    # Synchronous mode: hold the connection until the prediction finishes.
                    "Prefer": f"wait={REPLICATE_WAIT_S}",
                },
                json={"version": self.version, "input": {"image": request.data_uri}},
                timeout=PROVIDER_TIMEOUT_S,
            )
        except requests.RequestException as e:
            raise AdapterFailure(self.name, str(e)) from e

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if not response.ok:
            detail = payload.get("detail") if isinstance(payload, dict) else None
            raise AdapterFailure(self.name, detail or f"Replicate: {response.status_code}", response.status_code)

        caption = _caption_from_output(payload.get("output") if isinstance(payload, dict) else None)
        if not caption:
            status = payload.get("status") if isinstance(payload, dict) else None
            raise AdapterFailure(self.name, f"BLIP returned empty caption (status={status})")

        logger.info("Replicate caption: %s", caption)
        return Caption(text=caption)
