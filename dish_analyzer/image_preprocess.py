"""Backend-side resize of uploaded meal photos.

- longer side capped at BACKEND_MAX_SIDE_PX (toggle: USE_BACKEND_RESIZE)
- images Pillow cannot read are passed through untouched
"""

import logging
import time
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from dish_analyzer.config import BACKEND_MAX_SIDE_PX, USE_BACKEND_RESIZE
from dish_analyzer.models import AnalysisRequest

logger = logging.getLogger(__name__)


def resize_image_bytes(image_bytes: bytes, max_side: int = BACKEND_MAX_SIDE_PX) -> bytes:
    """Shrink to max_side (longer side) and re-encode as JPEG. Returns input if already small."""
    with Image.open(BytesIO(image_bytes)) as img:
        if max(img.size) <= max_side:
            return image_bytes
        in_res = img.size
        img = img.convert("RGB")
        img.thumbnail((max_side, max_side))
        out = BytesIO()
        img.save(out, format="JPEG", quality=85)
        logger.info("Resized image %s -> %s", in_res, img.size)
        return out.getvalue()


def prepare_image(request: AnalysisRequest, enabled: bool = USE_BACKEND_RESIZE) -> AnalysisRequest:
    if not enabled:
        return request

    t = time.time()
    try:
        resized = resize_image_bytes(request.image_bytes)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        logger.warning("Backend resize skipped, image not readable by Pillow: %s", e)
        return request

    if resized is request.image_bytes:
        return request

    logger.info("Backend resize done in %sms", round((time.time() - t) * 1000, 2))
    return AnalysisRequest.from_bytes(resized, "image/jpeg")
