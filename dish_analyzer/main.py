"""Main FastAPI application."""

import asyncio
import base64
import logging
import sys
import time
from typing import Optional

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from dish_analyzer.config import CORS_ORIGINS
from dish_analyzer.errors import ConfigurationError, InvalidImage
from dish_analyzer.services import analyze_image_base64

# -----------------------------------
# App init
# -----------------------------------

app = FastAPI()

logging.basicConfig(
    level=logging.INFO,
    stream=sys.stdout,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)

logger = logging.getLogger(__name__)

# -----------------------------------
# CORS
# -----------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

ALLOWED_UPLOAD_TYPES = ["image/jpeg", "image/png", "image/webp"]


class AnalyzeFoodImageBody(BaseModel):
    imageBase64: Optional[str] = None


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if any(err.get("type") == "json_invalid" for err in errors):
        message = "Request body must be valid JSON"
    elif errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid {field or 'request'}: {first.get('msg', 'validation error')}"
    else:
        message = "Invalid request"
    logger.info("[PIPELINE] %s rejected: %s", request.url.path, message)
    return _error(400, message)


async def _run_cascade(image_base64: str, source: str):
    total_start = time.time()
    logger.info("[PIPELINE] Starting %s, b64_len=%s", source, len(image_base64))

    try:
        record = await asyncio.to_thread(analyze_image_base64, image_base64)
    except InvalidImage as e:
        logger.info("[PIPELINE] %s rejected: %s", source, e)
        return _error(400, str(e))
    except ConfigurationError as e:
        logger.error("[PIPELINE] %s failed: %s", source, e)
        return _error(500, str(e))

    logger.info(
        "[PIPELINE] %s completed successfully, total time: %sms",
        source,
        round((time.time() - total_start) * 1000, 2),
    )
    return record.to_dict()


# -----------------------------------
# Endpoints
# -----------------------------------

@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/analyze-food-image")
async def analyze_food_image(body: AnalyzeFoodImageBody):
    """Identify the dish in a base64 / data-URI photo and estimate its nutrition."""
    if not body.imageBase64:
        return _error(400, "imageBase64 is required")
    return await _run_cascade(body.imageBase64, "/analyze-food-image")


@app.post("/analyze")
async def analyze_photo(image: UploadFile = File(None)):
    """Same as /analyze-food-image, for multipart uploads."""
    if not image:
        return _error(400, "Image field is required")

    if image.content_type not in ALLOWED_UPLOAD_TYPES:
        return _error(400, "Unsupported format (use jpeg/png/webp)")

    img_bytes = await image.read()
    if not img_bytes:
        return _error(400, "Image is empty")

    img_b64 = base64.b64encode(img_bytes).decode("utf-8")
    return await _run_cascade(f"data:{image.content_type};base64,{img_b64}", "/analyze")
