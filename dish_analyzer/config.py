import os
from dataclasses import dataclass
from typing import Optional


def _parse_list(raw: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def _parse_cors_origins(raw: str) -> list[str]:
    origins = list(_parse_list(raw))
    return origins or ["*"]


CORS_ORIGINS = _parse_cors_origins(os.getenv("CORS_ORIGINS", "*"))

# -----------------------------------
# Provider credentials
# -----------------------------------

# Read per request, not at import: a missing value disables that provider.
GEMINI_API_KEY_ENV = "GEMINI_API_KEY"
OPENAI_API_KEY_ENV = "OPENAI_API_KEY"
REPLICATE_API_TOKEN_ENV = "REPLICATE_API_TOKEN"
HUGGINGFACE_TOKEN_ENV = "HUGGINGFACE_TOKEN"

CREDENTIAL_ENV_VARS = (
    GEMINI_API_KEY_ENV,
    OPENAI_API_KEY_ENV,
    REPLICATE_API_TOKEN_ENV,
    HUGGINGFACE_TOKEN_ENV,
)


@dataclass(frozen=True)
class ProviderCredentials:
    gemini_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    replicate_api_token: Optional[str] = None
    huggingface_token: Optional[str] = None

    @property
    def any_configured(self) -> bool:
        return any(
            (
                self.gemini_api_key,
                self.openai_api_key,
                self.replicate_api_token,
                self.huggingface_token,
            )
        )


def _env(name: str) -> Optional[str]:
    value = (os.getenv(name) or "").strip()
    return value or None


def get_credentials() -> ProviderCredentials:
    """Snapshot provider credentials from the process environment."""
    return ProviderCredentials(
        gemini_api_key=_env(GEMINI_API_KEY_ENV),
        openai_api_key=_env(OPENAI_API_KEY_ENV),
        replicate_api_token=_env(REPLICATE_API_TOKEN_ENV),
        huggingface_token=_env(HUGGINGFACE_TOKEN_ENV),
    )


# -----------------------------------
# Network
# -----------------------------------

# PROVIDER_TIMEOUT_S: upper bound (seconds) for a single provider HTTP call.
# Replicate is asked to hold the prediction open for up to 60s, so keep this above that.
PROVIDER_TIMEOUT_S = float(os.getenv("PROVIDER_TIMEOUT_S", "75"))

# -----------------------------------
# Models configuration
# -----------------------------------

# GEMINI_MODELS: tried in order until one answers with text
GEMINI_MODELS = _parse_list(
    os.getenv("GEMINI_MODELS", "gemini-1.5-flash,gemini-2.0-flash,gemini-2.5-flash")
)

OPENAI_VISION_MODEL = os.getenv("OPENAI_VISION_MODEL", "gpt-4o-mini")

REPLICATE_API_URL = os.getenv("REPLICATE_API_URL", "https://api.replicate.com/v1/predictions")
# BLIP image captioning
REPLICATE_BLIP_VERSION = os.getenv(
    "REPLICATE_BLIP_VERSION",
    "2e1dddc8621f72155f24cf2e0adbde548458d3cab9f00c0139eea840d0ac4746",
)
# REPLICATE_WAIT_S: how long Replicate holds the request open for a synchronous result
REPLICATE_WAIT_S = int(os.getenv("REPLICATE_WAIT_S", "60"))

HF_INFERENCE_URL = os.getenv("HF_INFERENCE_URL", "https://api-inference.huggingface.co/models")
# HF_CAPTION_MODELS: captioning models, tried in order (retired ones are skipped)
HF_CAPTION_MODELS = _parse_list(
    os.getenv(
        "HF_CAPTION_MODELS",
        "Salesforce/blip-image-captioning-base,"
        "Salesforce/blip-image-captioning-large,"
        "nlpconnect/vit-gpt2-image-captioning,"
        "Microsoft/git-large-coco",
    )
)
# HF_TEXT_MODEL: turns a caption into the nutrition JSON
HF_TEXT_MODEL = os.getenv("HF_TEXT_MODEL", "HuggingFaceH4/zephyr-7b-beta")
# HF_LOADING_RETRY_DELAY: seconds to wait before retrying a model that is still loading
HF_LOADING_RETRY_DELAY = float(os.getenv("HF_LOADING_RETRY_DELAY", "3"))

# -----------------------------------
# Preprocessing
# -----------------------------------

# USE_BACKEND_RESIZE: shrink oversized uploads before sending them to providers
USE_BACKEND_RESIZE = os.getenv("USE_BACKEND_RESIZE", "true").lower() == "true"

# BACKEND_MAX_SIDE_PX: longer side of image after resize
BACKEND_MAX_SIDE_PX = int(os.getenv("BACKEND_MAX_SIDE_PX", "1024"))
