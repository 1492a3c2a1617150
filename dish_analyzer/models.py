"""Data types shared by the lexicon, normalizer, providers and cascade."""

import base64
import binascii
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from dish_analyzer.errors import InvalidImage

DEFAULT_MIME_TYPE = "image/jpeg"

_DATA_URI_RE = re.compile(r"^data:([^;]+);base64,(.+)$", re.DOTALL)


@dataclass(frozen=True)
class NutritionRecord:
    name: str
    calories: int
    protein_g: int
    carbs_g: int
    fat_g: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "meal_name": self.name,
            "calories": self.calories,
            "protein_g": self.protein_g,
            "carbs_g": self.carbs_g,
            "fat_g": self.fat_g,
        }


@dataclass(frozen=True)
class DishRule:
    keywords: Tuple[str, ...]
    record: NutritionRecord

    def matches(self, text: str) -> bool:
        return any(keyword in text for keyword in self.keywords)


@dataclass(frozen=True)
class RawAnalysis:
    """Structured provider text, plus the caption it was inferred from (if any)."""

    text: str
    caption: Optional[str] = None


@dataclass(frozen=True)
class Caption:
    """Plain caption from a provider that cannot estimate nutrition itself."""

    text: str


@dataclass(frozen=True)
class AnalysisRequest:
    """
    One meal photo, kept in the encodings the providers need:
    raw bytes (Hugging Face), base64 (Gemini) and a data URI (OpenAI, Replicate).
    """

    image_bytes: bytes
    mime_type: str
    base64: str

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64}"

    @classmethod
    def from_bytes(cls, image_bytes: bytes, mime_type: str = DEFAULT_MIME_TYPE) -> "AnalysisRequest":
        encoded = base64.b64encode(image_bytes).decode("utf-8")
        return cls(image_bytes=image_bytes, mime_type=mime_type or DEFAULT_MIME_TYPE, base64=encoded)

    @classmethod
    def from_image_base64(cls, value: str) -> "AnalysisRequest":
        """
        Build a request from raw base64 or a ``data:<mime>;base64,<data>`` URI.

        The MIME type defaults to image/jpeg when there is no (parsable) prefix.
        """
        if not value:
            raise InvalidImage("imageBase64 is required")

        mime_type = DEFAULT_MIME_TYPE
        data = value.strip()
        if data.startswith("data:"):
            match = _DATA_URI_RE.match(data)
            if match:
                mime_type = match.group(1)
                data = match.group(2)

        try:
            image_bytes = base64.b64decode(data, validate=False)
        except (binascii.Error, ValueError) as e:
            raise InvalidImage(f"imageBase64 is not valid base64: {e}") from e

        if not image_bytes:
            raise InvalidImage("imageBase64 decoded to an empty image")

        return cls(image_bytes=image_bytes, mime_type=mime_type, base64=data)
