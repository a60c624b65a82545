"""Food image analysis service using LLMs."""

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from urllib.parse import quote

from pydantic import ValidationError

from nutrilens.domain.analysis import MAX_NUTRIENTS, FoodAnalysis
from nutrilens.domain.errors import (
    AnalysisError,
    InputValidationError,
    SchemaValidationError,
)
from nutrilens.services.completion import CompletionClient

_logger = logging.getLogger(__name__)

_DATA_URI_PATTERN = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<payload>[A-Za-z0-9+/=\s]+)$"
)

MAPS_SEARCH_URL = "https://www.google.com/maps/search/?api=1&query="

_TEXT = {"type": "string"}

ANALYSIS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "foodName": _TEXT,
        "isSpoiled": {"type": "boolean"},
        "spoilageReason": {"anyOf": [_TEXT, {"type": "null"}]},
        "isHealthy": {"type": "boolean"},
        "healthSummary": _TEXT,
        "nutrients": {
            "type": "array",
            "maxItems": MAX_NUTRIENTS,
            "items": {
                "type": "object",
                "properties": {
                    "name": _TEXT,
                    "amount": _TEXT,
                    "importance": _TEXT,
                },
                "required": ["name", "amount", "importance"],
                "additionalProperties": False,
            },
        },
        "suitability": {
            "type": "object",
            "properties": {
                "diabetes": _TEXT,
                "allergies": _TEXT,
                "cholesterol": _TEXT,
                "heartHealth": _TEXT,
                "weightManagement": _TEXT,
                "gutHealth": _TEXT,
                "general": _TEXT,
            },
            "required": [
                "diabetes",
                "allergies",
                "cholesterol",
                "heartHealth",
                "weightManagement",
                "gutHealth",
                "general",
            ],
            "additionalProperties": False,
        },
        "availability": {
            "type": "object",
            "properties": {
                "description": _TEXT,
                "googleMapsQuery": _TEXT,
            },
            "required": ["description", "googleMapsQuery"],
            "additionalProperties": False,
        },
    },
    "required": [
        "foodName",
        "isSpoiled",
        "spoilageReason",
        "isHealthy",
        "healthSummary",
        "nutrients",
        "suitability",
        "availability",
    ],
    "additionalProperties": False,
}

ANALYSIS_PROMPT = """\
You are an expert nutritionist and food inspector. Analyze the attached image of a food item.

Based on the image, provide the following information:
1.  **Identify the food item.**
2.  **Spoilage Check:** Assess if the food appears rotten, moldy, or otherwise spoiled. \
Set 'isSpoiled' to true if it is, and provide a brief 'spoilageReason'.
3.  **Health Assessment:** Determine if the food is generally considered healthy. \
Set 'isHealthy' and provide a concise 'healthSummary'.
4.  **Nutritional Content (per 10g):** Provide a list of up to 20 important nutrients. \
For each, list its name, estimated amount per **10 grams**, and its importance in 3-4 words.
5.  **Dietary Suitability:** Provide specific advice for the following:
    - **Diabetes:** Can someone with diabetes eat this? What should they consider?
    - **Allergies:** Does it contain common allergens?
    - **Cholesterol:** How does it impact cholesterol levels?
    - **Heart Health:** How does it impact heart health?
    - **Weight Management:** Is it suitable for weight loss or weight gain?
    - **Gut Health:** How does it affect digestion and gut health?
    - **General:** Provide a general summary of its suitability for common diets.
6.  **Availability:** Describe where to buy it and provide a concise Google Maps search query.
"""


@dataclass
class FoodAnalysisService:
    """Service that sends food images for analysis and validates results."""

    client: CompletionClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def analyze(self, photo_data_uri: str) -> FoodAnalysis:
        """Analyze a food photo given as a base64 data URI."""
        validate_data_uri(photo_data_uri)
        try:
            raw = await self.client.complete(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                prompt=ANALYSIS_PROMPT,
                schema_name="food_analysis",
                schema=ANALYSIS_SCHEMA,
                image_data_url=photo_data_uri,
            )
        except Exception as exc:
            _logger.exception("Food image analysis request failed")
            raise AnalysisError(
                "Something went wrong while analyzing the image. Please try again."
            ) from exc
        try:
            return FoodAnalysis.model_validate(raw)
        except ValidationError as exc:
            _logger.warning("Food analysis output failed validation: %s", exc)
            raise SchemaValidationError(
                "The analysis service returned an unexpected response."
            ) from exc

    async def analyze_bytes(
        self, image_bytes: bytes, content_type: str | None = None
    ) -> FoodAnalysis:
        """Analyze raw image bytes, e.g. from a file upload."""
        if not image_bytes:
            raise InputValidationError("Please upload or take an image to analyze.")
        return await self.analyze(to_data_url(image_bytes, content_type))


def validate_data_uri(photo_data_uri: str | None) -> None:
    """Ensure the value is a data URI with a MIME type and base64 payload."""
    if not photo_data_uri:
        raise InputValidationError("Please upload or take an image to analyze.")
    match = _DATA_URI_PATTERN.match(photo_data_uri)
    if match is None:
        raise InputValidationError(
            "Image must be a data URI like data:<mimetype>;base64,<data>."
        )
    try:
        base64.b64decode("".join(match.group("payload").split()), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InputValidationError("Image payload is not valid base64.") from exc


def maps_url(query: str) -> str:
    """Build a Google Maps search link for a query."""
    return f"{MAPS_SEARCH_URL}{quote(query, safe='')}"


def to_data_url(image_bytes: bytes, content_type: str | None = None) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = content_type
    if not mime_type or not mime_type.startswith("image/"):
        mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "image/jpeg"
