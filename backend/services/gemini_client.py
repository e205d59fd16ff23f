"""Google Gemini API wrapper with error handling."""

import json
import logging
from typing import Any

from google import genai
from google.genai import types

from config import settings
from services.errors import AIServiceError

logger = logging.getLogger(__name__)

_client: genai.Client | None = None


def get_client() -> genai.Client | None:
    global _client
    if not settings.gemini_api_key:
        logger.warning("No GEMINI_API_KEY set - Gemini features disabled")
        return None
    if _client is None:
        _client = genai.Client(api_key=settings.gemini_api_key)
    return _client


def document_part(document: bytes, mime_type: str) -> types.Part:
    """Inline the CV file so Gemini reads it directly."""
    return types.Part.from_bytes(data=document, mime_type=mime_type)


def _strip_fences(text: str) -> str:
    text = text.strip()
    # Strip markdown code fences if present
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()
    return text


async def generate_json(
    contents: list[Any],
    schema: types.Schema,
    temperature: float,
    client: genai.Client | None = None,
) -> Any:
    """Send contents to Gemini with a JSON response schema and decode the answer.

    Raises AIServiceError if Gemini is not configured, the call fails, or the
    response is not valid JSON.
    """
    client = client or get_client()
    if client is None:
        raise AIServiceError("Gemini is not configured (missing GEMINI_API_KEY)")

    try:
        response = await client.aio.models.generate_content(
            model=settings.gemini_model,
            contents=contents,
            config=types.GenerateContentConfig(
                temperature=temperature,
                response_mime_type="application/json",
                response_schema=schema,
            ),
        )
    except Exception as e:
        logger.error("Gemini API error: %s", e)
        raise AIServiceError(f"Gemini API error: {type(e).__name__}") from e

    text = _strip_fences(response.text or "")
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse Gemini response as JSON: %s", e)
        raise AIServiceError("Gemini returned a non-JSON response") from e
