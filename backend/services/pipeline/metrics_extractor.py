"""Gemini-backed metric extraction.

Sends the CV file inline with a fixed JSON schema at temperature 0 and
validates the answer into RawMetrics. The answer is not corrected or
sanity-checked beyond the schema.
"""

import logging

from google import genai

from config import settings
from models.metrics import RawMetrics
from services import gemini_client, prompt_builder
from services.errors import AIServiceError, ExtractionError
from services.pipeline.base import MetricsExtractor

logger = logging.getLogger(__name__)


class GeminiMetricsExtractor(MetricsExtractor):
    name = "gemini_metrics_extractor"

    def __init__(self, client: genai.Client | None = None) -> None:
        self._client = client

    async def extract(self, document: bytes, mime_type: str) -> RawMetrics:
        try:
            data = await gemini_client.generate_json(
                contents=[
                    gemini_client.document_part(document, mime_type),
                    prompt_builder.build_extraction_prompt(),
                ],
                schema=prompt_builder.RAW_METRICS_SCHEMA,
                temperature=settings.extraction_temperature,
                client=self._client,
            )
        except AIServiceError as e:
            raise ExtractionError(f"Metric extraction failed: {e}") from e

        logger.info("Extracted metrics for %d-byte %s document", len(document), mime_type)
        return RawMetrics.parse(data)
