"""Shared dependencies for API routes."""

from fastapi import Depends, Request

from config import settings
from services.cache import ResultCache
from services.gemini_client import get_client
from services.pipeline.feedback_generator import GeminiFeedbackGenerator, TemplateFeedbackGenerator
from services.pipeline.metrics_extractor import GeminiMetricsExtractor
from services.pipeline.orchestrator import CVAnalyzer


def get_cache(request: Request) -> ResultCache:
    return request.app.state.cache


def get_analyzer(cache: ResultCache = Depends(get_cache)) -> CVAnalyzer:
    client = get_client()
    return CVAnalyzer(
        cache=cache,
        extractor=GeminiMetricsExtractor(client),
        feedback=GeminiFeedbackGenerator(client),
        fallback_feedback=TemplateFeedbackGenerator() if settings.feedback_fallback else None,
    )
