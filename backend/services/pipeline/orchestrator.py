"""Pipeline orchestrator: cache, extraction, scoring and feedback.

Flow:
    document bytes
      ├─ content_digest(bytes)                  → hash
      ├─ cache.lookup(hash)                     → hit? return it (no AI calls)
      ├─ extractor.extract(bytes, mime)         → RawMetrics
      ├─ scoring_engine.score(metrics)          → ScoringResult
      ├─ feedback.generate(bytes, mime, scores) → Feedback
      │        (FeedbackError + fallback → template Feedback, degraded, not cached)
      └─ cache.store(hash, result)              → AnalysisResult
"""

import logging

from models.responses import AnalysisResult, Feedback
from models.scoring import ScoringResult
from services import scoring_engine
from services.cache import ResultCache, content_digest
from services.errors import CacheError, FeedbackError
from services.pipeline.base import FeedbackGenerator, MetricsExtractor

logger = logging.getLogger(__name__)


class CVAnalyzer:
    """Runs one document through the analysis pipeline, at most once per digest."""

    def __init__(
        self,
        cache: ResultCache,
        extractor: MetricsExtractor,
        feedback: FeedbackGenerator,
        fallback_feedback: FeedbackGenerator | None = None,
    ) -> None:
        self.cache = cache
        self.extractor = extractor
        self.feedback = feedback
        self.fallback_feedback = fallback_feedback

    async def analyze(self, document: bytes, mime_type: str) -> AnalysisResult:
        """Analyze a CV, serving repeat documents from the cache.

        Raises ExtractionError / FeedbackError when the AI service fails,
        MalformedMetrics when the extracted metrics do not fit the schema.
        Nothing is cached unless every step completed.
        """
        content_hash = content_digest(document)

        cached = self._lookup(content_hash)
        if cached is not None:
            logger.info("Cache hit for %s", content_hash[:16])
            return cached
        logger.info("Cache miss for %s, running pipeline", content_hash[:16])

        # --- Stage 1: Extraction (external) ---
        metrics = await self.extractor.extract(document, mime_type)

        # --- Stage 2: Scoring (deterministic) ---
        scoring = scoring_engine.score(metrics)

        # --- Stage 3: Feedback (external, depends on scores) ---
        degraded = False
        try:
            feedback = await self.feedback.generate(document, mime_type, scoring)
        except FeedbackError as e:
            if self.fallback_feedback is None:
                raise
            logger.warning("AI feedback unavailable, using %s: %s", self.fallback_feedback.name, e)
            feedback = await self.fallback_feedback.generate(document, mime_type, scoring)
            degraded = True

        result = _to_analysis_result(content_hash, scoring, feedback, degraded)

        if degraded:
            # Retry the AI service on the next request for this document.
            return result
        return self._store(content_hash, result)

    def _lookup(self, content_hash: str) -> AnalysisResult | None:
        try:
            return self.cache.lookup(content_hash)
        except CacheError:
            logger.exception("Cache lookup failed for %s", content_hash[:16])
            return None

    def _store(self, content_hash: str, result: AnalysisResult) -> AnalysisResult:
        try:
            return self.cache.store(content_hash, result)
        except CacheError:
            logger.exception("Cache store failed for %s; returning uncached result", content_hash[:16])
            return result


def _to_analysis_result(
    content_hash: str,
    scoring: ScoringResult,
    feedback: Feedback,
    degraded: bool,
) -> AnalysisResult:
    return AnalysisResult(
        score=scoring.overall_score,
        categories=scoring.categories,
        breakdown=scoring.breakdown,
        hash=content_hash,
        summary=feedback.summary,
        career_path_note=feedback.career_path_note,
        strengths=feedback.strengths,
        weaknesses=feedback.weaknesses,
        recommendations=feedback.recommendations,
        degraded=degraded,
    )
