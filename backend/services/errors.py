"""Exception hierarchy shared by the scoring engine, cache and AI pipeline."""


class CVScoreError(Exception):
    """Base class for every error raised by this service."""


class MalformedMetrics(CVScoreError):
    """The metrics record is missing a field or has one of the wrong type/range."""

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or []


class ScoringError(CVScoreError):
    """The scoring engine itself failed on well-formed metrics."""


class AIServiceError(CVScoreError):
    """The external AI service failed, timed out, or answered garbage."""


class ExtractionError(AIServiceError):
    """Metric extraction from the CV document failed."""


class FeedbackError(AIServiceError):
    """Narrative feedback generation failed."""


class CacheError(CVScoreError):
    """The result cache storage is unavailable."""
