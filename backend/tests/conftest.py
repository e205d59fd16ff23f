"""Shared test configuration, pytest markers and pipeline fakes."""

import pytest

from models.metrics import RawMetrics
from models.responses import Feedback, Recommendation
from models.scoring import ScoringResult
from services.errors import ExtractionError, FeedbackError
from services.pipeline.base import FeedbackGenerator, MetricsExtractor


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: calls the real Gemini API (needs GEMINI_API_KEY)"
    )


BASELINE_METRICS = {
    "pageCount": 0,
    "hasSections": False,
    "usesBullets": False,
    "yearsExperience": 0,
    "jobCount": 0,
    "skillsCount": 0,
    "hasLogrosCuantificables": 0,
    "hasEducacionUniversitaria": False,
    "hasEducacionTerciaria": False,
    "hasCertificaciones": 0,
    "hasDatosContacto": False,
    "hasResumen": False,
    "hasFechas": False,
    "errorOrtograficoCount": 0,
    "wordCount": 0,
    "usesProfessionalLanguage": False,
    "isAtsFriendly": False,
    "industryKeywordsCount": 0,
}

STRONG_METRICS = {
    "pageCount": 2,
    "hasSections": True,
    "usesBullets": True,
    "yearsExperience": 8,
    "jobCount": 3,
    "skillsCount": 12,
    "hasLogrosCuantificables": 4,
    "hasEducacionUniversitaria": True,
    "hasEducacionTerciaria": False,
    "hasCertificaciones": 2,
    "hasDatosContacto": True,
    "hasResumen": True,
    "hasFechas": True,
    "errorOrtograficoCount": 1,
    "wordCount": 650,
    "usesProfessionalLanguage": True,
    "isAtsFriendly": True,
    "industryKeywordsCount": 10,
}


def make_metrics(**overrides) -> RawMetrics:
    """All-zero/false metrics with camelCase overrides."""
    return RawMetrics.parse({**BASELINE_METRICS, **overrides})


class FakeExtractor(MetricsExtractor):
    name = "fake_extractor"

    def __init__(self, metrics: dict | None = None, error: Exception | None = None) -> None:
        self.metrics = metrics or STRONG_METRICS
        self.error = error
        self.calls = 0

    async def extract(self, document: bytes, mime_type: str) -> RawMetrics:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return RawMetrics.parse(self.metrics)


class FakeFeedback(FeedbackGenerator):
    name = "fake_feedback"

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls = 0
        self.last_scoring: ScoringResult | None = None

    async def generate(self, document: bytes, mime_type: str, scoring: ScoringResult) -> Feedback:
        self.calls += 1
        self.last_scoring = scoring
        if self.error is not None:
            raise self.error
        return Feedback(
            summary=f"Score {scoring.overall_score}",
            strengths=["Clear structure"],
            weaknesses=["Few certifications"],
            recommendations=[
                Recommendation(section="Educación", issue="Sin certificaciones", suggestion="Sumá una"),
            ],
        )


@pytest.fixture
def baseline_metrics() -> dict:
    return dict(BASELINE_METRICS)


@pytest.fixture
def strong_metrics() -> dict:
    return dict(STRONG_METRICS)


@pytest.fixture
def extraction_error() -> ExtractionError:
    return ExtractionError("Metric extraction failed: timeout")


@pytest.fixture
def feedback_error() -> FeedbackError:
    return FeedbackError("Feedback generation failed: 503")
