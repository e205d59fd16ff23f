"""Deterministic CV scoring engine.

Six independent rule chains turn a RawMetrics record into 0-100 category
scores. Each chain starts from a fixed base, applies its adjustments in a
fixed order, records one audit line per non-zero adjustment, and is then
clamped to [0, 100] and rounded. No I/O, no randomness, no shared state:
the same metrics always produce the same ScoringResult.

Categories:
    format     - visual structure (bullets, length, sections)
    content    - experience, job history, quantified achievements
    keywords   - technical skills and industry vocabulary
    education  - degrees and certifications
    structure  - ATS compatibility
    redaccion  - writing quality (spelling, length, tone)
"""

import logging
import math
from collections.abc import Mapping
from typing import Any

from models.metrics import RawMetrics
from models.scoring import (
    CategoryBreakdown,
    CategoryScores,
    ScoreBreakdown,
    ScoringResult,
)
from services.errors import ScoringError

logger = logging.getLogger(__name__)

IDEAL_PAGE_RANGE = (1, 2)
IDEAL_WORD_RANGE = (400, 800)
# Keyword counts at or above this already earn the full ATS keyword bonus.
ATS_KEYWORD_SATURATION = 40

LABELS = {
    "format": "Formato y Estructura",
    "content": "Contenido y Experiencia",
    "keywords": "Habilidades Técnicas",
    "structure": "Optimización ATS",
    "education": "Educación",
    "redaccion": "Redacción y Claridad",
}


def clamp(value: float, low: float = 0, high: float = 100) -> float:
    """Clamp a value into [low, high]. Never raises."""
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up (scores are non-negative)."""
    return math.floor(value + 0.5)


def overall_score(categories: CategoryScores) -> int:
    """Rounded arithmetic mean of the six category scores."""
    values = categories.values()
    return round_half_up(sum(values) / len(values))


def _fmt(value: float) -> str:
    if isinstance(value, int):
        return str(value)
    if value.is_integer():
        return str(int(value))
    return str(round(value, 2))


def _signed(value: float) -> str:
    sign = "+" if value > 0 else "-"
    return f"{sign}{_fmt(abs(value))}"


class _RuleChain:
    """Running total plus audit trail for one category."""

    def __init__(self, category: str, base: int) -> None:
        self.category = category
        self.total: float = base
        self.details = [f"Base: {base} pts"]

    def apply(self, reason: str, points: float) -> None:
        self.total += points
        if points != 0:
            self.details.append(f"{reason}: {_signed(points)}")

    def result(self) -> CategoryBreakdown:
        return CategoryBreakdown(
            label=LABELS[self.category],
            points=round_half_up(clamp(self.total)),
            details=self.details,
        )


# ---------------------------------------------------------------------------
# Category rule chains
# ---------------------------------------------------------------------------

def score_format(m: RawMetrics) -> CategoryBreakdown:
    chain = _RuleChain("format", 60)
    if m.uses_bullets:
        chain.apply("Uso de viñetas", 10)
    low, high = IDEAL_PAGE_RANGE
    if low <= m.page_count <= high:
        chain.apply("Extensión ideal (1-2 pág)", 15)
    elif m.page_count > high:
        chain.apply("Exceso de páginas", -10)
    if m.has_sections:
        chain.apply("Secciones claras", 15)
    return chain.result()


def score_content(m: RawMetrics) -> CategoryBreakdown:
    chain = _RuleChain("content", 50)
    chain.apply(
        f"Años de experiencia ({_fmt(m.years_experience)})",
        min(30, m.years_experience * 3),
    )
    chain.apply("Trayectoria laboral", min(15, m.job_count * 5))
    chain.apply("Logros cuantificables", min(20, m.quantifiable_achievements_count * 5))
    if m.uses_professional_language:
        chain.apply("Lenguaje profesional", 10)
    return chain.result()


def score_keywords(m: RawMetrics) -> CategoryBreakdown:
    chain = _RuleChain("keywords", 60)
    if m.skills_count >= 11:
        chain.apply("Amplio set de habilidades (11+)", 25)
    elif m.skills_count >= 6:
        chain.apply("Buen set de habilidades (6-10)", 20)
    elif m.skills_count >= 3:
        chain.apply("Habilidades básicas (3-5)", 10)
    chain.apply("Palabras clave del sector", min(15, m.industry_keywords_count * 2))
    return chain.result()


def score_education(m: RawMetrics) -> CategoryBreakdown:
    chain = _RuleChain("education", 70)
    # University takes precedence; the two degrees never stack.
    if m.has_university_degree:
        chain.apply("Título universitario", 15)
    elif m.has_tertiary_degree:
        chain.apply("Título terciario", 10)
    chain.apply("Certificaciones extra", min(15, m.certifications_count * 3))
    return chain.result()


def score_structure(m: RawMetrics) -> CategoryBreakdown:
    chain = _RuleChain("structure", 65)
    if m.is_ats_friendly:
        chain.apply("Formato simple (ATS Friendly)", 15)
    # Fractional; rounded once at the clamp.
    keywords = min(m.industry_keywords_count, ATS_KEYWORD_SATURATION)
    chain.apply("Optimización de keywords", min(15, (keywords / 5) * 2))
    if m.has_dates and m.has_contact_data:
        chain.apply("Datos críticos presentes", 5)
    return chain.result()


def score_redaccion(m: RawMetrics) -> CategoryBreakdown:
    chain = _RuleChain("redaccion", 80)
    chain.apply("Penalización por ortografía", -(m.spelling_error_count * 3))
    low, high = IDEAL_WORD_RANGE
    if low <= m.word_count <= high:
        chain.apply("Extensión de texto ideal", 10)
    if m.uses_professional_language:
        chain.apply("Tono profesional", 10)
    return chain.result()


def score(metrics: RawMetrics | Mapping[str, Any]) -> ScoringResult:
    """Score a CV from its extracted metrics.

    Raises MalformedMetrics if ``metrics`` is a mapping that does not fit the
    RawMetrics schema, and ScoringError if a rule chain itself fails.
    """
    m = RawMetrics.parse(metrics)

    try:
        breakdown = ScoreBreakdown(
            format=score_format(m),
            content=score_content(m),
            keywords=score_keywords(m),
            structure=score_structure(m),
            education=score_education(m),
            redaccion=score_redaccion(m),
        )
        categories = CategoryScores(
            format=breakdown.format.points,
            content=breakdown.content.points,
            keywords=breakdown.keywords.points,
            structure=breakdown.structure.points,
            education=breakdown.education.points,
            redaccion=breakdown.redaccion.points,
        )
    except (ArithmeticError, ValueError) as e:
        logger.error("Scoring failed on validated metrics: %s", e)
        raise ScoringError(f"Scoring failed: {e}") from e

    return ScoringResult(
        overall_score=overall_score(categories),
        categories=categories,
        breakdown=breakdown,
    )
