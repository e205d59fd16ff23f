"""Narrative feedback generation.

GeminiFeedbackGenerator: asks Gemini for summary, strengths, weaknesses and
    4-6 recommendations, given the document and the computed scores.

TemplateFeedbackGenerator: rules-based fallback built only from the
    ScoringResult. Deterministic, no external calls. Used when the AI
    service is down and fallback is enabled.
"""

import logging

from google import genai
from pydantic import ValidationError

from config import settings
from models.responses import Feedback, Recommendation
from models.scoring import Category, ScoringResult
from services import gemini_client, prompt_builder
from services.errors import AIServiceError, FeedbackError
from services.pipeline.base import FeedbackGenerator

logger = logging.getLogger(__name__)

STRONG_THRESHOLD = 80
WEAK_THRESHOLD = 60
RECOMMEND_THRESHOLD = 70
MAX_RECOMMENDATIONS = 6

# (section, issue, suggestion) per category
_CATEGORY_ADVICE: dict[Category, tuple[str, str, str]] = {
    Category.FORMAT: (
        "Formato",
        "La presentación visual dificulta la lectura rápida",
        "Usá viñetas, secciones con títulos claros y mantené el CV en 1 o 2 páginas.",
    ),
    Category.CONTENT: (
        "Experiencia",
        "La experiencia no muestra resultados concretos",
        "Describí cada puesto con logros cuantificables (porcentajes, montos, plazos).",
    ),
    Category.KEYWORDS: (
        "Habilidades",
        "Pocas habilidades técnicas o palabras clave del sector",
        "Agregá una sección de habilidades con las herramientas y términos que piden los avisos.",
    ),
    Category.STRUCTURE: (
        "Compatibilidad ATS",
        "El formato puede no ser interpretado por sistemas de selección automática",
        "Evitá tablas, columnas y gráficos; incluí fechas y datos de contacto en texto plano.",
    ),
    Category.EDUCATION: (
        "Educación",
        "La formación o las certificaciones no están destacadas",
        "Detallá títulos obtenidos y sumá certificaciones relevantes para el puesto.",
    ),
    Category.REDACCION: (
        "Redacción",
        "Errores de ortografía o tono poco profesional",
        "Revisá la ortografía y apuntá a un texto de 400 a 800 palabras con tono formal.",
    ),
}


def _quality(score: int) -> str:
    if score >= 80:
        return "sólido"
    elif score >= 60:
        return "moderado"
    elif score >= 40:
        return "parcial"
    return "débil"


class GeminiFeedbackGenerator(FeedbackGenerator):
    name = "gemini_feedback_generator"

    def __init__(self, client: genai.Client | None = None) -> None:
        self._client = client

    async def generate(self, document: bytes, mime_type: str, scoring: ScoringResult) -> Feedback:
        try:
            data = await gemini_client.generate_json(
                contents=[
                    gemini_client.document_part(document, mime_type),
                    prompt_builder.build_feedback_prompt(scoring.categories),
                ],
                schema=prompt_builder.FEEDBACK_SCHEMA,
                temperature=settings.feedback_temperature,
                client=self._client,
            )
        except AIServiceError as e:
            raise FeedbackError(f"Feedback generation failed: {e}") from e

        if not isinstance(data, dict):
            raise FeedbackError("Feedback response is not a JSON object")
        try:
            return Feedback.model_validate({
                "summary": data["summary"],
                "career_path_note": data.get("careerPathNote"),
                "strengths": data["strengths"],
                "weaknesses": data["weaknesses"],
                "recommendations": data["recommendations"],
            })
        except (KeyError, ValidationError) as e:
            logger.error("Malformed feedback response: %s", e)
            raise FeedbackError("Feedback response does not match the expected schema") from e


class TemplateFeedbackGenerator(FeedbackGenerator):
    name = "template_feedback_generator"

    async def generate(self, document: bytes, mime_type: str, scoring: ScoringResult) -> Feedback:
        return build_feedback(scoring)


def build_feedback(scoring: ScoringResult) -> Feedback:
    return Feedback(
        summary=_build_summary(scoring),
        strengths=_build_strengths(scoring),
        weaknesses=_build_weaknesses(scoring),
        recommendations=_build_recommendations(scoring),
    )


# ---------------------------------------------------------------------------
# Template builders
# ---------------------------------------------------------------------------

def _build_summary(scoring: ScoringResult) -> str:
    """Generate a 2-3 sentence summary of the analysis."""
    score = scoring.overall_score
    parts = [f"Puntaje general: {score}/100 (perfil {_quality(score)})."]

    ranked = sorted(Category, key=lambda c: scoring.categories.get(c))
    worst, best = ranked[0], ranked[-1]
    best_bd = scoring.breakdown.get(best)
    worst_bd = scoring.breakdown.get(worst)
    parts.append(f"El punto más fuerte es {best_bd.label} ({best_bd.points}/100).")
    if worst_bd.points < RECOMMEND_THRESHOLD:
        parts.append(f"El área a mejorar es {worst_bd.label} ({worst_bd.points}/100).")

    return " ".join(parts)


def _build_strengths(scoring: ScoringResult) -> list[str]:
    strengths: list[str] = []
    for category in Category:
        bd = scoring.breakdown.get(category)
        if bd.points < STRONG_THRESHOLD:
            continue
        earned = [d for d in bd.details[1:] if ": +" in d]
        if earned:
            strengths.append(f"{bd.label} ({bd.points}/100): {'; '.join(earned)}")
        else:
            strengths.append(f"{bd.label} ({bd.points}/100)")
    return strengths or ["El CV contiene información relevante"]


def _build_weaknesses(scoring: ScoringResult) -> list[str]:
    weaknesses: list[str] = []
    for category in Category:
        bd = scoring.breakdown.get(category)
        if bd.points >= WEAK_THRESHOLD:
            continue
        lost = [d for d in bd.details[1:] if ": -" in d]
        if lost:
            weaknesses.append(f"{bd.label} ({bd.points}/100): {'; '.join(lost)}")
        else:
            weaknesses.append(f"{bd.label} por debajo de lo esperado ({bd.points}/100)")
    return weaknesses or ["No se detectaron debilidades significativas"]


def _build_recommendations(scoring: ScoringResult) -> list[Recommendation]:
    """One recommendation per category below the threshold, weakest first."""
    weak = [c for c in Category if scoring.categories.get(c) < RECOMMEND_THRESHOLD]
    weak.sort(key=lambda c: scoring.categories.get(c))

    recs: list[Recommendation] = []
    for category in weak[:MAX_RECOMMENDATIONS]:
        section, issue, suggestion = _CATEGORY_ADVICE[category]
        recs.append(Recommendation(section=section, issue=issue, suggestion=suggestion))
    return recs
