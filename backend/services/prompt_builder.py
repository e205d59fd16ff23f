"""All prompt templates and response schemas for Gemini API calls."""

from google.genai import types

from models.scoring import CategoryScores

_NUMBER = types.Schema(type=types.Type.NUMBER)
_INTEGER = types.Schema(type=types.Type.INTEGER)
_BOOLEAN = types.Schema(type=types.Type.BOOLEAN)
_STRING = types.Schema(type=types.Type.STRING)
_STRING_LIST = types.Schema(type=types.Type.ARRAY, items=_STRING)

# Keys are the extractor's camelCase names (RawMetrics aliases).
METRIC_FIELDS: dict[str, types.Schema] = {
    "pageCount": _INTEGER,
    "hasSections": _BOOLEAN,
    "usesBullets": _BOOLEAN,
    "yearsExperience": _NUMBER,
    "jobCount": _INTEGER,
    "skillsCount": _INTEGER,
    "hasLogrosCuantificables": _INTEGER,
    "hasEducacionUniversitaria": _BOOLEAN,
    "hasEducacionTerciaria": _BOOLEAN,
    "hasCertificaciones": _INTEGER,
    "hasDatosContacto": _BOOLEAN,
    "hasResumen": _BOOLEAN,
    "hasFechas": _BOOLEAN,
    "errorOrtograficoCount": _INTEGER,
    "wordCount": _INTEGER,
    "usesProfessionalLanguage": _BOOLEAN,
    "isAtsFriendly": _BOOLEAN,
    "industryKeywordsCount": _INTEGER,
}

RAW_METRICS_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties=METRIC_FIELDS,
    required=list(METRIC_FIELDS),
)

FEEDBACK_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "summary": _STRING,
        "careerPathNote": _STRING,
        "strengths": _STRING_LIST,
        "weaknesses": _STRING_LIST,
        "recommendations": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "section": _STRING,
                    "issue": _STRING,
                    "suggestion": _STRING,
                    "example": _STRING,
                },
                required=["section", "issue", "suggestion"],
            ),
        ),
    },
    required=["summary", "strengths", "weaknesses", "recommendations"],
)


def build_extraction_prompt() -> str:
    """Call A: objective metric extraction. No opinions, only counts and flags."""
    return (
        "Actúa como un extractor de datos de CV 100% OBJETIVO. "
        "Extrae las métricas solicitadas con precisión quirúrgica. "
        "No generes opiniones."
    )


def build_feedback_prompt(categories: CategoryScores) -> str:
    """Call B: narrative feedback grounded on the already-computed scores."""
    return (
        f"Basado en este CV y los puntajes: Formato {categories.format}, "
        f"Exp {categories.content}, Skills {categories.keywords}, "
        f"Edu {categories.education}, ATS {categories.structure}, "
        f"Redac {categories.redaccion}. "
        "Genera un resumen, fortalezas, debilidades y 4-6 recomendaciones "
        "específicas citando el texto real."
    )
