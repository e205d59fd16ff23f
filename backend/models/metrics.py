"""RawMetrics: the fixed schema of objective CV facts produced by the extractor."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, ValidationError

from services.errors import MalformedMetrics


class RawMetrics(BaseModel):
    """Objectively extractable CV facts.

    Accepts the extractor's camelCase keys or the snake_case field names.
    Every field is required: the scoring rules depend on all of them, so a
    missing value is an error rather than a default.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    page_count: int = Field(..., ge=0, alias="pageCount")
    has_sections: StrictBool = Field(..., alias="hasSections")
    uses_bullets: StrictBool = Field(..., alias="usesBullets")
    years_experience: float = Field(..., ge=0, alias="yearsExperience")
    job_count: int = Field(..., ge=0, alias="jobCount")
    skills_count: int = Field(..., ge=0, alias="skillsCount")
    quantifiable_achievements_count: int = Field(..., ge=0, alias="hasLogrosCuantificables")
    has_university_degree: StrictBool = Field(..., alias="hasEducacionUniversitaria")
    has_tertiary_degree: StrictBool = Field(..., alias="hasEducacionTerciaria")
    certifications_count: int = Field(..., ge=0, alias="hasCertificaciones")
    has_contact_data: StrictBool = Field(..., alias="hasDatosContacto")
    has_summary: StrictBool = Field(..., alias="hasResumen")
    has_dates: StrictBool = Field(..., alias="hasFechas")
    spelling_error_count: int = Field(..., ge=0, alias="errorOrtograficoCount")
    word_count: int = Field(..., ge=0, alias="wordCount")
    uses_professional_language: StrictBool = Field(..., alias="usesProfessionalLanguage")
    is_ats_friendly: StrictBool = Field(..., alias="isAtsFriendly")
    industry_keywords_count: int = Field(..., ge=0, alias="industryKeywordsCount")

    @classmethod
    def parse(cls, data: Any) -> "RawMetrics":
        """Validate a mapping into RawMetrics, raising MalformedMetrics on any problem."""
        if isinstance(data, cls):
            return data
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            fields = sorted({
                ".".join(str(part) for part in err["loc"]) or "<root>"
                for err in e.errors()
            })
            raise MalformedMetrics(
                f"Malformed metrics ({len(fields)} invalid field(s)): {', '.join(fields)}",
                fields=fields,
            ) from e
