"""Scoring engine output: six fixed categories with an audit trail each."""

from enum import Enum

from pydantic import BaseModel, Field


class Category(str, Enum):
    FORMAT = "format"
    CONTENT = "content"
    KEYWORDS = "keywords"
    STRUCTURE = "structure"
    EDUCATION = "education"
    REDACCION = "redaccion"


class CategoryScores(BaseModel):
    format: int = Field(..., ge=0, le=100)
    content: int = Field(..., ge=0, le=100)
    keywords: int = Field(..., ge=0, le=100)
    structure: int = Field(..., ge=0, le=100)
    education: int = Field(..., ge=0, le=100)
    redaccion: int = Field(..., ge=0, le=100)

    def get(self, category: Category) -> int:
        return getattr(self, category.value)

    def values(self) -> list[int]:
        return [self.get(c) for c in Category]


class CategoryBreakdown(BaseModel):
    """How one category score was assembled, rule by rule."""
    label: str
    points: int = Field(..., ge=0, le=100)
    details: list[str] = []


class ScoreBreakdown(BaseModel):
    format: CategoryBreakdown
    content: CategoryBreakdown
    keywords: CategoryBreakdown
    structure: CategoryBreakdown
    education: CategoryBreakdown
    redaccion: CategoryBreakdown

    def get(self, category: Category) -> CategoryBreakdown:
        return getattr(self, category.value)


class ScoringResult(BaseModel):
    overall_score: int = Field(..., ge=0, le=100)
    categories: CategoryScores
    breakdown: ScoreBreakdown
