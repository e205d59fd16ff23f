from typing import Literal

from pydantic import BaseModel

from models.scoring import CategoryScores, ScoreBreakdown

Trend = Literal["up", "down", "stable"]


class Recommendation(BaseModel):
    section: str
    issue: str
    suggestion: str
    example: str | None = None


class Feedback(BaseModel):
    """Narrative feedback. Opaque to the scoring engine."""
    summary: str = ""
    career_path_note: str | None = None
    strengths: list[str] = []
    weaknesses: list[str] = []
    recommendations: list[Recommendation] = []


class AnalysisResult(BaseModel):
    score: int = 0
    categories: CategoryScores
    breakdown: ScoreBreakdown
    hash: str = ""
    summary: str = ""
    career_path_note: str | None = None
    strengths: list[str] = []
    weaknesses: list[str] = []
    recommendations: list[Recommendation] = []
    degraded: bool = False


class CategoryTrend(BaseModel):
    category: str
    previous: int
    current: int
    diff: int
    trend: Trend


class ComparisonResult(BaseModel):
    previous_hash: str = ""
    current_hash: str = ""
    score_diff: int = 0
    overall_trend: Trend = "stable"
    categories: list[CategoryTrend] = []


class HealthResponse(BaseModel):
    status: str = "ok"
    gemini_configured: bool = False
    cache_backend: str = ""
