"""Trend deltas between two analyses of (versions of) the same CV."""

from models.responses import AnalysisResult, CategoryTrend, ComparisonResult, Trend
from models.scoring import Category


def trend(previous: int, current: int) -> Trend:
    if current > previous:
        return "up"
    if current < previous:
        return "down"
    return "stable"


def compare_results(previous: AnalysisResult, current: AnalysisResult) -> ComparisonResult:
    categories = [
        CategoryTrend(
            category=category.value,
            previous=previous.categories.get(category),
            current=current.categories.get(category),
            diff=current.categories.get(category) - previous.categories.get(category),
            trend=trend(previous.categories.get(category), current.categories.get(category)),
        )
        for category in Category
    ]
    return ComparisonResult(
        previous_hash=previous.hash,
        current_hash=current.hash,
        score_diff=current.score - previous.score,
        overall_trend=trend(previous.score, current.score),
        categories=categories,
    )
