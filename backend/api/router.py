import logging
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Body, Depends, File, HTTPException, Request, UploadFile
from fastapi import Path as PathParam
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import get_analyzer, get_cache
from config import settings
from models.requests import HASH_PATTERN, CompareRequest
from models.responses import AnalysisResult, ComparisonResult, HealthResponse
from models.scoring import ScoringResult
from services import scoring_engine
from services.cache import ResultCache
from services.comparison import compare_results
from services.errors import AIServiceError, CacheError, MalformedMetrics, ScoringError
from services.pipeline.orchestrator import CVAnalyzer

logger = logging.getLogger(__name__)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)

EXTENSION_MIME_TYPES = {
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


@router.get("/health", response_model=HealthResponse)
async def health(cache: ResultCache = Depends(get_cache)):
    return HealthResponse(
        status="ok",
        gemini_configured=bool(settings.gemini_api_key),
        cache_backend=cache.backend.name,
    )


@router.post("/analyze", response_model=AnalysisResult)
@limiter.limit(settings.rate_limit)
async def analyze(
    request: Request,
    cv_file: UploadFile = File(...),
    analyzer: CVAnalyzer = Depends(get_analyzer),
):
    # Validate file type
    suffix = Path(cv_file.filename or "").suffix.lower()
    mime_type = EXTENSION_MIME_TYPES.get(suffix)
    if mime_type is None or mime_type not in settings.allowed_mime_types:
        raise HTTPException(status_code=400, detail="Only PDF, DOC or DOCX files are accepted")

    # Read and validate size
    content = await cv_file.read()
    max_bytes = settings.max_upload_size_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Max size: {settings.max_upload_size_mb}MB",
        )
    if not content:
        raise HTTPException(status_code=400, detail="Empty file")

    try:
        return await analyzer.analyze(content, mime_type)
    except MalformedMetrics as e:
        raise HTTPException(status_code=422, detail={"message": str(e), "fields": e.fields})
    except AIServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except ScoringError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/score", response_model=ScoringResult)
async def score_metrics(body: dict[str, Any] = Body(...)):
    """Score already-extracted metrics. No AI calls, no caching."""
    try:
        return scoring_engine.score(body)
    except MalformedMetrics as e:
        raise HTTPException(status_code=422, detail={"message": str(e), "fields": e.fields})
    except ScoringError as e:
        raise HTTPException(status_code=500, detail=str(e))


def _cached(cache: ResultCache, content_hash: str) -> AnalysisResult | None:
    """Cache lookup for the read routes; an unreadable cache is a miss."""
    try:
        return cache.lookup(content_hash.lower())
    except CacheError:
        logger.exception("Cache lookup failed for %s", content_hash[:16])
        return None


@router.get("/analysis/{content_hash}", response_model=AnalysisResult)
async def get_analysis(
    content_hash: str = PathParam(..., pattern=HASH_PATTERN),
    cache: ResultCache = Depends(get_cache),
):
    result = _cached(cache, content_hash)
    if result is None:
        raise HTTPException(status_code=404, detail="No analysis cached for this document")
    return result


@router.post("/compare", response_model=ComparisonResult)
async def compare(body: CompareRequest, cache: ResultCache = Depends(get_cache)):
    previous = _cached(cache, body.previous_hash)
    current = _cached(cache, body.current_hash)
    if previous is None or current is None:
        raise HTTPException(status_code=404, detail="Both analyses must be cached to compare them")
    return compare_results(previous, current)
