"""API route definitions.

All endpoints return consistent APIResponse[T] structure with error codes.
"""
from datetime import date

import structlog
from fastapi import APIRouter, Depends, File, Query, Request, UploadFile
from fastapi.responses import JSONResponse

from ..classifiers import WasteAnalysisError, WasteAnalyzer
from ..database import WasteRepository
from ..services import UploadError, UploadService, generate_suggestions
from .schemas import (
    APIResponse,
    AnalyzeData,
    AnalyzeResponse,
    ErrorCode,
    HealthData,
    HealthResponse,
    HistoryData,
    HistoryResponse,
    StatsResponse,
    SuggestionData,
    SuggestionListData,
    SuggestionsResponse,
    entry_to_data,
    error_code_for,
    stats_to_data,
    status_for,
)

logger = structlog.get_logger()
router = APIRouter(prefix="/api")

VERSION = "0.1.0"


def get_db(request: Request):
    """Get database connection from app state."""
    return request.app.state.db


def get_analyzer(request: Request) -> WasteAnalyzer:
    """Get the waste analyzer from app state."""
    return request.app.state.analyzer


def get_upload_service(request: Request) -> UploadService:
    """Get the upload service from app state."""
    return request.app.state.uploads


def error_response(message: str, error_code: ErrorCode) -> JSONResponse:
    """Failure envelope with the HTTP status mapped from the error code."""
    return JSONResponse(
        status_code=status_for(error_code),
        content=APIResponse.fail(message, error_code).model_dump(mode="json"),
    )


# =============================================================================
# Health Check
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check(analyzer: WasteAnalyzer = Depends(get_analyzer)):
    """Check if the API is running and the analyzer is configured."""
    return APIResponse.ok(
        data=HealthData(
            status="ok",
            analyzer=analyzer.name,
            analyzer_ready=analyzer.health_check(),
            version=VERSION,
        )
    )


# =============================================================================
# Waste Analysis
# =============================================================================

@router.post("/analyze-waste", response_model=AnalyzeResponse)
async def analyze_waste(
    image: UploadFile | None = File(None),
    db=Depends(get_db),
    analyzer: WasteAnalyzer = Depends(get_analyzer),
    uploads: UploadService = Depends(get_upload_service),
):
    """Analyze a photo of food waste and log the result.

    Upload an image file as multipart field "image".
    """
    if image is None or not image.filename:
        return error_response("No image file provided", ErrorCode.NO_IMAGE)

    logger.info("analyze_waste_request", filename=image.filename)

    if image.size is not None and image.size > uploads.max_bytes:
        logger.warning("upload_rejected", filename=image.filename, size=image.size)
        return error_response(
            f"File too large: {image.size} bytes (limit {uploads.max_bytes})",
            ErrorCode.INVALID_UPLOAD,
        )

    try:
        # One byte past the limit is enough for save() to reject it
        content = await image.read(uploads.max_bytes + 1)
        stored = uploads.save(image.filename, content, image.content_type)
    except UploadError as e:
        logger.warning("upload_rejected", filename=image.filename, error=str(e))
        return error_response(str(e), ErrorCode.INVALID_UPLOAD)

    try:
        analysis = await analyzer.analyze(str(stored))
    except WasteAnalysisError as e:
        code = error_code_for(e)
        logger.error("analyze_waste_failed", error_code=code.value, error=str(e))
        uploads.remove(stored)
        return error_response(str(e), code)

    try:
        entry = await WasteRepository(db).log(
            image_path=uploads.public_path(stored),
            items=analysis.items,
            estimated_waste=analysis.estimated_waste,
            total_estimated_value=analysis.total_estimated_value,
            notes=analysis.notes,
            model=analysis.model,
        )
    except Exception as e:
        logger.error("waste_log_failed", error=str(e))
        uploads.remove(stored)
        return error_response(f"Failed to log waste entry: {e}", ErrorCode.INTERNAL_ERROR)

    return APIResponse.ok(
        data=AnalyzeData(analysis=analysis.to_dict(), wasteEntry=entry_to_data(entry))
    )


# =============================================================================
# History, Stats, Suggestions
# =============================================================================

@router.get("/waste-history", response_model=HistoryResponse)
async def waste_history(
    db=Depends(get_db),
    start_date: date | None = Query(None, description="Earliest day (inclusive)"),
    end_date: date | None = Query(None, description="Latest day (inclusive)"),
    limit: int = Query(50, ge=1, le=500, description="Results per page"),
    offset: int = Query(0, ge=0, description="Pagination offset"),
):
    """List logged waste entries, newest first."""
    if start_date and end_date and start_date > end_date:
        return error_response("start_date must not be after end_date", ErrorCode.VALIDATION_ERROR)

    repo = WasteRepository(db)
    try:
        entries = await repo.get_history(
            limit=limit, offset=offset, start_date=start_date, end_date=end_date
        )
        total = await repo.count(start_date=start_date, end_date=end_date)
    except Exception as e:
        logger.error("waste_history_failed", error=str(e))
        return error_response("Failed to fetch waste history", ErrorCode.INTERNAL_ERROR)

    return APIResponse.ok(
        data=HistoryData(entries=[entry_to_data(e) for e in entries]),
        total=total,
        offset=offset,
        limit=limit,
    )


@router.get("/waste-stats", response_model=StatsResponse)
async def waste_stats(db=Depends(get_db)):
    """Aggregated waste statistics."""
    try:
        stats = await WasteRepository(db).get_stats()
    except Exception as e:
        logger.error("waste_stats_failed", error=str(e))
        return error_response("Failed to fetch waste stats", ErrorCode.INTERNAL_ERROR)

    return APIResponse.ok(data=stats_to_data(stats))


@router.get("/suggestions", response_model=SuggestionsResponse)
async def suggestions(db=Depends(get_db)):
    """Waste reduction suggestions based on logged entries."""
    try:
        stats = await WasteRepository(db).get_stats()
    except Exception as e:
        logger.error("suggestions_failed", error=str(e))
        return error_response("Failed to fetch suggestions", ErrorCode.INTERNAL_ERROR)

    return APIResponse.ok(
        data=SuggestionListData(
            suggestions=[SuggestionData(**s.to_dict()) for s in generate_suggestions(stats)]
        )
    )
