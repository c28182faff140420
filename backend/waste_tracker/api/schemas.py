"""Pydantic schemas for API requests and responses.

All API responses follow a consistent structure:
{
    "success": true/false,
    "data": <response-specific data>,
    "error": "error message if failed",
    "meta": {"error_code": "CODE", "timestamp": "..."}
}
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from ..classifiers import WasteAnalysisError
from ..database import WasteEntry, WasteStats


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""
    # General errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Upload errors
    NO_IMAGE = "NO_IMAGE"
    INVALID_UPLOAD = "INVALID_UPLOAD"

    # Analysis errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    MODEL_UNAVAILABLE = "MODEL_UNAVAILABLE"
    RESPONSE_FORMAT_ERROR = "RESPONSE_FORMAT_ERROR"
    INVALID_CREDENTIAL = "INVALID_CREDENTIAL"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    ACCESS_FORBIDDEN = "ACCESS_FORBIDDEN"
    INVALID_REQUEST = "INVALID_REQUEST"
    IMAGE_NOT_FOUND = "IMAGE_NOT_FOUND"
    ANALYSIS_FAILED = "ANALYSIS_FAILED"


# HTTP status per error code; anything missing is a 500
ERROR_STATUS = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.NO_IMAGE: 400,
    ErrorCode.INVALID_UPLOAD: 400,
    ErrorCode.MODEL_UNAVAILABLE: 502,
    ErrorCode.RESPONSE_FORMAT_ERROR: 502,
    ErrorCode.INVALID_CREDENTIAL: 401,
    ErrorCode.QUOTA_EXCEEDED: 429,
    ErrorCode.ACCESS_FORBIDDEN: 401,
    ErrorCode.INVALID_REQUEST: 400,
    ErrorCode.IMAGE_NOT_FOUND: 404,
}


def error_code_for(error: WasteAnalysisError) -> ErrorCode:
    """Map a classified analysis error to its API error code."""
    try:
        return ErrorCode(error.code)
    except ValueError:
        return ErrorCode.ANALYSIS_FAILED


def status_for(code: ErrorCode) -> int:
    return ERROR_STATUS.get(code, 500)


# =============================================================================
# Response Meta
# =============================================================================

class ResponseMeta(BaseModel):
    """Metadata included in all API responses."""
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    )
    error_code: ErrorCode | None = None

    # Optional pagination info
    total: int | None = None
    offset: int | None = None
    limit: int | None = None


# =============================================================================
# Generic API Response
# =============================================================================

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Generic wrapper for all API responses.

    Usage:
        return APIResponse.ok(MyData(...))
        return APIResponse.fail("Something failed", ErrorCode.INTERNAL_ERROR)
    """
    success: bool
    data: T | None = None
    error: str | None = None
    meta: ResponseMeta = Field(default_factory=ResponseMeta)

    @classmethod
    def ok(cls, data: T, **meta_kwargs) -> "APIResponse[T]":
        """Create a successful response."""
        return cls(
            success=True,
            data=data,
            meta=ResponseMeta(**meta_kwargs)
        )

    @classmethod
    def fail(cls, error: str, error_code: ErrorCode = ErrorCode.INTERNAL_ERROR) -> "APIResponse[None]":
        """Create an error response."""
        return cls(
            success=False,
            error=error,
            meta=ResponseMeta(error_code=error_code)
        )


# =============================================================================
# Data Models (used in responses)
# =============================================================================

class HealthData(BaseModel):
    """Service health information."""
    status: str
    analyzer: str
    analyzer_ready: bool
    version: str


class WasteEntryData(BaseModel):
    """Logged waste entry as returned to clients."""
    id: int
    imagePath: str
    items: list[Any]
    estimatedWaste: dict[str, Any]
    totalEstimatedValue: float
    notes: str
    model: str | None = None
    timestamp: str | None = None


class AnalyzeData(BaseModel):
    """Result of analyzing one upload."""
    analysis: dict[str, Any]
    wasteEntry: WasteEntryData


class HistoryData(BaseModel):
    """Page of waste entries, newest first."""
    entries: list[WasteEntryData]


class StatsData(BaseModel):
    """Aggregated waste statistics."""
    totalEntries: int
    totalItems: int
    totalEstimatedValue: float
    averageValuePerEntry: float
    categories: dict[str, int]
    conditions: dict[str, int]
    topItems: list[dict[str, Any]]
    daily: list[dict[str, Any]]


class SuggestionData(BaseModel):
    """One waste reduction suggestion."""
    title: str
    description: str
    priority: str
    category: str


class SuggestionListData(BaseModel):
    suggestions: list[SuggestionData]


# =============================================================================
# Response Type Aliases
# =============================================================================

HealthResponse = APIResponse[HealthData]
AnalyzeResponse = APIResponse[AnalyzeData]
HistoryResponse = APIResponse[HistoryData]
StatsResponse = APIResponse[StatsData]
SuggestionsResponse = APIResponse[SuggestionListData]


# =============================================================================
# Conversion Helpers
# =============================================================================

def entry_to_data(entry: WasteEntry) -> WasteEntryData:
    """Convert a WasteEntry to its response model."""
    return WasteEntryData(**entry.to_dict())


def stats_to_data(stats: WasteStats) -> StatsData:
    """Convert WasteStats to its response model."""
    return StatsData(
        totalEntries=stats.total_entries,
        totalItems=stats.total_items,
        totalEstimatedValue=stats.total_estimated_value,
        averageValuePerEntry=stats.average_value_per_entry,
        categories=stats.categories,
        conditions=stats.conditions,
        topItems=stats.top_items,
        daily=stats.daily,
    )
