"""Waste analyzers for food waste photos."""
from .base import ModelCandidate, WasteAnalysisResult, WasteAnalyzer, WasteItem
from .errors import (
    AccessForbidden,
    ConfigurationError,
    GenericAnalysisFailure,
    InvalidCredential,
    InvalidRequest,
    ModelUnavailable,
    QuotaExceeded,
    ResponseFormatError,
    SourceImageNotFound,
    WasteAnalysisError,
    classify_error,
)
from .gemini_client import GeminiClient
from .gemini_provider import GeminiWasteAnalyzer
from .mock_provider import MockWasteAnalyzer

__all__ = [
    "WasteAnalyzer",
    "WasteAnalysisResult",
    "WasteItem",
    "ModelCandidate",
    "GeminiClient",
    "GeminiWasteAnalyzer",
    "MockWasteAnalyzer",
    "WasteAnalysisError",
    "ConfigurationError",
    "ModelUnavailable",
    "ResponseFormatError",
    "InvalidCredential",
    "QuotaExceeded",
    "AccessForbidden",
    "InvalidRequest",
    "SourceImageNotFound",
    "GenericAnalysisFailure",
    "classify_error",
]
