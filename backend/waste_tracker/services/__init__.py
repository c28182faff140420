"""Service layer for business logic."""
from .analyzer_service import build_analyzer, build_gemini_analyzer
from .suggestions import Suggestion, generate_suggestions
from .upload_service import UploadError, UploadService

__all__ = [
    "build_analyzer",
    "build_gemini_analyzer",
    "Suggestion",
    "generate_suggestions",
    "UploadError",
    "UploadService",
]
