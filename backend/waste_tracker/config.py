"""Configuration for the Food Waste Tracker backend."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the working directory (no-op when absent)
load_dotenv()

# Base paths
BACKEND_DIR = Path(__file__).parent.parent
DATA_DIR = Path(os.getenv("DATA_DIR", str(BACKEND_DIR / "data")))

# Gemini settings
GEMINI_API_BASE_URL = os.getenv(
    "GEMINI_API_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
)
GEMINI_TEMPERATURE = float(os.getenv("GEMINI_TEMPERATURE", "0.4"))

# Ordered fallback list used when the model catalog cannot be queried.
# Bump this when the provider renames or retires model families.
DEFAULT_FALLBACK_MODELS = (
    "gemini-pro-vision",
    "gemini-pro",
    "gemini-1.5-pro",
    "gemini-1.5-flash",
    "gemini-1.5-flash-001",
)

# Model generations that accept response_mime_type="application/json"
DEFAULT_JSON_MODE_MARKERS = ("1.5", "2.0", "2.5")

# Analyzer backend: "gemini" or "mock"
WASTE_ANALYZER = os.getenv("WASTE_ANALYZER", "gemini").lower()

# API settings
API_HOST = os.getenv("API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("API_PORT", "3001"))
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

# Database
DATABASE_PATH = Path(os.getenv("DATABASE_PATH", str(DATA_DIR / "waste_tracker.db")))

# Uploads
UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", str(DATA_DIR / "uploads")))
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))


def _split_list(value: str | None, default: tuple[str, ...]) -> tuple[str, ...]:
    """Parse a comma-separated environment value."""
    if not value:
        return default
    items = tuple(part.strip() for part in value.split(",") if part.strip())
    return items or default


def get_api_key() -> str:
    """Get the Gemini API key.

    Read on every call so the key can be set after import (tests, reloads).
    """
    return os.getenv("GEMINI_API_KEY", "").strip()


def get_fallback_models() -> tuple[str, ...]:
    """Get the static ordered fallback model list."""
    return _split_list(os.getenv("GEMINI_FALLBACK_MODELS"), DEFAULT_FALLBACK_MODELS)


def get_json_mode_markers() -> tuple[str, ...]:
    """Get identifier substrings that mark JSON-mode capable models."""
    return _split_list(os.getenv("GEMINI_JSON_MODE_MARKERS"), DEFAULT_JSON_MODE_MARKERS)


def get_cors_origins() -> list[str]:
    """Get allowed CORS origins."""
    return list(_split_list(CORS_ORIGINS, ("*",)))


def get_gemini_config() -> dict:
    """Get analyzer configuration as a dictionary.

    Returns:
        Dict with api_key, base_url, fallback_models, json_mode_markers,
        temperature.
    """
    return {
        "api_key": get_api_key(),
        "base_url": GEMINI_API_BASE_URL,
        "fallback_models": get_fallback_models(),
        "json_mode_markers": get_json_mode_markers(),
        "temperature": GEMINI_TEMPERATURE,
    }
