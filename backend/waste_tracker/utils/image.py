"""Image utilities shared by the upload and analysis paths.

All image format constants should be defined here.
"""
from pathlib import Path

import structlog
from PIL import Image, UnidentifiedImageError

logger = structlog.get_logger()

# Canonical list of accepted upload formats - use this everywhere
SUPPORTED_FORMATS = {".jpg", ".jpeg", ".png", ".webp", ".gif", ".bmp"}


def is_supported_format(path: str) -> bool:
    """Check if file format is supported."""
    return Path(path).suffix.lower() in SUPPORTED_FORMATS


def is_valid_image(path: str) -> bool:
    """Check that the file holds decodable image data."""
    try:
        with Image.open(path) as img:
            img.verify()
        return True
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        logger.debug("invalid_image", path=path, error=str(e))
        return False

