"""Upload service for handling waste photo uploads.

Stores uploaded photos under the uploads directory with collision-free
names, so they can be analyzed from disk and served back to the UI.
"""
import random
import re
import time
from pathlib import Path

import structlog

from ..config import MAX_UPLOAD_BYTES, UPLOAD_DIR
from ..utils.image import is_supported_format, is_valid_image

logger = structlog.get_logger()

# Public URL prefix the stored files are served under
PUBLIC_PREFIX = "/uploads"

UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9._-]+")


class UploadError(ValueError):
    """Rejected upload (wrong type, empty, or too large)."""


def safe_filename(filename: str) -> str:
    """Strip directories and unsafe characters from a client filename."""
    name = Path(filename).name
    name = UNSAFE_CHARS_RE.sub("_", name).strip("._")
    return name or "upload.jpg"


class UploadService:
    """Stores uploaded photos.

    Handles:
    - Validating content type, size and image data
    - Writing files with unique names
    - Mapping stored files to public paths
    - Removing files that failed analysis
    """

    def __init__(self, upload_dir: Path = UPLOAD_DIR, max_bytes: int = MAX_UPLOAD_BYTES):
        self.upload_dir = Path(upload_dir)
        self.max_bytes = max_bytes
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def unique_name(self, filename: str) -> str:
        """Prefix the filename with a millisecond timestamp and random suffix."""
        suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
        return f"{suffix}-{safe_filename(filename)}"

    def save(
        self,
        filename: str,
        content: bytes,
        content_type: str | None = None,
    ) -> Path:
        """Validate and store an uploaded photo.

        Args:
            filename: Original client filename.
            content: File content bytes.
            content_type: Declared MIME type, if any.

        Returns:
            Path to the stored file.

        Raises:
            UploadError: If the upload is rejected.
        """
        if content_type and not content_type.startswith("image/"):
            raise UploadError("Only image files are allowed")

        ext = Path(filename).suffix.lower()
        if ext and not is_supported_format(filename):
            raise UploadError(f"Unsupported format: {ext}")

        if not content:
            raise UploadError("Uploaded file is empty")

        if len(content) > self.max_bytes:
            raise UploadError(
                f"File too large: {len(content)} bytes (limit {self.max_bytes})"
            )

        file_path = self.upload_dir / self.unique_name(filename)
        file_path.write_bytes(content)

        if not is_valid_image(str(file_path)):
            file_path.unlink(missing_ok=True)
            raise UploadError("Uploaded file is not a readable image")

        logger.info("upload_saved", path=str(file_path), size=len(content))
        return file_path

    def public_path(self, file_path: Path) -> str:
        """Public URL path for a stored file."""
        return f"{PUBLIC_PREFIX}/{Path(file_path).name}"

    def remove(self, file_path: Path) -> bool:
        """Delete a stored file. Returns True if it existed."""
        try:
            Path(file_path).unlink()
            logger.info("upload_removed", path=str(file_path))
            return True
        except FileNotFoundError:
            return False
