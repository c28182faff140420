"""Pytest configuration and fixtures"""
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from waste_tracker import main
from waste_tracker.database import close_database, init_database


class FakeGeminiClient:
    """Stands in for GeminiClient; records every call.

    Args:
        catalog: Identifiers returned by list_models, or an exception to raise.
        responses: Per-model response text, or an exception to raise.
        default: Response for models not in ``responses``.
    """

    def __init__(self, api_key="test-key", catalog=None, responses=None, default=None):
        self.api_key = api_key
        self.catalog = catalog if catalog is not None else []
        self.responses = responses or {}
        self.default = default
        self.list_calls = 0
        self.generate_calls = []

    async def list_models(self):
        self.list_calls += 1
        if isinstance(self.catalog, Exception):
            raise self.catalog
        return list(self.catalog)

    async def generate(self, model, prompt, image_bytes, mime_type, temperature, json_mode=False):
        self.generate_calls.append(
            {
                "model": model,
                "prompt": prompt,
                "image_bytes": image_bytes,
                "mime_type": mime_type,
                "temperature": temperature,
                "json_mode": json_mode,
            }
        )
        response = self.responses.get(model, self.default)
        if response is None:
            raise RuntimeError(f"404 model {model} not found")
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def network_calls(self):
        return self.list_calls + len(self.generate_calls)


@pytest.fixture
def fake_client_factory():
    """Build FakeGeminiClient instances."""
    return FakeGeminiClient


@pytest.fixture
def sample_image(tmp_path):
    """A small JPEG on disk."""
    path = tmp_path / "leftovers.jpg"
    Image.new("RGB", (64, 48), color=(200, 120, 40)).save(path)
    return path


@pytest.fixture
def sample_png_bytes(tmp_path):
    """PNG-encoded image bytes."""
    path = tmp_path / "plate.png"
    Image.new("RGB", (32, 32), color=(10, 200, 10)).save(path)
    return path.read_bytes()


@pytest.fixture
async def db():
    """Create temporary database for testing."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name

    db = await init_database(db_path)
    yield db
    await close_database(db)
    Path(db_path).unlink(missing_ok=True)


@pytest.fixture
def client(tmp_path, monkeypatch):
    """Test client with a temporary database and uploads directory."""
    monkeypatch.setattr(main, "DATABASE_PATH", tmp_path / "test.db")
    monkeypatch.setattr(main, "UPLOAD_DIR", tmp_path / "uploads")
    monkeypatch.setattr("waste_tracker.services.analyzer_service.WASTE_ANALYZER", "mock")

    with TestClient(main.app) as test_client:
        yield test_client
