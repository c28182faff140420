"""API route tests"""
import json

from waste_tracker.classifiers import (
    GeminiWasteAnalyzer,
    MockWasteAnalyzer,
    QuotaExceeded,
    WasteAnalyzer,
)
from waste_tracker.classifiers.errors import QUOTA_EXCEEDED_MESSAGE
from waste_tracker.classifiers.parsing import normalize_analysis
from waste_tracker.database import WasteRepository
from waste_tracker.services import UploadService


class StubAnalyzer(WasteAnalyzer):
    """Returns a fixed payload or raises a fixed error."""

    name = "stub"

    def __init__(self, payload=None, error=None):
        self.payload = payload or {}
        self.error = error
        self.calls = []

    async def analyze(self, image_path):
        self.calls.append(image_path)
        if self.error:
            raise self.error
        return normalize_analysis(self.payload, model="stub-model")

    def health_check(self):
        return True


def upload(client, content, filename="plate.png", content_type="image/png"):
    return client.post(
        "/api/analyze-waste",
        files={"image": (filename, content, content_type)},
    )


class TestAnalyzeWaste:
    def test_success_logs_entry(self, client, sample_png_bytes):
        client.app.state.analyzer = StubAnalyzer(
            {
                "items": [{"name": "pasta", "estimatedValue": 2.5}, {"name": "bread", "estimatedValue": 1.0}],
                "totalEstimatedValue": "N/A",
                "notes": "too much pasta",
            }
        )

        response = upload(client, sample_png_bytes)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        analysis = body["data"]["analysis"]
        assert analysis["totalEstimatedValue"] == 3.5
        assert analysis["estimatedWaste"] == {"weight": "unknown", "percentage": "unknown"}
        entry = body["data"]["wasteEntry"]
        assert entry["id"] >= 1
        assert entry["imagePath"].startswith("/uploads/")
        assert entry["model"] == "stub-model"

        history = client.get("/api/waste-history").json()
        assert history["meta"]["total"] == 1
        assert history["data"]["entries"][0]["notes"] == "too much pasta"

    def test_missing_image(self, client):
        response = client.post("/api/analyze-waste")

        assert response.status_code == 400
        assert response.json()["meta"]["error_code"] == "NO_IMAGE"

    def test_non_image_rejected(self, client):
        client.app.state.analyzer = stub = StubAnalyzer()

        response = upload(client, b"%PDF-1.4", filename="doc.pdf", content_type="application/pdf")

        assert response.status_code == 400
        assert response.json()["meta"]["error_code"] == "INVALID_UPLOAD"
        assert stub.calls == []

    def test_quota_error_maps_to_429_and_logs_nothing(self, client, sample_png_bytes):
        client.app.state.analyzer = StubAnalyzer(error=QuotaExceeded(QUOTA_EXCEEDED_MESSAGE))

        response = upload(client, sample_png_bytes)

        assert response.status_code == 429
        body = response.json()
        assert body["success"] is False
        assert body["meta"]["error_code"] == "QUOTA_EXCEEDED"
        assert "quota" in body["error"]
        assert client.get("/api/waste-history").json()["meta"]["total"] == 0
        assert list(client.app.state.uploads.upload_dir.iterdir()) == []

    def test_log_failure_removes_stored_upload(self, client, sample_png_bytes, monkeypatch):
        async def failing_log(self, **kwargs):
            raise RuntimeError("disk I/O error")

        monkeypatch.setattr(WasteRepository, "log", failing_log)
        client.app.state.analyzer = StubAnalyzer({"items": []})

        response = upload(client, sample_png_bytes)

        assert response.status_code == 500
        assert response.json()["meta"]["error_code"] == "INTERNAL_ERROR"
        assert list(client.app.state.uploads.upload_dir.iterdir()) == []

    def test_oversized_upload_rejected_before_analysis(self, client, sample_png_bytes, tmp_path):
        client.app.state.uploads = UploadService(tmp_path / "small", max_bytes=16)
        client.app.state.analyzer = stub = StubAnalyzer()

        response = upload(client, sample_png_bytes)

        assert response.status_code == 400
        assert response.json()["meta"]["error_code"] == "INVALID_UPLOAD"
        assert "too large" in response.json()["error"]
        assert stub.calls == []
        assert list((tmp_path / "small").iterdir()) == []

    def test_missing_api_key_is_configuration_error(self, client, sample_png_bytes, fake_client_factory):
        fake = fake_client_factory(api_key="")
        client.app.state.analyzer = GeminiWasteAnalyzer(client=fake)

        response = upload(client, sample_png_bytes)

        assert response.status_code == 500
        assert response.json()["meta"]["error_code"] == "CONFIGURATION_ERROR"
        assert fake.network_calls == 0

    def test_mock_analyzer_end_to_end(self, client, sample_png_bytes):
        client.app.state.analyzer = MockWasteAnalyzer()

        response = upload(client, sample_png_bytes, filename="cake.png")

        assert response.status_code == 200
        assert response.json()["data"]["analysis"]["items"][0]["name"] == "chocolate cake"


class TestHistoryStatsSuggestions:
    def _log(self, client, sample_png_bytes, payload):
        client.app.state.analyzer = StubAnalyzer(payload)
        assert upload(client, sample_png_bytes).status_code == 200

    def test_history_pagination(self, client, sample_png_bytes):
        for i in range(3):
            self._log(client, sample_png_bytes, {"notes": f"meal {i}"})

        response = client.get("/api/waste-history", params={"limit": 2, "offset": 0})

        body = response.json()
        assert body["meta"]["total"] == 3
        assert body["meta"]["limit"] == 2
        assert len(body["data"]["entries"]) == 2

    def test_history_rejects_inverted_range(self, client):
        response = client.get(
            "/api/waste-history",
            params={"start_date": "2026-10-10", "end_date": "2026-10-01"},
        )

        assert response.status_code == 400

    def test_stats(self, client, sample_png_bytes):
        self._log(
            client,
            sample_png_bytes,
            {
                "items": [
                    {"name": "rice", "category": "side", "condition": "untouched", "estimatedValue": 1.0},
                    {"name": "cake", "category": "dessert", "condition": "spoiled", "estimatedValue": 3.0},
                ]
            },
        )

        data = client.get("/api/waste-stats").json()["data"]

        assert data["totalEntries"] == 1
        assert data["totalItems"] == 2
        assert data["totalEstimatedValue"] == 4.0
        assert data["categories"] == {"side": 1, "dessert": 1}

    def test_suggestions_without_entries(self, client):
        body = client.get("/api/suggestions").json()

        assert body["success"] is True
        suggestions = body["data"]["suggestions"]
        assert suggestions[0]["category"] == "getting_started"

    def test_suggestions_with_untouched_food(self, client, sample_png_bytes):
        self._log(
            client,
            sample_png_bytes,
            {"items": [{"name": "soup", "condition": "untouched", "estimatedValue": 2.0}]},
        )

        titles = [s["title"] for s in client.get("/api/suggestions").json()["data"]["suggestions"]]

        assert "Serve smaller portions" in titles


def test_analysis_payload_is_json_serializable():
    result = normalize_analysis({"items": [{"name": "x"}]})
    assert json.loads(json.dumps(result.to_dict()))["items"] == [{"name": "x"}]
