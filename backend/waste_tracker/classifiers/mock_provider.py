"""Mock waste analyzer for development and testing."""
from pathlib import Path

import structlog

from .base import WasteAnalysisResult, WasteAnalyzer
from .errors import IMAGE_NOT_FOUND_MESSAGE, SourceImageNotFound
from .parsing import normalize_analysis

logger = structlog.get_logger()

# Filename keyword -> canned item
MOCK_ITEMS = {
    "pizza": {"name": "pizza slice", "category": "main dish", "estimatedValue": 2.5},
    "salad": {"name": "mixed salad", "category": "side", "estimatedValue": 1.75},
    "cake": {"name": "chocolate cake", "category": "dessert", "estimatedValue": 3.0},
    "bread": {"name": "bread roll", "category": "appetizer", "estimatedValue": 0.5},
}

DEFAULT_ITEM = {"name": "rice", "category": "side", "estimatedValue": 1.0}


class MockWasteAnalyzer(WasteAnalyzer):
    """Mock analyzer that returns canned results.

    Useful for:
    - Development without a Gemini API key
    - Testing the upload/logging pipeline
    - CI/CD environments
    """

    name = "mock"

    def __init__(self, notes: str = "Mock analysis"):
        self.notes = notes
        logger.info("mock_analyzer_initialized")

    async def analyze(self, image_path: str) -> WasteAnalysisResult:
        """Return a canned result based on filename hints."""
        path = Path(image_path)
        if not path.exists():
            raise SourceImageNotFound(IMAGE_NOT_FOUND_MESSAGE)

        filename_lower = path.name.lower()
        items = [
            {**item, "estimatedAmount": "half portion", "condition": "partially eaten"}
            for keyword, item in MOCK_ITEMS.items()
            if keyword in filename_lower
        ]
        if not items:
            items = [{**DEFAULT_ITEM, "estimatedAmount": "a few spoonfuls", "condition": "untouched"}]

        return normalize_analysis(
            {
                "items": items,
                "estimatedWaste": {"weight": f"{len(items) * 150}g", "percentage": "50%"},
                "notes": f"{self.notes} of {path.name}",
            },
            model=self.name,
        )

    def health_check(self) -> bool:
        """Always healthy."""
        return True
