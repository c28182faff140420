"""Base classes for waste analyzers"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

UNKNOWN = "unknown"


def default_estimated_waste() -> dict[str, str]:
    return {"weight": UNKNOWN, "percentage": UNKNOWN}


@dataclass(frozen=True)
class ModelCandidate:
    """One remote model identifier tried in the fallback loop."""
    name: str
    supports_vision: bool = True
    supports_json_mode: bool = False


@dataclass
class WasteItem:
    """A single food item seen in a waste photo.

    Upstream items are passed through untouched, so every field is optional
    and may hold whatever type the model returned.
    """
    name: Any = None
    category: Any = None
    estimated_amount: Any = None
    condition: Any = None
    estimated_value: Any = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WasteItem":
        known = {"name", "category", "estimatedAmount", "condition", "estimatedValue"}
        return cls(
            name=data.get("name"),
            category=data.get("category"),
            estimated_amount=data.get("estimatedAmount"),
            condition=data.get("condition"),
            estimated_value=data.get("estimatedValue"),
            extra={k: v for k, v in data.items() if k not in known},
        )


@dataclass
class WasteAnalysisResult:
    """Canonical analysis record.

    Invariants: items is a list, total_estimated_value is a number,
    estimated_waste is a mapping with weight and percentage, notes is a str.
    """
    items: list[Any] = field(default_factory=list)
    total_estimated_value: float = 0.0
    estimated_waste: dict[str, Any] = field(default_factory=default_estimated_waste)
    notes: str = ""
    model: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def waste_items(self) -> list[WasteItem]:
        """Items that are mappings, as WasteItem values."""
        return [WasteItem.from_dict(item) for item in self.items if isinstance(item, dict)]

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase JSON shape returned by the API."""
        data = dict(self.extra)
        data.update(
            {
                "items": self.items,
                "totalEstimatedValue": self.total_estimated_value,
                "estimatedWaste": self.estimated_waste,
                "notes": self.notes,
            }
        )
        return data


class WasteAnalyzer(ABC):
    """Abstract interface for waste analyzers.

    Implement this to add new backends. Routes don't care which
    backend is used, just that it returns WasteAnalysisResult.
    """

    name: str = "base"

    @abstractmethod
    async def analyze(self, image_path: str) -> WasteAnalysisResult:
        """Analyze a single waste photo."""
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """Verify the analyzer is configured and ready."""
        pass
