"""Pure helpers for turning model output into canonical records.

Nothing here touches the network, so everything can be tested with
literal strings.
"""
import json
import math
import re
from pathlib import Path
from typing import Any

from .base import WasteAnalysisResult, default_estimated_waste
from .errors import ResponseFormatError

DEFAULT_MIME_TYPE = "image/jpeg"

MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
}

# Greedy: first "{" through last "}"
JSON_SPAN_RE = re.compile(r"\{.*\}", re.DOTALL)

KNOWN_KEYS = {"items", "totalEstimatedValue", "estimatedWaste", "notes"}


def infer_mime_type(image_path: str) -> str:
    """Guess the image MIME type from the file extension.

    Not content sniffing; unknown extensions get image/jpeg.
    """
    return MIME_TYPES.get(Path(image_path).suffix.lower(), DEFAULT_MIME_TYPE)


def _reject_constant(name: str):
    # NaN and Infinity are not JSON
    raise ValueError(f"Invalid JSON constant: {name}")


def extract_json_from_response(response: str) -> dict:
    """Extract a JSON object from free-form model output.

    Handles code fences and surrounding prose by parsing the greedy
    brace-delimited span; falls back to parsing the whole text.

    Raises:
        ResponseFormatError: If no JSON object can be recovered.
    """
    match = JSON_SPAN_RE.search(response)
    candidate = match.group(0) if match else response

    try:
        parsed = json.loads(candidate, parse_constant=_reject_constant)
    except ValueError as e:
        raise ResponseFormatError(
            "Failed to parse AI response. The AI did not return valid JSON.",
            raw_text=response,
        ) from e

    if not isinstance(parsed, dict):
        raise ResponseFormatError(
            f"AI response is JSON but not an object (got {type(parsed).__name__}).",
            raw_text=response,
        )

    return parsed


def is_number(value: Any) -> bool:
    """True for finite int/float values, excluding bool."""
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def sum_item_values(items: list[Any]) -> float:
    """Sum estimatedValue over items; missing, non-numeric or negative counts as 0."""
    total = 0.0
    for item in items:
        value = item.get("estimatedValue") if isinstance(item, dict) else None
        if is_number(value) and value > 0:
            total += value
    return total


def normalize_analysis(data: dict[str, Any], model: str | None = None) -> WasteAnalysisResult:
    """Apply the canonical record invariants to a parsed response.

    Only the top-level shape is repaired; individual items pass through.
    """
    items = data.get("items")
    if not isinstance(items, list):
        items = []

    total = data.get("totalEstimatedValue")
    if not is_number(total) or total < 0:
        total = sum_item_values(items)

    estimated_waste = data.get("estimatedWaste")
    if not estimated_waste or not isinstance(estimated_waste, dict):
        estimated_waste = default_estimated_waste()

    notes = data.get("notes")
    if notes is None:
        notes = ""
    elif not isinstance(notes, str):
        notes = str(notes)

    return WasteAnalysisResult(
        items=items,
        total_estimated_value=total,
        estimated_waste=estimated_waste,
        notes=notes,
        model=model,
        extra={k: v for k, v in data.items() if k not in KNOWN_KEYS},
    )
