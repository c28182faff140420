"""Gemini-backed food waste analyzer.

Discovers usable vision models from the remote catalog (falling back to a
configured static list), tries them in order until one answers, then turns
the free-text answer into a canonical WasteAnalysisResult.
"""
from collections.abc import Sequence
from pathlib import Path

import structlog

from ..config import DEFAULT_FALLBACK_MODELS, DEFAULT_JSON_MODE_MARKERS
from .base import ModelCandidate, WasteAnalysisResult, WasteAnalyzer
from .errors import (
    MISSING_API_KEY_MESSAGE,
    ConfigurationError,
    ModelUnavailable,
    classify_error,
)
from .gemini_client import GeminiClient
from .parsing import extract_json_from_response, infer_mime_type, normalize_analysis

logger = structlog.get_logger()

ANALYSIS_PROMPT = """Analyze this image of food waste. Identify:
1. All food items visible (be specific: e.g., "chicken breast", "mashed potatoes", "mixed vegetables")
2. Estimate the quantity/portion size wasted for each item
3. Assess the condition of the food (e.g., untouched, partially eaten, spoiled)
4. Provide insights on why this waste might have occurred

Respond in JSON format with this structure:
{
  "items": [
    {
      "name": "item name",
      "category": "main dish/side/appetizer/dessert",
      "estimatedAmount": "description of amount",
      "condition": "untouched/partially eaten/spoiled/expired",
      "estimatedValue": estimated value in USD
    }
  ],
  "totalEstimatedValue": total estimated value,
  "estimatedWaste": {
    "weight": "estimated weight in pounds/grams",
    "percentage": "estimated percentage of original portion"
  },
  "notes": "observations and potential reasons for waste"
}

IMPORTANT: Respond ONLY with valid JSON, no additional text before or after."""

# Catalog entries kept when the vision filter matches nothing
UNFILTERED_CATALOG_LIMIT = 3


def is_vision_model(name: str) -> bool:
    """Guess vision capability from the identifier."""
    return ("pro" in name or "flash" in name) and "embedding" not in name


def select_catalog_models(names: Sequence[str]) -> list[str]:
    """Filter catalog identifiers to likely vision models.

    Falls back to the first few entries when the filter matches nothing.
    """
    vision = [name for name in names if is_vision_model(name)]
    return vision if vision else list(names[:UNFILTERED_CATALOG_LIMIT])


class GeminiWasteAnalyzer(WasteAnalyzer):
    """Food waste analyzer backed by the Gemini API."""

    name = "gemini"

    def __init__(
        self,
        client: GeminiClient,
        fallback_models: Sequence[str] = DEFAULT_FALLBACK_MODELS,
        json_mode_markers: Sequence[str] = DEFAULT_JSON_MODE_MARKERS,
        temperature: float = 0.4,
        prompt: str = ANALYSIS_PROMPT,
    ):
        """Initialize the analyzer.

        Args:
            client: Gemini client bound to one API key.
            fallback_models: Ordered model list used when discovery fails.
            json_mode_markers: Identifier substrings of models that support
                JSON response mode.
            temperature: Sampling temperature for every attempt.
            prompt: Analysis instruction sent with the image.
        """
        self.client = client
        self.fallback_models = tuple(fallback_models)
        self.json_mode_markers = tuple(json_mode_markers)
        self.temperature = temperature
        self.prompt = prompt

    def _candidate(self, name: str, supports_vision: bool = True) -> ModelCandidate:
        return ModelCandidate(
            name=name,
            supports_vision=supports_vision,
            supports_json_mode=any(m in name for m in self.json_mode_markers),
        )

    async def discover_candidates(self) -> list[ModelCandidate]:
        """Build the ordered candidate list. Never raises."""
        try:
            available = await self.client.list_models()
        except Exception as e:
            logger.info("model_discovery_failed", error=str(e))
            available = []

        if available:
            logger.info("models_available", models=available)
            names = select_catalog_models(available)
            candidates = [self._candidate(n, is_vision_model(n)) for n in names]
            source = "catalog"
        else:
            candidates = [self._candidate(n) for n in self.fallback_models]
            source = "fallback"

        logger.info(
            "model_candidates",
            source=source,
            models=[c.name for c in candidates],
        )
        return candidates

    async def _generate_with_fallback(
        self,
        candidates: Sequence[ModelCandidate],
        image_bytes: bytes,
        mime_type: str,
    ) -> tuple[ModelCandidate, str]:
        """Try candidates in order; the first non-empty answer wins.

        Raises:
            ModelUnavailable: If every candidate failed.
        """
        attempted: list[str] = []
        last_error: Exception | None = None

        for candidate in candidates:
            attempted.append(candidate.name)
            try:
                text = await self.client.generate(
                    model=candidate.name,
                    prompt=self.prompt,
                    image_bytes=image_bytes,
                    mime_type=mime_type,
                    temperature=self.temperature,
                    json_mode=candidate.supports_json_mode,
                )
                if not text or not text.strip():
                    raise ValueError(f"Empty response from {candidate.name}")
            except Exception as e:
                last_error = e
                logger.warning(
                    "model_attempt_failed",
                    model=candidate.name,
                    supports_vision=candidate.supports_vision,
                    error=str(e),
                )
                continue

            logger.info(
                "model_attempt_succeeded",
                model=candidate.name,
                supports_vision=candidate.supports_vision,
            )
            return candidate, text

        raise ModelUnavailable(attempted, last_error)

    async def analyze(self, image_path: str) -> WasteAnalysisResult:
        """Analyze a food waste photo.

        Raises:
            WasteAnalysisError: A classified failure; nothing partial is
                ever returned.
        """
        try:
            if not self.client.api_key:
                raise ConfigurationError(MISSING_API_KEY_MESSAGE)

            mime_type = infer_mime_type(image_path)
            image_bytes = Path(image_path).read_bytes()

            candidates = await self.discover_candidates()
            candidate, text = await self._generate_with_fallback(
                candidates, image_bytes, mime_type
            )

            try:
                data = extract_json_from_response(text)
            except Exception:
                logger.error("response_parse_failed", model=candidate.name, response=text)
                raise

            result = normalize_analysis(data, model=candidate.name)
            logger.info(
                "waste_analysis_complete",
                model=candidate.name,
                item_count=len(result.items),
                total_estimated_value=result.total_estimated_value,
            )
            return result

        except Exception as e:
            classified = classify_error(e)
            logger.error(
                "waste_analysis_failed",
                image_path=image_path,
                error_code=classified.code,
                error=str(e),
            )
            if classified is e:
                raise
            raise classified from e

    def health_check(self) -> bool:
        """Configured when an API key is present."""
        return bool(self.client.api_key)
