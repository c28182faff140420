"""Analyzer service - builds the configured waste analyzer."""

import structlog

from ..classifiers import GeminiClient, GeminiWasteAnalyzer, MockWasteAnalyzer, WasteAnalyzer
from ..config import WASTE_ANALYZER, get_gemini_config

logger = structlog.get_logger()


def build_gemini_analyzer(config: dict | None = None) -> GeminiWasteAnalyzer:
    """Construct a Gemini analyzer with its own client.

    The API key may be empty here; analyze() reports that as a
    ConfigurationError at call time.
    """
    config = config or get_gemini_config()
    client = GeminiClient(api_key=config["api_key"], base_url=config["base_url"])
    return GeminiWasteAnalyzer(
        client=client,
        fallback_models=config["fallback_models"],
        json_mode_markers=config["json_mode_markers"],
        temperature=config["temperature"],
    )


def build_analyzer(kind: str | None = None) -> WasteAnalyzer:
    """Build the analyzer selected by WASTE_ANALYZER ("gemini" or "mock")."""
    kind = (kind or WASTE_ANALYZER).lower()

    if kind == "mock":
        logger.warning("using_mock_analyzer")
        return MockWasteAnalyzer()

    if kind != "gemini":
        raise ValueError(f"Unknown analyzer: {kind!r}. Expected 'gemini' or 'mock'.")

    analyzer = build_gemini_analyzer()
    if not analyzer.health_check():
        logger.warning("gemini_api_key_missing", hint="set GEMINI_API_KEY in .env")
    else:
        logger.info("gemini_analyzer_initialized", fallback_models=list(analyzer.fallback_models))
    return analyzer
