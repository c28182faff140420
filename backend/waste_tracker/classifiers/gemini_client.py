"""Thin client for the Gemini API.

Constructed explicitly and handed to the analyzer, so tests can pass a fake
and one process can hold clients for several API keys.
"""
import httpx
import structlog
from google import genai
from google.genai import types

logger = structlog.get_logger()

JSON_MIME_TYPE = "application/json"


class GeminiClient:
    """Model catalog query plus multimodal generation for one API key."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.transport = transport
        self._genai: genai.Client | None = None

    def _sdk(self) -> genai.Client:
        # Created on first use; the SDK refuses to build without a key
        if self._genai is None:
            self._genai = genai.Client(api_key=self.api_key)
        return self._genai

    async def list_models(self) -> list[str]:
        """Query the model catalog.

        Returns:
            Model identifiers with the "models/" prefix stripped.

        Raises:
            httpx.HTTPError: On transport errors or non-success status.
            ValueError: If the payload is not the expected shape.
        """
        async with httpx.AsyncClient(transport=self.transport) as client:
            response = await client.get(
                f"{self.base_url}/models", params={"key": self.api_key}
            )
            response.raise_for_status()

        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError("Model catalog payload is not an object")

        models = payload.get("models") or []
        if not isinstance(models, list):
            raise ValueError("Model catalog 'models' is not a list")

        names = []
        for entry in models:
            name = entry.get("name") if isinstance(entry, dict) else None
            if isinstance(name, str) and name:
                names.append(name.removeprefix("models/"))
        return names

    async def generate(
        self,
        model: str,
        prompt: str,
        image_bytes: bytes,
        mime_type: str,
        temperature: float,
        json_mode: bool = False,
    ) -> str:
        """Send the prompt plus an inline image and return the response text."""
        config = types.GenerateContentConfig(
            temperature=temperature,
            response_mime_type=JSON_MIME_TYPE if json_mode else None,
        )
        response = await self._sdk().aio.models.generate_content(
            model=model,
            contents=[
                prompt,
                types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
            ],
            config=config,
        )
        return response.text or ""
