"""Gemini generateContent client used for analysis, synthesis, blur and enhancement."""

import base64
from typing import Any

import httpx
from pydantic import BaseModel, Field

from ..config import GeminiConfig
from ..errors import ConfigurationError, ServiceError
from ..models.assets import Asset


class Part(BaseModel):
    """One request or response part: either text or an inline image."""

    text: str | None = None
    data: bytes | None = Field(default=None, repr=False)
    mime_type: str | None = None

    @classmethod
    def from_text(cls, text: str) -> "Part":
        return cls(text=text)

    @classmethod
    def from_asset(cls, asset: Asset) -> "Part":
        return cls(data=asset.data, mime_type=asset.mime_type)

    @property
    def is_image(self) -> bool:
        return self.data is not None

    def to_wire(self) -> dict[str, Any]:
        if self.is_image:
            return {
                "inlineData": {
                    "mimeType": self.mime_type or "image/png",
                    "data": base64.b64encode(self.data).decode("utf-8"),
                }
            }
        return {"text": self.text or ""}

    @classmethod
    def from_wire(cls, raw: dict[str, Any]) -> "Part":
        inline = raw.get("inlineData") or raw.get("inline_data")
        if inline and inline.get("data"):
            return cls(
                data=base64.b64decode(inline["data"]),
                mime_type=inline.get("mimeType") or inline.get("mime_type"),
            )
        return cls(text=raw.get("text"))


class GenerationResponse(BaseModel):
    """The parts of the first candidate, or nothing."""

    parts: list[Part] = Field(default_factory=list)
    finish_reason: str | None = None

    @property
    def text(self) -> str:
        return "".join(p.text for p in self.parts if p.text)

    def first_image(self) -> Part | None:
        for part in self.parts:
            if part.is_image:
                return part
        return None

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> "GenerationResponse":
        candidates = data.get("candidates") or []
        if not candidates:
            return cls()
        candidate = candidates[0] or {}
        content = candidate.get("content") or {}
        return cls(
            parts=[Part.from_wire(p or {}) for p in (content.get("parts") or [])],
            finish_reason=candidate.get("finishReason"),
        )


class GeminiClient:
    """Client for Gemini's generateContent endpoint."""

    def __init__(self, config: GeminiConfig, api_key: str | None):
        self.config = config
        self.api_key = api_key
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.config.timeout)
        return self._client

    async def generate_content(
        self,
        parts: list[Part],
        model: str | None = None,
        response_modalities: list[str] | None = None,
    ) -> GenerationResponse:
        """Send one ordered list of parts and return the first candidate's parts.

        Args:
            parts: Text and image parts, in order
            model: Model name; defaults to the analysis model
            response_modalities: e.g. ["IMAGE"] or ["IMAGE", "TEXT"]

        Raises:
            ConfigurationError: No credential configured
            ServiceError: Transport failure, error status or unreadable body
        """
        if not self.api_key:
            raise ConfigurationError("API_KEY environment variable not set.")

        model = model or self.config.analysis_model
        payload: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [p.to_wire() for p in parts]}],
        }
        if response_modalities:
            payload["generationConfig"] = {"responseModalities": response_modalities}

        try:
            response = await self.client.post(
                f"{self.config.base_url}/models/{model}:generateContent",
                json=payload,
                headers={"x-goog-api-key": self.api_key},
            )
        except httpx.HTTPError as e:
            raise ServiceError(f"Gemini request failed: {e}") from e

        if response.status_code < 200 or response.status_code >= 300:
            raise ServiceError(
                f"Gemini error {response.status_code}: {(response.text or '')[:500]}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ServiceError(f"Gemini returned invalid JSON: {e}") from e

        return GenerationResponse.from_wire(data)

    async def close(self):
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
