"""Tests for the Gemini generateContent client using a mocked transport."""

import base64
import json

import httpx
import pytest

from conftest import make_png

from fitboard.config import GeminiConfig
from fitboard.errors import ConfigurationError, ServiceError
from fitboard.services import GeminiClient, GenerationResponse, Part


def _client_with(handler, api_key="test-key"):
    client = GeminiClient(GeminiConfig(), api_key=api_key)
    client._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return client


class TestWireFormat:
    """Tests for request and response part encoding."""

    def test_image_part_to_wire(self):
        png = make_png()
        wire = Part(data=png, mime_type="image/png").to_wire()

        assert wire == {"inlineData": {"mimeType": "image/png", "data": base64.b64encode(png).decode()}}

    def test_text_part_to_wire(self):
        assert Part.from_text("hello").to_wire() == {"text": "hello"}

    def test_response_uses_first_candidate(self):
        png = make_png()
        response = GenerationResponse.from_wire({
            "candidates": [
                {
                    "content": {"parts": [
                        {"text": "Here you go."},
                        {"inlineData": {"mimeType": "image/png", "data": base64.b64encode(png).decode()}},
                    ]},
                    "finishReason": "STOP",
                },
                {"content": {"parts": [{"text": "ignored"}]}},
            ]
        })

        assert response.text == "Here you go."
        assert response.first_image().data == png
        assert response.finish_reason == "STOP"

    def test_no_candidates(self):
        response = GenerationResponse.from_wire({"promptFeedback": {"blockReason": "SAFETY"}})

        assert response.parts == []
        assert response.first_image() is None
        assert response.text == ""


class TestGenerateContent:
    """Tests for the HTTP call."""

    @pytest.mark.asyncio
    async def test_request_shape(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["key"] = request.headers.get("x-goog-api-key")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "ok"}]}}]})

        client = _client_with(handler)
        response = await client.generate_content(
            [Part.from_text("describe")],
            model="gemini-2.5-flash-image-preview",
            response_modalities=["IMAGE", "TEXT"],
        )
        await client.close()

        assert response.text == "ok"
        assert seen["url"].endswith("/models/gemini-2.5-flash-image-preview:generateContent")
        assert seen["key"] == "test-key"
        assert seen["body"]["contents"][0]["parts"] == [{"text": "describe"}]
        assert seen["body"]["generationConfig"] == {"responseModalities": ["IMAGE", "TEXT"]}

    @pytest.mark.asyncio
    async def test_defaults_to_analysis_model(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={})

        client = _client_with(handler)
        await client.generate_content([Part.from_text("x")])

        assert "/models/gemini-2.5-flash:generateContent" in seen["url"]
        assert "generationConfig" not in seen["body"]

    @pytest.mark.asyncio
    async def test_error_status(self):
        client = _client_with(lambda request: httpx.Response(429, text="quota exceeded"))

        with pytest.raises(ServiceError) as exc_info:
            await client.generate_content([Part.from_text("x")])

        assert exc_info.value.status_code == 429

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        client = _client_with(handler)

        with pytest.raises(ServiceError):
            await client.generate_content([Part.from_text("x")])

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        client = _client_with(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(ServiceError):
            await client.generate_content([Part.from_text("x")])

    @pytest.mark.asyncio
    async def test_missing_key(self):
        client = _client_with(lambda request: httpx.Response(200, json={}), api_key=None)

        with pytest.raises(ConfigurationError):
            await client.generate_content([Part.from_text("x")])
