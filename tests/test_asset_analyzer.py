"""Unit tests for AssetAnalyzer - descriptions and fallbacks."""

import pytest
from unittest.mock import AsyncMock

from conftest import image_response, text_response

from fitboard.agents.asset_analyzer import (
    FALLBACK_DESCRIPTIONS,
    GARMENT_ANALYSIS_PROMPT,
    MODEL_ANALYSIS_PROMPT,
    NO_GARMENTS,
    NO_HAIRSTYLE,
    AnalysisRole,
    AssetAnalyzer,
)
from fitboard.errors import ServiceError


class TestAnalyze:
    """Tests for single analysis calls."""

    @pytest.fixture
    def analyzer(self, mock_client):
        return AssetAnalyzer(mock_client)

    @pytest.mark.asyncio
    async def test_returns_service_text(self, analyzer, mock_client, model_asset):
        mock_client.generate_content = AsyncMock(return_value=text_response("  Oval face, brown eyes.  "))

        result = await analyzer.analyze_model(model_asset)

        assert result == "Oval face, brown eyes."

    @pytest.mark.asyncio
    async def test_images_first_prompt_last(self, analyzer, mock_client, garment):
        other = garment.model_copy(update={"id": "other"})

        await analyzer.analyze_garments([garment.current, other.current])

        parts = mock_client.generate_content.call_args.args[0]
        assert [p.is_image for p in parts] == [True, True, False]
        assert parts[-1].text == GARMENT_ANALYSIS_PROMPT

    @pytest.mark.asyncio
    async def test_uses_analysis_model_without_modalities(self, analyzer, mock_client, model_asset):
        await analyzer.analyze_model(model_asset)

        call = mock_client.generate_content.call_args
        assert call.kwargs["model"] == "gemini-2.5-flash"
        assert call.args[0][-1].text == MODEL_ANALYSIS_PROMPT
        assert "response_modalities" not in call.kwargs

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", list(AnalysisRole))
    async def test_failure_returns_fallback(self, analyzer, mock_client, model_asset, role):
        mock_client.generate_content = AsyncMock(side_effect=ServiceError("boom", status_code=503))

        result = await analyzer.analyze([model_asset], role)

        assert result == FALLBACK_DESCRIPTIONS[role]

    @pytest.mark.asyncio
    async def test_empty_text_returns_fallback(self, analyzer, mock_client, model_asset):
        mock_client.generate_content = AsyncMock(return_value=image_response())

        result = await analyzer.analyze_model(model_asset)

        assert result == FALLBACK_DESCRIPTIONS[AnalysisRole.MODEL]


class TestSentinels:
    """Empty inputs never reach the service."""

    @pytest.fixture
    def analyzer(self, mock_client):
        return AssetAnalyzer(mock_client)

    @pytest.mark.asyncio
    async def test_no_hairstyle(self, analyzer, mock_client):
        assert await analyzer.analyze_hairstyle(None) == NO_HAIRSTYLE
        mock_client.generate_content.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_garments(self, analyzer, mock_client):
        assert await analyzer.analyze_garments([]) == NO_GARMENTS
        mock_client.generate_content.assert_not_awaited()
