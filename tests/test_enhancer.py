"""Unit tests for RealismEnhancer."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from conftest import image_response, make_png, text_response

from fitboard.errors import ConfigurationError, EnhancementError, ServiceError
from fitboard.models import Asset
from fitboard.pipeline import RealismEnhancer
from fitboard.pipeline.enhancer import ENHANCEMENT_PROMPT


class TestRealismEnhancer:
    """Tests for single-image enhancement."""

    @pytest.fixture
    def client(self):
        client = MagicMock()
        client.generate_content = AsyncMock(return_value=image_response(make_png((9, 9, 9), (32, 32))))
        return client

    @pytest.fixture
    def photo(self):
        return Asset.from_bytes(make_png(), "look.png")

    @pytest.mark.asyncio
    async def test_enhance_returns_prefixed_file(self, config, client, photo):
        enhancer = RealismEnhancer(config, client=client)

        result = await enhancer.enhance(photo)

        assert result.filename == "enhanced-look.png"
        assert result.data == make_png((9, 9, 9), (32, 32))

        call = client.generate_content.call_args
        parts = call.args[0]
        assert parts[0].data == photo.data
        assert parts[1].text == ENHANCEMENT_PROMPT
        assert call.kwargs["model"] == config.gemini.image_model
        assert call.kwargs["response_modalities"] == ["IMAGE"]

    @pytest.mark.asyncio
    async def test_missing_credential_makes_no_call(self, config_without_key, client, photo):
        enhancer = RealismEnhancer(config_without_key, client=client)

        with pytest.raises(ConfigurationError, match="API_KEY environment variable not set."):
            await enhancer.enhance(photo)

        client.generate_content.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_image_returned(self, config, client, photo):
        client.generate_content = AsyncMock(return_value=text_response("No."))
        enhancer = RealismEnhancer(config, client=client)

        with pytest.raises(EnhancementError, match="No image data returned"):
            await enhancer.enhance(photo)

    @pytest.mark.asyncio
    async def test_service_failure(self, config, client, photo):
        client.generate_content = AsyncMock(side_effect=ServiceError("timeout"))
        enhancer = RealismEnhancer(config, client=client)

        with pytest.raises(EnhancementError, match="An error occurred while enhancing the image."):
            await enhancer.enhance(photo)

    @pytest.mark.asyncio
    async def test_export_dir_receives_file(self, config, client, photo, tmp_path):
        config.compositor.export_dir = tmp_path
        enhancer = RealismEnhancer(config, client=client)

        result = await enhancer.enhance(photo)

        assert (tmp_path / "enhanced-look.png").read_bytes() == result.data
