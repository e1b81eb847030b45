# Test fixtures and configuration
import io
import pytest
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

from PIL import Image

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from fitboard.config import GeminiConfig, PipelineConfig
from fitboard.models import Asset, Garment, Hairstyle, ModelAsset, Outfit
from fitboard.services import GenerationResponse, Part


def make_png(color=(255, 0, 0), size=(8, 8)) -> bytes:
    """Encode a solid-color PNG."""
    out = io.BytesIO()
    Image.new("RGB", size, color).save(out, format="PNG")
    return out.getvalue()


def image_response(data: bytes | None = None, mime_type: str = "image/png") -> GenerationResponse:
    """A candidate carrying one inline image."""
    return GenerationResponse(parts=[Part(data=data or make_png((0, 128, 0)), mime_type=mime_type)])


def text_response(text: str) -> GenerationResponse:
    """A text-only candidate (analysis answers, refusals)."""
    return GenerationResponse(parts=[Part(text=text)])


@pytest.fixture
def png_bytes():
    """Small valid PNG image bytes."""
    return make_png()


@pytest.fixture
def config(monkeypatch):
    """Config with a credential, ignoring any local .env."""
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    return PipelineConfig(_env_file=None)


@pytest.fixture
def config_without_key(monkeypatch):
    """Config with no credential at all."""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    return PipelineConfig(_env_file=None)


@pytest.fixture
def mock_client():
    """Gemini client stand-in: text for analysis calls, an image for image calls."""
    client = MagicMock()
    client.config = GeminiConfig()

    async def generate(parts, model=None, response_modalities=None):
        if response_modalities:
            return image_response()
        return text_response("A detailed description.")

    client.generate_content = AsyncMock(side_effect=generate)
    return client


@pytest.fixture
def model_asset():
    return ModelAsset.from_bytes(make_png((200, 180, 160)), "model.png")


@pytest.fixture
def garment():
    return Garment(original=Asset.from_bytes(make_png((0, 0, 255)), "shirt.png"))


@pytest.fixture
def hairstyle():
    return Hairstyle(original=Asset.from_bytes(make_png((90, 60, 20)), "bob.png"))


@pytest.fixture
def outfit(garment):
    return Outfit(id="outfit-a", name="Outfit 1", garments=[garment])
