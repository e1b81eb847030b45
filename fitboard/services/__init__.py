"""External service clients."""

from .gemini_client import GeminiClient, GenerationResponse, Part

__all__ = ["GeminiClient", "GenerationResponse", "Part"]
