"""Configuration management for the FitBoard try-on pipeline."""

from pathlib import Path
from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError


class GeminiConfig(BaseModel):
    """Generation service connection settings."""
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    analysis_model: str = "gemini-2.5-flash"
    image_model: str = "gemini-2.5-flash-image-preview"
    timeout: float = 300.0  # image calls routinely take a minute or more


class CompositorConfig(BaseModel):
    """Collage and export settings."""
    canvas_size: int = 1024
    gap: int = 8
    background: str = "#171717"
    export_dir: Path | None = None  # None = return bytes only


class PipelineConfig(BaseSettings):
    """Main pipeline configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        extra="ignore",
        populate_by_name=True,
    )

    # Single static credential, shared by try-on, blur and enhancement
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY"),
    )

    # Sub-configs
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    compositor: CompositorConfig = Field(default_factory=CompositorConfig)

    @field_validator("gemini_api_key", mode="before")
    @classmethod
    def _strip_api_key(cls, value):
        # Blank or whitespace-only keys count as missing
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @property
    def has_api_key(self) -> bool:
        return bool(self.gemini_api_key)

    def require_api_key(self) -> str:
        """Return the credential or fail before any network call is made."""
        if not self.has_api_key:
            raise ConfigurationError("API_KEY environment variable not set.")
        return self.gemini_api_key


def load_config() -> PipelineConfig:
    """Load configuration from environment and defaults."""
    return PipelineConfig()
