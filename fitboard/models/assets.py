"""Image asset models: the subject photo, garments, hairstyles and outfits."""

import uuid

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..utils.images import detect_mime_type, to_data_url


MAX_GARMENTS_PER_OUTFIT = 6


class Asset(BaseModel):
    """A binary image payload with its MIME type."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(repr=False)
    mime_type: str = "image/png"
    filename: str = "image.png"

    @classmethod
    def from_bytes(cls, data: bytes, filename: str = "image.png") -> "Asset":
        return cls(data=data, mime_type=detect_mime_type(data, filename), filename=filename)

    @property
    def preview_url(self) -> str:
        return to_data_url(self.data, self.mime_type)


class ModelAsset(Asset):
    """The subject photo. Single asset, no edit history."""


class EditableAsset(BaseModel):
    """An asset that keeps its untouched original next to a derived current version.

    ``original`` can never be reassigned. ``current`` starts equal to it and is
    only ever replaced by the editor (crop, face blur, revert), always derived
    from ``original``.
    """

    original: Asset = Field(frozen=True)
    current: Asset
    is_blurred: bool = False
    edits: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _current_defaults_to_original(cls, data):
        if isinstance(data, dict) and data.get("current") is None and "original" in data:
            data = {**data, "current": data["original"]}
        return data

    @property
    def preview_url(self) -> str:
        return self.current.preview_url

    @property
    def original_preview_url(self) -> str:
        return self.original.preview_url

    @property
    def is_edited(self) -> bool:
        return self.current is not self.original


class Garment(EditableAsset):
    """A single clothing item, shoe or accessory photo."""
    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])


class Hairstyle(EditableAsset):
    """Reference photo for the hairstyle to apply."""


class Outfit(BaseModel):
    """An ordered set of garments rendered together as one job."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    name: str
    garments: list[Garment] = Field(default_factory=list, max_length=MAX_GARMENTS_PER_OUTFIT)

    @property
    def has_garments(self) -> bool:
        return len(self.garments) > 0
