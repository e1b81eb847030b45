"""Non-destructive image editing."""

from .editor import AssetEditor, CropSelection, crop_source_rect

__all__ = ["AssetEditor", "CropSelection", "crop_source_rect"]
