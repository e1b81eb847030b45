"""Data models for the FitBoard try-on pipeline."""

from .assets import Asset, EditableAsset, Garment, Hairstyle, ModelAsset, Outfit
from .board import OutfitBoard
from .session import (
    GeneratedImage,
    GenerationJob,
    JobResult,
    PoseFailed,
    PoseSucceeded,
    RunState,
    TryOnRequest,
    TryOnSession,
)
from .storyboard import NoteElement, StoryboardElement, collect_instructions

__all__ = [
    "Asset",
    "EditableAsset",
    "Garment",
    "Hairstyle",
    "ModelAsset",
    "Outfit",
    "OutfitBoard",
    "GeneratedImage",
    "GenerationJob",
    "JobResult",
    "PoseFailed",
    "PoseSucceeded",
    "RunState",
    "TryOnRequest",
    "TryOnSession",
    "NoteElement",
    "StoryboardElement",
    "collect_instructions",
]
