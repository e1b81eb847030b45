"""Analysis and prompt agents for the try-on pipeline."""

from .asset_analyzer import AnalysisRole, AssetAnalyzer
from .prompt_composer import DEFAULT_SCENE, POSE_TEMPLATES, PromptComposer

__all__ = [
    "AnalysisRole",
    "AssetAnalyzer",
    "DEFAULT_SCENE",
    "POSE_TEMPLATES",
    "PromptComposer",
]
