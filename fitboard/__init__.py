"""FitBoard - virtual try-on generation with Gemini."""

from .config import PipelineConfig, load_config
from .pipeline import RealismEnhancer, TryOnPipeline

__version__ = "1.0.0"

__all__ = ["PipelineConfig", "RealismEnhancer", "TryOnPipeline", "load_config"]
