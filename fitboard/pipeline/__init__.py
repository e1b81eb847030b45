"""Generation pipelines."""

from .enhancer import RealismEnhancer
from .tryon_pipeline import TryOnPipeline, select_jobs

__all__ = ["RealismEnhancer", "TryOnPipeline", "select_jobs"]
