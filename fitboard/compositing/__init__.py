"""Collage composition and badge-stamped export."""

from .compositor import (
    BADGE_TEXT,
    COLLAGE_TEMPLATES,
    ExportResult,
    Exporter,
    collage_panels,
    draw_badge,
    render_collage,
)

__all__ = [
    "BADGE_TEXT",
    "COLLAGE_TEMPLATES",
    "ExportResult",
    "Exporter",
    "collage_panels",
    "draw_badge",
    "render_collage",
]
