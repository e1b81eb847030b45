"""
Compositor - collage layouts and badge-stamped exports using Pillow.

Collage canvas (1024 × 1024, 8px gap, dark #171717 background):

  2x2                       3-panel
  ┌──────────┬──────────┐   ┌──────────┬──────────┐
  │  img 0   │  img 1   │   │          │  img 1   │
  ├──────────┼──────────┤   │  img 0   ├──────────┤
  │  img 2   │  img 3   │   │          │  img 2   │
  └──────────┴──────────┘   └──────────┴──────────┘

Panels without an image are left as background. Every export carries an
"AI-edited" badge in the bottom-right corner, sized relative to a 512px-wide
reference canvas.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from ..config import CompositorConfig
from ..errors import ExportError, LocalResourceError
from ..models.session import GeneratedImage
from ..utils.images import decode_data_url, encode_png, open_image

# ── Badge geometry (at the 512px reference width) ──────────────────────────

BADGE_TEXT       = "AI-edited"
BADGE_REF_WIDTH  = 512
BADGE_W          = 90
BADGE_H          = 20
BADGE_PADDING    = 10
BADGE_RADIUS     = 5
BADGE_FONT_SIZE  = 10
BADGE_FILL       = (0, 0, 0, 153)   # rgba(0, 0, 0, 0.6)

COLLAGE_TEMPLATES = ("2x2", "3-panel")

PLACEHOLDER_SIZE = (512, 768)
PLACEHOLDER_BG   = (38, 38, 38)


@dataclass(frozen=True)
class ExportResult:
    """An encoded image plus the file name it downloads as."""
    filename: str
    data: bytes
    mime_type: str = "image/png"


def save_export(result: ExportResult, export_dir: Path | None) -> Path | None:
    """Write ``result`` into ``export_dir`` when one is configured."""
    if export_dir is None:
        return None
    export_dir.mkdir(parents=True, exist_ok=True)
    path = export_dir / result.filename
    path.write_bytes(result.data)
    return path


# ── Font helpers ─────────────────────────────────────────────────────────────

def _load_font(size: int) -> ImageFont.ImageFont:
    for path in [
        "DejaVuSansMono-Bold.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSansMono-Bold.ttf",
        "/System/Library/Fonts/Menlo.ttc",
        "/Library/Fonts/Courier New Bold.ttf",
    ]:
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


def _hex_to_rgb(hex_str: str) -> tuple[int, int, int]:
    h = hex_str.strip("#")
    if len(h) == 3:
        h = h[0] * 2 + h[1] * 2 + h[2] * 2
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


# ── Layout ───────────────────────────────────────────────────────────────────

def collage_panels(template: str, size: int, gap: int) -> list[tuple[float, float, float, float]]:
    """Return (x, y, w, h) for each panel, in image order."""
    w = (size - gap) / 2
    h = (size - gap) / 2
    if template == "2x2":
        return [
            (0,       0,       w, h),
            (w + gap, 0,       w, h),
            (0,       h + gap, w, h),
            (w + gap, h + gap, w, h),
        ]
    if template == "3-panel":
        return [
            (0,       0,       w, size),
            (w + gap, 0,       w, h),
            (w + gap, h + gap, w, h),
        ]
    raise ExportError(f"Unknown collage template: {template!r}")


def badge_box(width: int, height: int) -> tuple[float, float, float, float, float, float]:
    """(x0, y0, x1, y1, radius, font_size) of the badge for a canvas size."""
    scale = width / BADGE_REF_WIDTH
    bw = BADGE_W * scale
    bh = BADGE_H * scale
    pad = BADGE_PADDING * scale
    x0 = width - bw - pad
    y0 = height - bh - pad
    return x0, y0, x0 + bw, y0 + bh, BADGE_RADIUS * scale, BADGE_FONT_SIZE * scale


# ── Rendering ────────────────────────────────────────────────────────────────

def draw_badge(img: Image.Image) -> Image.Image:
    """Stamp the semi-transparent "AI-edited" label onto a copy of ``img``."""
    base = img.convert("RGBA")
    overlay = Image.new("RGBA", base.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)

    x0, y0, x1, y1, radius, font_size = badge_box(*base.size)
    draw.rounded_rectangle((x0, y0, x1, y1), radius=radius, fill=BADGE_FILL)

    font = _load_font(max(1, round(font_size)))
    draw.text(
        ((x0 + x1) / 2, (y0 + y1) / 2),
        BADGE_TEXT,
        font=font,
        fill=(255, 255, 255, 255),
        anchor="mm",
    )
    return Image.alpha_composite(base, overlay).convert("RGB")


def render_placeholder(size: tuple[int, int] = PLACEHOLDER_SIZE) -> Image.Image:
    """Local stand-in drawn for a pose that produced no image."""
    img = Image.new("RGB", size, PLACEHOLDER_BG)
    draw = ImageDraw.Draw(img)
    draw.text(
        (size[0] / 2, size[1] / 2),
        "Generation Failed",
        font=_load_font(max(12, size[0] // 16)),
        fill=(160, 160, 160),
        anchor="mm",
    )
    return img


def load_generated(image: GeneratedImage) -> Image.Image:
    """Decode a generated image; placeholders are drawn locally, never fetched."""
    if image.is_placeholder:
        return render_placeholder()
    data = image.data
    if data is None:
        data, _ = decode_data_url(image.src)
    return open_image(data)


def render_collage(
    images: Sequence[Image.Image | None],
    template: str,
    config: CompositorConfig,
) -> Image.Image:
    """Draw up to one image per panel onto a fresh background-filled canvas."""
    panels = collage_panels(template, config.canvas_size, config.gap)
    canvas = Image.new("RGB", (config.canvas_size, config.canvas_size), _hex_to_rgb(config.background))

    for (x, y, w, h), img in zip(panels, images):
        if img is None:
            continue
        panel = img.convert("RGB").resize((round(w), round(h)), Image.Resampling.LANCZOS)
        canvas.paste(panel, (round(x), round(y)))
    return canvas


# ── Export ───────────────────────────────────────────────────────────────────

class Exporter:
    """Builds downloadable PNGs for a single pose or a collage.

    ``is_exporting`` is true only while an export runs and is always cleared,
    whether the export succeeds or fails.
    """

    def __init__(self, config: CompositorConfig):
        self.config = config
        self.is_exporting = False

    def export_image(
        self,
        images: Sequence[GeneratedImage],
        index: int,
        outfit_name: str,
    ) -> ExportResult:
        self.is_exporting = True
        try:
            if not 0 <= index < len(images):
                raise ExportError("No image to export.")
            stamped = draw_badge(load_generated(images[index]))
            result = ExportResult(
                filename=f"{outfit_name}-image-{index + 1}.png",
                data=encode_png(stamped),
            )
            save_export(result, self.config.export_dir)
            return result
        except ExportError:
            raise
        except (LocalResourceError, OSError, ValueError) as e:
            print(f"   ⚠️ Failed to export image: {e}")
            raise ExportError("Could not download image. Please try again.") from e
        finally:
            self.is_exporting = False

    def export_collage(
        self,
        images: Sequence[GeneratedImage],
        template: str,
        outfit_name: str,
    ) -> ExportResult:
        self.is_exporting = True
        try:
            if template not in COLLAGE_TEMPLATES:
                raise ExportError(f"Unknown collage template: {template!r}")
            if not images:
                raise ExportError("No images to export.")

            panel_count = len(collage_panels(template, self.config.canvas_size, self.config.gap))
            loaded = [load_generated(img) for img in images[:panel_count]]
            stamped = draw_badge(render_collage(loaded, template, self.config))
            result = ExportResult(
                filename=f"{outfit_name}-{template}-collage.png",
                data=encode_png(stamped),
            )
            save_export(result, self.config.export_dir)
            return result
        except ExportError:
            raise
        except (LocalResourceError, OSError, ValueError) as e:
            print(f"   ⚠️ Failed to export collage: {e}")
            raise ExportError("Could not download image. Please try again.") from e
        finally:
            self.is_exporting = False
