"""Image byte helpers: MIME sniffing, data URLs and Pillow decode/encode."""

import base64
import io
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from ..errors import ImageDecodeError


_SUFFIX_MIME = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".gif": "image/gif",
}


def detect_mime_type(data: bytes, filename: str | None = None) -> str:
    """Detect image format from magic bytes, falling back to the file extension."""
    if data[:3] == b'\xff\xd8\xff':
        return "image/jpeg"
    if data[:8] == b'\x89PNG\r\n\x1a\n':
        return "image/png"
    if data[:4] == b'RIFF' and data[8:12] == b'WEBP':
        return "image/webp"
    if data[:6] in (b'GIF87a', b'GIF89a'):
        return "image/gif"
    if filename:
        return _SUFFIX_MIME.get(Path(filename).suffix.lower(), "image/png")
    return "image/png"


def to_data_url(data: bytes, mime_type: str) -> str:
    b64 = base64.b64encode(data).decode("utf-8")
    return f"data:{mime_type};base64,{b64}"


def decode_data_url(data: str) -> tuple[bytes, str | None]:
    """Decode a base64 data URL (or bare base64) into bytes and its MIME type."""
    mime_type = None
    if data.startswith("data:"):
        # e.g. "data:image/png;base64,...."
        if "," not in data:
            raise ImageDecodeError("Malformed data URL: missing payload")
        header, encoded = data.split(",", 1)
        mime_type = header[5:].split(";", 1)[0] or None
    else:
        encoded = data
    try:
        return base64.b64decode(encoded), mime_type
    except ValueError as e:
        raise ImageDecodeError(f"Invalid base64 image data: {e}") from e


def open_image(data: bytes) -> Image.Image:
    """Decode bytes into an RGB(A) Pillow image with EXIF orientation applied."""
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ImageDecodeError(f"Cannot decode image: {e}") from e

    img = ImageOps.exif_transpose(img)
    if img.mode not in ("RGB", "RGBA"):
        img = img.convert("RGBA" if "A" in img.getbands() else "RGB")
    return img


def encode_png(img: Image.Image) -> bytes:
    out = io.BytesIO()
    img.save(out, format="PNG")
    return out.getvalue()
