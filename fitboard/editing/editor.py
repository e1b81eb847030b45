"""Non-destructive editing: crop and face blur that only ever replace ``current``.

Every operation reads from the asset's untouched ``original``, so a second
crop never compounds the first and a blur can always be reverted for free.
"""

from dataclasses import dataclass

from PIL import Image

from ..errors import BlurError, ConfigurationError, CropError
from ..models.assets import Asset, EditableAsset
from ..services import GeminiClient, Part
from ..utils.images import encode_png, open_image


BLUR_FACE_PROMPT = (
    "Find any human faces in this image and apply a strong, feature-obscuring gaussian blur to "
    "them. Do not alter any other part of the image, including hair, background, or clothing. "
    "The output MUST be only the edited image, with no added text or explanation."
)


@dataclass(frozen=True)
class CropSelection:
    """A committed selection, in on-screen (displayed) pixels."""
    x: float
    y: float
    width: float
    height: float


def crop_source_rect(
    selection: CropSelection,
    natural_size: tuple[int, int],
    displayed_size: tuple[float, float],
) -> tuple[float, float, float, float]:
    """Map an on-screen selection onto the natural-resolution image.

    Returns:
        (x, y, width, height) in source pixels
    """
    natural_w, natural_h = natural_size
    displayed_w, displayed_h = displayed_size
    if displayed_w <= 0 or displayed_h <= 0:
        raise CropError("Displayed image size must be positive.")

    scale_x = natural_w / displayed_w
    scale_y = natural_h / displayed_h
    return (
        selection.x * scale_x,
        selection.y * scale_y,
        selection.width * scale_x,
        selection.height * scale_y,
    )


class AssetEditor:
    """Crop, blur and revert operations over editable assets."""

    def __init__(self, client: GeminiClient | None = None, image_model: str | None = None):
        self.client = client
        self.image_model = image_model or (client.config.image_model if client is not None else None)

    def crop(
        self,
        asset: EditableAsset,
        selection: CropSelection | None,
        displayed_size: tuple[float, float],
        pixel_ratio: float = 1.0,
    ) -> EditableAsset:
        """Replace ``asset.current`` with a crop of ``asset.original``.

        The output is rendered at ``selection * pixel_ratio`` pixels so crops
        stay sharp on high-density displays.

        Raises:
            CropError: No selection committed, or an empty one
            ImageDecodeError: The original could not be decoded
        """
        if selection is None or selection.width <= 0 or selection.height <= 0:
            raise CropError("No crop region selected.")

        source = open_image(asset.original.data)
        sx, sy, sw, sh = crop_source_rect(selection, source.size, displayed_size)

        ratio = pixel_ratio or 1.0
        out_size = (
            max(1, round(selection.width * ratio)),
            max(1, round(selection.height * ratio)),
        )
        box = (round(sx), round(sy), round(sx + sw), round(sy + sh))
        cropped = source.crop(box).resize(out_size, Image.Resampling.LANCZOS)

        asset.current = Asset(
            data=encode_png(cropped),
            mime_type="image/png",
            filename=asset.original.filename,
        )
        asset.edits.append("crop")
        return asset

    async def blur_face(self, asset: EditableAsset) -> EditableAsset:
        """Ask the service to blur every face in ``asset.original``.

        Raises:
            ConfigurationError: No credential configured (no call is made)
            BlurError: The service failed or returned no image; asset unchanged
        """
        if self.client is None:
            raise ConfigurationError("API_KEY environment variable not set.")

        parts = [Part.from_asset(asset.original), Part.from_text(BLUR_FACE_PROMPT)]
        try:
            response = await self.client.generate_content(
                parts,
                model=self.image_model,
                response_modalities=["IMAGE"],
            )
        except ConfigurationError:
            raise
        except Exception as e:
            print(f"   ⚠️ Face blur failed: {e}")
            raise BlurError("An error occurred while blurring the face in the image.") from e

        image = response.first_image()
        if image is None:
            print("   ⚠️ No image part found in blur response")
            raise BlurError("Failed to blur face: No image data returned.")

        asset.current = Asset(
            data=image.data,
            mime_type=image.mime_type or asset.original.mime_type,
            filename=f"blurred-{asset.original.filename}",
        )
        asset.is_blurred = True
        asset.edits.append("blur")
        return asset

    def revert_blur(self, asset: EditableAsset) -> EditableAsset:
        """Restore the original. No network, no decoding."""
        asset.current = asset.original
        asset.is_blurred = False
        asset.edits.append("revert")
        return asset
