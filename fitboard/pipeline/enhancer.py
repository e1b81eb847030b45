"""Standalone realism enhancement for a single image."""

from ..compositing.compositor import ExportResult, save_export
from ..config import PipelineConfig
from ..errors import ConfigurationError, EnhancementError
from ..models.assets import Asset
from ..services import GeminiClient, Part


ENHANCEMENT_PROMPT = """
**PRIMARY GOAL: HYPERREALISTIC ENHANCEMENT**

**NON-NEGOTIABLE RULE:**
You MUST preserve the subject's exact pose, facial expression, and all compositional elements from the original image. Do NOT change the person, their expression, the way they are standing/sitting, or the camera angle. Your only task is to enhance the realism of the existing image content. Changing the pose or expression is a failure.

---
**DETAILED INSTRUCTIONS:**

Recreate the image with maximum ultrarealistic, photorealistic fidelity while preserving the exact original composition, colors, and subject matter. The result must be indistinguishable from a real photograph captured on a professional DSLR or cinema camera.

Skin: render authentic, hyper-detailed natural texture. Pores must be clearly visible and varied in size, larger around the nose, forehead and cheeks, finer along the temples, jawline and under the eyes, each catching light with distinct micro-shadows and highlights. Keep a natural oil balance (sheen in the T-zone, matte in drier areas), visible vellus hair, fine lines, faint veins and natural uneven pigmentation. Preserve the true undertones of the skin. Do not erase imperfections.

Hair: distinct individual strands with subtle variation in color and thickness, realistic specular highlights and translucency at the edges, natural flyaways and a soft hairline with baby hairs.

Color: accurate white balance consistent with the original lighting. Keep neutrals neutral, preserve mid-tones and realistic saturation. No orange, magenta or green casts; highlights roll off without clipping.

Texture and optics: preserve fabric weave, fibers, wood grain, metal and glass across every surface. Keep the original depth of field. Mimic real lenses: natural vignetting, true perspective, controlled chromatic aberration. Match the look of a RAW photo with full dynamic range and subtle natural film grain.

Finally, upscale the result to a high resolution (e.g., 2048x2048 pixels). This step is **critical**: use the extra resolution to make pores, vellus hair and fabric threads even more distinct. Any artificial smoothing or loss of detail while upscaling is a strict failure.

Do not include: plastic or waxy skin, beauty-filter smoothing, airbrushing, CGI gloss, painterly effects, extreme HDR glow, haloing, oversaturated colors, duplicated or warped facial features, misrendered hands, extra limbs, or any other sign of AI artifacts.
"""


class RealismEnhancer:
    """Sends one photo through the realism/upscale instruction."""

    def __init__(self, config: PipelineConfig, client: GeminiClient | None = None):
        self.config = config
        self.client = client or GeminiClient(
            config=config.gemini,
            api_key=config.gemini_api_key,
        )

    async def enhance(self, image: Asset) -> ExportResult:
        """Enhance ``image`` and return it ready for download.

        Raises:
            ConfigurationError: No credential configured (no call is made)
            EnhancementError: The service failed or returned no image
        """
        self.config.require_api_key()

        print(f"✨ Enhancing {image.filename}...")
        parts = [Part.from_asset(image), Part.from_text(ENHANCEMENT_PROMPT)]
        try:
            response = await self.client.generate_content(
                parts,
                model=self.config.gemini.image_model,
                response_modalities=["IMAGE"],
            )
        except ConfigurationError:
            raise
        except Exception as e:
            print(f"   ⚠️ Enhancement failed: {e}")
            raise EnhancementError("An error occurred while enhancing the image.") from e

        result_image = response.first_image()
        if result_image is None:
            print("   ⚠️ No image part found in enhancement response")
            raise EnhancementError("Failed to enhance image: No image data returned.")

        result = ExportResult(
            filename=f"enhanced-{image.filename}",
            data=result_image.data,
            mime_type=result_image.mime_type or image.mime_type,
        )
        save_export(result, self.config.compositor.export_dir)
        print(f"   ✅ Enhanced: {result.filename}")
        return result
