"""Asset Analyzer - turns reference photos into factual text descriptions."""

from enum import Enum

from ..models.assets import Asset
from ..services.gemini_client import GeminiClient, Part


class AnalysisRole(str, Enum):
    MODEL = "model"
    GARMENTS = "garments"
    HAIRSTYLE = "hairstyle"


MODEL_ANALYSIS_PROMPT = (
    "Analyze the person in this image. Provide a highly detailed, factual description covering: "
    "face shape, eye color and shape, nose shape, lip shape, skin tone, hair color and style, "
    "estimated age, body type, and any unique features like freckles or scars. Describe them as "
    "if you were creating a character sheet for a photorealistic digital double. Output text only."
)

GARMENT_ANALYSIS_PROMPT = (
    "Analyze the clothing items, footwear, and accessories in these images. For each item, provide "
    "a highly detailed, factual description covering: item type (e.g., t-shirt, jeans, handbag, "
    "sneakers), exact color and material (e.g., cotton, denim, leather), texture, silhouette and "
    "fit, and any specific details like seams, buttons, zippers, hardware, logos, branding, or "
    "graphic patterns. Be extremely precise. Output text only."
)

HAIRSTYLE_ANALYSIS_PROMPT = (
    "Analyze ONLY the hairstyle in this image. IGNORE the person, their face, and the background. "
    "Your description must be strictly limited to the hair itself. Describe its color, length, "
    "texture (e.g., curly, straight, wavy), and specific style (e.g., bob cut, ponytail, braids). "
    "Do not mention the person wearing it. Be factual and detailed. Output text only."
)

NO_HAIRSTYLE = "No hairstyle provided."
NO_GARMENTS = "No garments provided."

FALLBACK_DESCRIPTIONS = {
    AnalysisRole.MODEL: "A person with features as depicted in the reference image.",
    AnalysisRole.GARMENTS: "The exact garments as shown in the reference images.",
    AnalysisRole.HAIRSTYLE: "The hairstyle as depicted in the reference image.",
}

_PROMPTS = {
    AnalysisRole.MODEL: MODEL_ANALYSIS_PROMPT,
    AnalysisRole.GARMENTS: GARMENT_ANALYSIS_PROMPT,
    AnalysisRole.HAIRSTYLE: HAIRSTYLE_ANALYSIS_PROMPT,
}


class AssetAnalyzer:
    """Describes the subject, a garment batch or a hairstyle via the generation service.

    Analysis is best-effort enrichment: a failed call never propagates, it
    yields the fixed fallback description for its role instead.
    """

    def __init__(self, client: GeminiClient, model: str | None = None):
        self.client = client
        self.model = model or client.config.analysis_model

    async def analyze(self, images: list[Asset], role: AnalysisRole) -> str:
        """Describe ``images`` for ``role``.

        Image parts go first, the role prompt last, all in a single call.
        """
        if not images:
            return NO_HAIRSTYLE if role is AnalysisRole.HAIRSTYLE else NO_GARMENTS

        parts = [Part.from_asset(image) for image in images]
        parts.append(Part.from_text(_PROMPTS[role]))

        try:
            response = await self.client.generate_content(parts, model=self.model)
        except Exception as e:
            print(f"   ⚠️ {role.value.capitalize()} analysis failed: {e}")
            return FALLBACK_DESCRIPTIONS[role]

        text = response.text.strip()
        if not text:
            print(f"   ⚠️ {role.value.capitalize()} analysis returned no text")
            return FALLBACK_DESCRIPTIONS[role]
        return text

    async def analyze_model(self, model: Asset) -> str:
        return await self.analyze([model], AnalysisRole.MODEL)

    async def analyze_garments(self, garments: list[Asset]) -> str:
        return await self.analyze(list(garments), AnalysisRole.GARMENTS)

    async def analyze_hairstyle(self, hairstyle: Asset | None) -> str:
        if hairstyle is None:
            return NO_HAIRSTYLE
        return await self.analyze([hairstyle], AnalysisRole.HAIRSTYLE)
