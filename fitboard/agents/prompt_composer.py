"""Prompt Composer - assembles the try-on instruction document for one pose."""

from ..models.assets import Asset
from ..services.gemini_client import Part


# Order matters: pose index i of every job uses POSE_TEMPLATES[i].
POSE_TEMPLATES = (
    "Full-body fashion shot, model looking confidently at the camera, dynamic pose.",
    "Three-quarters view, stylish, relaxed pose against a clean background.",
    "Medium shot from the waist up, focusing on the outfit details, natural candid pose.",
    "Walking towards the camera, candid street style shot.",
    "Leaning against a textured wall, relaxed and looking away from the camera.",
)

DEFAULT_SCENE = "A clean, minimalist, brightly lit photography studio."

PERSON_LABEL = "**[PERSON IMAGE]**"
HAIRSTYLE_LABEL = "**[HAIRSTYLE IMAGE]**"
GARMENTS_LABEL = "**[GARMENT IMAGES]**"


class PromptComposer:
    """Builds the structured try-on instruction and the ordered request parts.

    Pure string assembly: never calls the network and never fails.
    """

    def resolve_scene(self, instructions: str | None) -> str:
        """User direction, or the default studio scene when blank."""
        if instructions and instructions.strip():
            return instructions
        return DEFAULT_SCENE

    def compose(
        self,
        model_analysis: str,
        garment_analysis: str,
        hairstyle_analysis: str,
        pose: str,
        instructions: str | None = None,
        has_hairstyle: bool = False,
        lock_face: bool = True,
    ) -> str:
        """Compose the instruction document for a single pose.

        Args:
            model_analysis: Identity description of the subject
            garment_analysis: Description of this job's garments
            hairstyle_analysis: Hairstyle description (or the no-hairstyle sentinel)
            pose: One of POSE_TEMPLATES
            instructions: Free-text creative direction; blank means default scene
            has_hairstyle: Replace the hair instead of keeping it
            lock_face: Demand an exact facial match instead of high fidelity

        Returns:
            The full instruction text, ending with the image-only output directive
        """
        scene = self.resolve_scene(instructions)

        if has_hairstyle:
            hair_step = f"Replace the hair with the style from {HAIRSTYLE_LABEL}."
        else:
            hair_step = "Keep the original hair."

        if lock_face:
            face_step = "Facial features MUST be a 100% match to the [PERSON IMAGE]."
        else:
            face_step = "Preserve facial features with high fidelity."

        return f"""
# TASK: VIRTUAL TRY-ON

## UNBREAKABLE CORE DIRECTIVE:
**REPLICATE THE PERSON from [PERSON IMAGE] EXACTLY.** The face, body shape, and skin texture are non-negotiable. Any change to their identity is a failure.

---

## REFERENCE ASSETS:

*   **[PERSON IMAGE]:** The base image. This person's identity MUST be preserved.
    *   **Model Analysis:** {model_analysis}
*   **[GARMENT IMAGES]:** The clothing to apply.
    *   **Garment Analysis:** {garment_analysis}
*   **[HAIRSTYLE IMAGE]:** (If provided) The hairstyle to apply. The face in this image is IRRELEVANT.
    *   **Hairstyle Analysis:** {hairstyle_analysis}

---

## EXECUTION ORDER:

1.  **BASE:** Use the person from {PERSON_LABEL}.
2.  **DRESS:** Apply the exact clothes from {GARMENTS_LABEL}.
3.  **HAIR:** {hair_step}
4.  **POSE & SCENE:** Place the person in this setting: "{scene}", with this pose: "{pose}".
5.  **FACE LOCK:** {face_step}
6.  **REALISM:** Maintain natural skin texture. Do not airbrush. Pores should be visible.

---

## FINAL OUTPUT:
Generate ONLY the final image. No text.
"""

    def build_parts(
        self,
        model: Asset,
        garments: list[Asset],
        hairstyle: Asset | None,
        prompt: str,
    ) -> list[Part]:
        """Labelled image parts (person, hairstyle, garments) followed by the prompt."""
        parts = [Part.from_text(PERSON_LABEL), Part.from_asset(model)]

        if hairstyle is not None:
            parts.append(Part.from_text(HAIRSTYLE_LABEL))
            parts.append(Part.from_asset(hairstyle))

        if garments:
            parts.append(Part.from_text(GARMENTS_LABEL))
            parts.extend(Part.from_asset(g) for g in garments)

        parts.append(Part.from_text(prompt))
        return parts
