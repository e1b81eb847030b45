"""FastAPI server for FitBoard.

Receives requests from the board UI with:
- model / outfits / hairstyle: Base64 data URLs of the uploaded photos
- instructions or storyboard notes: optional creative direction
- lock_face: exact facial match (default) or high fidelity

Every endpoint answers with ``success`` plus either a payload or ``error``.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from fitboard.compositing import Exporter
from fitboard.config import PipelineConfig, load_config
from fitboard.editing import AssetEditor, CropSelection
from fitboard.models import (
    Asset,
    EditableAsset,
    GeneratedImage,
    Garment,
    Hairstyle,
    ModelAsset,
    Outfit,
    TryOnRequest,
    collect_instructions,
)
from fitboard.models.assets import MAX_GARMENTS_PER_OUTFIT
from fitboard.models.storyboard import parse_element
from fitboard.pipeline import RealismEnhancer, TryOnPipeline
from fitboard.services import GeminiClient
from fitboard.utils import decode_data_url, detect_mime_type


app = FastAPI(
    title="FitBoard API",
    description="Virtual try-on across outfits, poses and hairstyles using Gemini",
    version="1.0.0",
)

# Enable CORS for the board UI
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request / response bodies ────────────────────────────────────────────────

class ImagePayload(BaseModel):
    """A single uploaded image."""
    data: str  # Base64 data URL
    filename: str = "image.png"

    def to_asset(self, cls: type[Asset] = Asset) -> Asset:
        raw, mime_type = decode_data_url(self.data)
        return cls(
            data=raw,
            mime_type=mime_type or detect_mime_type(raw, self.filename),
            filename=self.filename,
        )


class EditablePayload(BaseModel):
    """An editable image: the untouched original and, optionally, its current edit."""
    id: str | None = None
    original: ImagePayload
    current: ImagePayload | None = None
    is_blurred: bool = False


class OutfitPayload(BaseModel):
    id: str | None = None
    name: str
    garments: list[EditablePayload] = Field(default_factory=list, max_length=MAX_GARMENTS_PER_OUTFIT)


class TryOnApiRequest(BaseModel):
    """Request body for a try-on run."""
    model_config = ConfigDict(protected_namespaces=())

    model_photo: ImagePayload | None = None
    outfits: list[OutfitPayload] = Field(default_factory=list)
    hairstyle: EditablePayload | None = None
    instructions: str | None = None
    storyboard: list[dict] = Field(default_factory=list)  # canvas elements; notes become instructions
    lock_face: bool = True


class ImageResult(BaseModel):
    id: str
    src: str
    is_placeholder: bool = False


class JobResultPayload(BaseModel):
    id: str
    name: str
    images: list[ImageResult]


class TryOnApiResponse(BaseModel):
    """Response with every published job."""
    success: bool
    session_id: str | None = None
    jobs: list[JobResultPayload] = Field(default_factory=list)
    error: str | None = None


class EnhanceRequest(BaseModel):
    image: ImagePayload


class BlurRequest(BaseModel):
    image: EditablePayload


class CropSelectionPayload(BaseModel):
    x: float
    y: float
    width: float
    height: float


class CropRequest(BaseModel):
    image: EditablePayload
    selection: CropSelectionPayload | None = None
    displayed_width: float
    displayed_height: float
    pixel_ratio: float = 1.0


class ExportRequest(BaseModel):
    images: list[str]  # image sources, in pose order
    outfit_name: str
    template: str = "2x2"
    index: int = 0
    job_id: str = "export"


class EditResponse(BaseModel):
    """Response with the edited asset."""
    success: bool
    current: str | None = None  # Base64 data URL
    is_blurred: bool = False
    error: str | None = None


class DownloadResponse(BaseModel):
    """Response with a downloadable file."""
    success: bool
    filename: str | None = None
    image_base64: str | None = None  # Base64 data URL
    error: str | None = None


# ── Shared instances (created on first request) ─────────────────────────────

_config: PipelineConfig | None = None
_pipeline: TryOnPipeline | None = None
_enhancer: RealismEnhancer | None = None
_editor: AssetEditor | None = None
_exporter: Exporter | None = None


def get_config() -> PipelineConfig:
    """Get or load the configuration (reads .env via pydantic-settings)."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def get_pipeline() -> TryOnPipeline:
    """Get or create the pipeline instance."""
    global _pipeline
    if _pipeline is None:
        _pipeline = TryOnPipeline(get_config())
    return _pipeline


def get_enhancer() -> RealismEnhancer:
    global _enhancer
    if _enhancer is None:
        _enhancer = RealismEnhancer(get_config(), client=get_pipeline().client)
    return _enhancer


def get_editor() -> AssetEditor:
    global _editor
    if _editor is None:
        config = get_config()
        client = GeminiClient(config.gemini, config.gemini_api_key) if config.has_api_key else None
        _editor = AssetEditor(client=client, image_model=config.gemini.image_model)
    return _editor


def get_exporter() -> Exporter:
    global _exporter
    if _exporter is None:
        _exporter = Exporter(get_config().compositor)
    return _exporter


# ── Payload conversion ───────────────────────────────────────────────────────

def _to_editable(payload: EditablePayload, cls: type[EditableAsset]) -> EditableAsset:
    fields = {
        "original": payload.original.to_asset(),
        "current": payload.current.to_asset() if payload.current else None,
        "is_blurred": payload.is_blurred,
    }
    if payload.id is not None and cls is Garment:
        fields["id"] = payload.id
    return cls(**fields)


def build_request(body: TryOnApiRequest) -> TryOnRequest:
    """Turn an API body into the pipeline's request model."""
    outfits = []
    for outfit in body.outfits:
        fields = {
            "name": outfit.name,
            "garments": [_to_editable(g, Garment) for g in outfit.garments],
        }
        if outfit.id is not None:
            fields["id"] = outfit.id
        outfits.append(Outfit(**fields))

    instructions = body.instructions
    if instructions is None and body.storyboard:
        instructions = collect_instructions([parse_element(el) for el in body.storyboard])

    return TryOnRequest(
        model=body.model_photo.to_asset(ModelAsset) if body.model_photo else None,
        outfits=outfits,
        hairstyle=_to_editable(body.hairstyle, Hairstyle) if body.hairstyle else None,
        instructions=instructions or "",
        lock_face=body.lock_face,
    )


def _to_generated(job_id: str, index: int, src: str) -> GeneratedImage:
    """Rebuild a generated image from its source; non-data URLs are placeholders."""
    if src.startswith("data:"):
        data, mime_type = decode_data_url(src)
        return GeneratedImage(
            id=f"{job_id}-{index}",
            job_id=job_id,
            pose_index=index,
            src=src,
            data=data,
            mime_type=mime_type or "image/png",
        )
    return GeneratedImage(
        id=f"{job_id}-{index}",
        job_id=job_id,
        pose_index=index,
        src=src,
        is_placeholder=True,
    )


# ── Routes ───────────────────────────────────────────────────────────────────

@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "FitBoard API", "version": "1.0.0"}


@app.get("/health")
async def health():
    """Detailed health check."""
    config = get_config()
    return {
        "status": "ok" if config.has_api_key else "degraded",
        "api_key": "configured" if config.has_api_key else "missing",
        "image_model": config.gemini.image_model,
    }


@app.post("/api/tryon", response_model=TryOnApiResponse)
async def generate_tryon(request: TryOnApiRequest):
    """Generate every pose for every outfit (or the hairstyle-only job).

    Returns:
        Jobs in generation order, each with one image per pose template
    """
    try:
        pipeline = get_pipeline()
        session = await pipeline.run(build_request(request))

        jobs = [
            JobResultPayload(
                id=job.id,
                name=job.name,
                images=[
                    ImageResult(id=img.id, src=img.src, is_placeholder=img.is_placeholder)
                    for img in session.images_for(job.id)
                ],
            )
            for job in session.jobs
        ]
        return TryOnApiResponse(success=True, session_id=session.session_id, jobs=jobs)

    except Exception as e:
        return TryOnApiResponse(success=False, error=str(e))


@app.post("/api/enhance", response_model=DownloadResponse)
async def enhance_image(request: EnhanceRequest):
    """Enhance realism and upscale a single image."""
    try:
        result = await get_enhancer().enhance(request.image.to_asset())
        return DownloadResponse(
            success=True,
            filename=result.filename,
            image_base64=Asset(data=result.data, mime_type=result.mime_type).preview_url,
        )
    except Exception as e:
        return DownloadResponse(success=False, error=str(e))


@app.post("/api/blur-face", response_model=EditResponse)
async def blur_face(request: BlurRequest):
    """Blur every face in the original image."""
    try:
        asset = await get_editor().blur_face(_to_editable(request.image, EditableAsset))
        return EditResponse(success=True, current=asset.preview_url, is_blurred=asset.is_blurred)
    except Exception as e:
        return EditResponse(success=False, error=str(e))


@app.post("/api/crop", response_model=EditResponse)
def crop_image(request: CropRequest):
    """Crop the original image to an on-screen selection."""
    try:
        selection = None
        if request.selection is not None:
            selection = CropSelection(**request.selection.model_dump())
        asset = get_editor().crop(
            _to_editable(request.image, EditableAsset),
            selection,
            displayed_size=(request.displayed_width, request.displayed_height),
            pixel_ratio=request.pixel_ratio,
        )
        return EditResponse(success=True, current=asset.preview_url, is_blurred=asset.is_blurred)
    except Exception as e:
        return EditResponse(success=False, error=str(e))


@app.post("/api/export/image", response_model=DownloadResponse)
def export_image(request: ExportRequest):
    """Download one pose with the provenance badge."""
    try:
        images = [_to_generated(request.job_id, i, src) for i, src in enumerate(request.images)]
        result = get_exporter().export_image(images, request.index, request.outfit_name)
        return DownloadResponse(
            success=True,
            filename=result.filename,
            image_base64=Asset(data=result.data).preview_url,
        )
    except Exception as e:
        return DownloadResponse(success=False, error=str(e))


@app.post("/api/export/collage", response_model=DownloadResponse)
def export_collage(request: ExportRequest):
    """Download a 2x2 or 3-panel collage with the provenance badge."""
    try:
        images = [_to_generated(request.job_id, i, src) for i, src in enumerate(request.images)]
        result = get_exporter().export_collage(images, request.template, request.outfit_name)
        return DownloadResponse(
            success=True,
            filename=result.filename,
            image_base64=Asset(data=result.data).preview_url,
        )
    except Exception as e:
        return DownloadResponse(success=False, error=str(e))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
