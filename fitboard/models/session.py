"""Run, job and result models for a try-on generation run."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field

from ..utils.images import to_data_url
from .assets import Garment, Hairstyle, ModelAsset, Outfit


HAIRSTYLE_ONLY_JOB_ID = "hairstyle-only"
HAIRSTYLE_ONLY_JOB_NAME = "Hairstyle Try-On"


class RunState(str, Enum):
    IDLE = "idle"
    ANALYZING_SHARED = "analyzing_shared"
    ANALYZING_GARMENTS = "analyzing_garments"
    SYNTHESIZING = "synthesizing"
    PUBLISHED = "published"


class GenerationJob(BaseModel):
    """One outfit (or the hairstyle-only sentinel) to render across every pose."""

    id: str
    name: str
    garments: list[Garment] = Field(default_factory=list)

    @classmethod
    def from_outfit(cls, outfit: Outfit) -> "GenerationJob":
        return cls(id=outfit.id, name=outfit.name, garments=list(outfit.garments))

    @classmethod
    def hairstyle_only(cls) -> "GenerationJob":
        return cls(id=HAIRSTYLE_ONLY_JOB_ID, name=HAIRSTYLE_ONLY_JOB_NAME)


@dataclass(frozen=True)
class PoseSucceeded:
    data: bytes
    mime_type: str = "image/png"


@dataclass(frozen=True)
class PoseFailed:
    reason: str  # "no-image" or "error"
    detail: str = ""


PoseOutcome = PoseSucceeded | PoseFailed


def placeholder_url(job_id: str, pose_index: int, reason: str) -> str:
    """Deterministic, recognizable stand-in for a pose that produced no image."""
    if reason == "error":
        return f"https://picsum.photos/seed/error-{job_id}-{pose_index}/512/768?text=Error"
    return f"https://picsum.photos/seed/{job_id}-{pose_index}/512/768?text=Generation+Failed"


class GeneratedImage(BaseModel):
    """One synthesized pose, or the placeholder that stands in for it."""

    model_config = ConfigDict(frozen=True)

    id: str
    job_id: str
    pose_index: int
    src: str = Field(repr=False)
    data: bytes | None = Field(default=None, repr=False)
    mime_type: str = "image/png"
    is_placeholder: bool = False

    @classmethod
    def from_outcome(cls, job_id: str, pose_index: int, outcome: PoseOutcome) -> "GeneratedImage":
        image_id = f"{job_id}-{pose_index}"
        if isinstance(outcome, PoseSucceeded):
            return cls(
                id=image_id,
                job_id=job_id,
                pose_index=pose_index,
                src=to_data_url(outcome.data, outcome.mime_type),
                data=outcome.data,
                mime_type=outcome.mime_type,
            )
        return cls(
            id=image_id,
            job_id=job_id,
            pose_index=pose_index,
            src=placeholder_url(job_id, pose_index, outcome.reason),
            is_placeholder=True,
        )


class JobResult(BaseModel):
    """A published job: its full, pose-ordered image list."""

    job: GenerationJob
    images: list[GeneratedImage]

    @computed_field
    @property
    def failed_poses(self) -> int:
        return sum(1 for image in self.images if image.is_placeholder)


class TryOnRequest(BaseModel):
    """Everything the user composed for one generation run."""

    model: ModelAsset | None = None
    outfits: list[Outfit] = Field(default_factory=list)
    hairstyle: Hairstyle | None = None
    instructions: str = ""
    lock_face: bool = True


class TryOnSession(BaseModel):
    """State of one generation run, owned and written only by the pipeline."""

    model_config = ConfigDict(protected_namespaces=())

    session_id: str
    state: RunState = RunState.IDLE

    jobs: list[GenerationJob] = Field(default_factory=list)
    results: dict[str, list[GeneratedImage]] = Field(default_factory=dict)
    active_job_id: str | None = None

    # Shared analyses, computed once per run
    model_analysis: str | None = None
    hairstyle_analysis: str | None = None

    started_at: datetime = Field(default_factory=datetime.now)
    completed_at: datetime | None = None

    @computed_field
    @property
    def active_job_name(self) -> str | None:
        for job in self.jobs:
            if job.id == self.active_job_id:
                return job.name
        return None

    def publish(self, job: GenerationJob, images: list[GeneratedImage]) -> JobResult:
        self.results[job.id] = list(images)
        self.state = RunState.PUBLISHED
        return JobResult(job=job, images=list(images))

    def images_for(self, job_id: str) -> list[GeneratedImage]:
        return self.results.get(job_id, [])
