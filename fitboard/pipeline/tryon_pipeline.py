"""Try-on generation pipeline: analysis, per-pose synthesis and per-job publication."""

import inspect
from collections.abc import AsyncIterator, Awaitable, Callable
from datetime import datetime

from ..agents.asset_analyzer import AssetAnalyzer
from ..agents.prompt_composer import POSE_TEMPLATES, PromptComposer
from ..config import PipelineConfig
from ..errors import ConfigurationError, GenerationRefused
from ..models import (
    GeneratedImage,
    GenerationJob,
    JobResult,
    PoseFailed,
    PoseSucceeded,
    RunState,
    TryOnRequest,
    TryOnSession,
)
from ..models.session import PoseOutcome
from ..services import GeminiClient, Part


SYNTHESIS_MODALITIES = ["IMAGE", "TEXT"]

JobCallback = Callable[[JobResult], Awaitable[None] | None]


def select_jobs(request: TryOnRequest) -> list[GenerationJob]:
    """Outfits with at least one garment, or the hairstyle-only sentinel."""
    jobs = [GenerationJob.from_outfit(o) for o in request.outfits if o.has_garments]
    if not jobs and request.hairstyle is not None:
        jobs.append(GenerationJob.hairstyle_only())
    return jobs


class TryOnPipeline:
    """Generation orchestrator for virtual try-on runs.

    Flow:
    1. Analyze the subject and the hairstyle once per run
    2. For each job, in order: analyze its garments
    3. Synthesize every pose template, one call at a time
    4. Publish the job's full result list before starting the next job

    A failed pose never aborts its job: it becomes a placeholder, so every
    published job has exactly one image per pose template.
    """

    def __init__(self, config: PipelineConfig, client: GeminiClient | None = None):
        self.config = config

        # Initialize services
        self.client = client or GeminiClient(
            config=config.gemini,
            api_key=config.gemini_api_key,
        )

        # Initialize agents
        self.analyzer = AssetAnalyzer(self.client, model=config.gemini.analysis_model)
        self.composer = PromptComposer()

        self.session: TryOnSession | None = None

    def check_request(self, request: TryOnRequest) -> list[GenerationJob]:
        """Apply the start guard and return the jobs to run.

        Raises:
            GenerationRefused: No subject model, or nothing to generate
            ConfigurationError: No credential configured
        """
        if request.model is None:
            raise GenerationRefused("Please upload a model.")
        if not self.config.has_api_key:
            raise ConfigurationError("API_KEY environment variable not set.")

        jobs = select_jobs(request)
        if not jobs:
            raise GenerationRefused("Please upload an outfit or a hairstyle to generate an image.")
        return jobs

    def _new_session(self) -> TryOnSession:
        return TryOnSession(session_id=datetime.now().strftime("%Y%m%d_%H%M%S"))

    async def iter_jobs(
        self,
        request: TryOnRequest,
        session: TryOnSession | None = None,
    ) -> AsyncIterator[JobResult]:
        """Run a generation and yield each job as soon as it is published.

        Every run writes only to its own ``session``; ``self.session`` just
        points at the most recently started one.
        """
        jobs = self.check_request(request)

        # New run: previous results are dropped, not cancelled
        if session is None:
            session = self._new_session()
        session.jobs = jobs
        self.session = session

        print()
        print("═" * 60)
        print("  👗 FITBOARD TRY-ON")
        print(f"  Session: {session.session_id}")
        print(f"  Jobs: {', '.join(job.name for job in jobs)}")
        print("═" * 60)
        print()

        # Shared analyses, reused by every job
        print("🔍 Analyzing model and hairstyle...")
        session.state = RunState.ANALYZING_SHARED
        session.model_analysis = await self.analyzer.analyze_model(request.model)
        hairstyle = request.hairstyle.current if request.hairstyle else None
        session.hairstyle_analysis = await self.analyzer.analyze_hairstyle(hairstyle)

        for job in jobs:
            session.active_job_id = job.id
            images = await self._run_job(session, request, job)
            yield session.publish(job, images)

        session.active_job_id = jobs[0].id
        session.state = RunState.IDLE
        session.completed_at = datetime.now()

        print()
        print("═" * 60)
        print(f"  🎉 COMPLETE! {len(jobs)} job(s), {len(POSE_TEMPLATES)} poses each")
        print("═" * 60)
        print()

    async def run(
        self,
        request: TryOnRequest,
        on_job_published: JobCallback | None = None,
    ) -> TryOnSession:
        """Run a full generation.

        Args:
            request: Model, outfits, hairstyle, creative direction and face lock
            on_job_published: Called (or awaited) once per job, in job order

        Returns:
            The finished TryOnSession
        """
        session = self._new_session()
        async for result in self.iter_jobs(request, session):
            if on_job_published is not None:
                outcome = on_job_published(result)
                if inspect.isawaitable(outcome):
                    await outcome
        return session

    async def _run_job(
        self,
        session: TryOnSession,
        request: TryOnRequest,
        job: GenerationJob,
    ) -> list[GeneratedImage]:
        print()
        print(f"🧥 {job.name}")

        session.state = RunState.ANALYZING_GARMENTS
        garments = [g.current for g in job.garments]
        garment_analysis = await self.analyzer.analyze_garments(garments)

        hairstyle = request.hairstyle.current if request.hairstyle else None

        session.state = RunState.SYNTHESIZING
        images: list[GeneratedImage] = []
        for index, pose in enumerate(POSE_TEMPLATES):
            prompt = self.composer.compose(
                model_analysis=session.model_analysis,
                garment_analysis=garment_analysis,
                hairstyle_analysis=session.hairstyle_analysis,
                pose=pose,
                instructions=request.instructions,
                has_hairstyle=hairstyle is not None,
                lock_face=request.lock_face,
            )
            parts = self.composer.build_parts(request.model, garments, hairstyle, prompt)

            outcome = await self._synthesize(parts, index)
            images.append(GeneratedImage.from_outcome(job.id, index, outcome))

        return images

    async def _synthesize(self, parts: list[Part], index: int) -> PoseOutcome:
        """One synthesis call, folded into a success or a fallback."""
        try:
            response = await self.client.generate_content(
                parts,
                model=self.config.gemini.image_model,
                response_modalities=SYNTHESIS_MODALITIES,
            )
        except Exception as e:
            print(f"   ⚠️ Pose {index + 1} failed: {e}")
            return PoseFailed(reason="error", detail=str(e))

        image = response.first_image()
        if image is None:
            # Refusals come back as text-only candidates
            print(f"   ⚠️ Pose {index + 1} returned no image")
            return PoseFailed(reason="no-image", detail=response.text[:200])

        print(f"   ✅ Pose {index + 1}/{len(POSE_TEMPLATES)}")
        return PoseSucceeded(data=image.data, mime_type=image.mime_type or "image/png")
