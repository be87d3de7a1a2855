"""Fine-tuning workflow: upload training data, create a job, poll until done."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from pathlib import Path

from openai import AsyncOpenAI
from pydantic import BaseModel, Field

from bibletalk.config import settings
from bibletalk.llm import new_async_client

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class FineTuneError(Exception):
    """Raised when a fine-tuning step cannot complete."""


class JobStatus(str, Enum):
    """Fine-tuning job status."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @classmethod
    def from_api(cls, status: str) -> "JobStatus":
        """Map an OpenAI job status onto the workflow's status set."""
        try:
            return cls(status)
        except ValueError:
            # validating_files, queued
            return cls.PENDING

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.SUCCEEDED, JobStatus.FAILED, JobStatus.CANCELLED)


class TuningPhase(str, Enum):
    """Client-side phase of the fine-tuning workflow."""

    NOT_STARTED = "not_started"
    UPLOADING = "uploading"
    JOB_CREATED = "job_created"
    POLLING = "polling"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class FineTuneJob(BaseModel):
    """A fine-tuning run tracked by the client."""

    file_id: str = Field(description="Uploaded training file ID")
    job_id: str = Field(description="Fine-tuning job ID")
    status: JobStatus = Field(default=JobStatus.PENDING)
    fine_tuned_model: str | None = Field(default=None, description="Resulting model ID")


class TuningState(BaseModel):
    """Display state of the fine-tuning workflow."""

    phase: TuningPhase = Field(default=TuningPhase.NOT_STARTED)
    message: str = Field(default="", description="Status message shown to the user")
    job: FineTuneJob | None = Field(default=None)
    fine_tuned_model: str | None = Field(
        default=None, description="Model ID of the last successful run"
    )

    @property
    def is_active(self) -> bool:
        return self.phase != TuningPhase.NOT_STARTED


class FineTuneWorkflow:
    """Runs one fine-tuning job from upload to a terminal status.

    Polls the job at a fixed interval with no backoff and no retry ceiling.
    The sleep function is injected so the schedule can be driven without real
    delays. ``cancel()`` may be called from any thread. Each instance runs once.
    """

    def __init__(
        self,
        state: TuningState,
        client: AsyncOpenAI | None = None,
        training_file: str | Path | None = None,
        base_model: str | None = None,
        poll_interval: float | None = None,
        reset_delay: float | None = None,
        on_model_ready: Callable[[str], None] | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        """Initialize the workflow.

        Args:
            state: TuningState mutated as the workflow advances.
            client: Optional AsyncOpenAI instance. If not provided, the workflow
                builds its own client and closes it when the run ends.
            training_file: JSONL training data. Defaults to settings.training_file.
            base_model: Model to fine-tune. Defaults to settings.fine_tune_base_model.
            poll_interval: Seconds between status checks.
            reset_delay: Seconds a terminal message stays visible before reset.
            on_model_ready: Called once with the fine-tuned model ID on success.
            sleep: Awaitable sleep used for every delay.
        """
        self.state = state
        self._owns_client = client is None
        self.client = client or new_async_client()
        self.training_file = Path(training_file or settings.training_file)
        self.base_model = base_model or settings.fine_tune_base_model
        self.poll_interval = (
            poll_interval if poll_interval is not None else settings.poll_interval_seconds
        )
        self.reset_delay = (
            reset_delay if reset_delay is not None else settings.status_reset_delay_seconds
        )
        self.on_model_ready = on_model_ready
        self._sleep = sleep
        self._loop: asyncio.AbstractEventLoop | None = None
        self._task: asyncio.Task | None = None
        self._cancel_requested = False

    def start(self) -> asyncio.Task:
        """Schedule the workflow on the running event loop."""
        return asyncio.create_task(self.run())

    def cancel(self) -> None:
        """Stop the workflow. Safe to call from another thread, even before ``run()``."""
        self._cancel_requested = True
        if self._task is None or self._loop is None or self._task.done():
            return
        self._loop.call_soon_threadsafe(self._task.cancel)

    async def run(self) -> str | None:
        """Run the workflow to completion.

        The display is always back at ``not_started`` when this returns or
        raises, whichever delay the run was in.

        Returns:
            The fine-tuned model ID, or None if the run failed.

        Raises:
            asyncio.CancelledError: If the workflow was cancelled.
        """
        self._loop = asyncio.get_running_loop()
        self._task = asyncio.current_task()

        try:
            if self._cancel_requested:
                raise asyncio.CancelledError
            return await self._run_steps()
        except asyncio.CancelledError:
            logger.info("Fine tuning workflow cancelled")
            raise
        finally:
            self._reset()
            if self._owns_client:
                await self.client.close()

    async def _run_steps(self) -> str | None:
        self.state.phase = TuningPhase.UPLOADING
        self.state.message = "Fine tuning start..."
        self.state.job = None

        try:
            file_id = await self._upload()
            self.state.message = "Uploaded file"

            job = await self._create_job(file_id)
            self.state.job = job
            self.state.phase = TuningPhase.JOB_CREATED

            model_id = await self._poll(job)
        except Exception:
            logger.exception("Fine tuning failed")
            self.state.phase = TuningPhase.FAILED
            self.state.message = "Failed"
            await self._sleep(self.reset_delay)
            return None

        self.state.phase = TuningPhase.SUCCEEDED
        self.state.message = "Done"
        self.state.fine_tuned_model = model_id
        if self.on_model_ready is not None:
            self.on_model_ready(model_id)
        logger.info(f"Fine tuning succeeded: {model_id}")

        await self._sleep(self.reset_delay)
        return model_id

    async def _upload(self) -> str:
        if not self.training_file.is_file():
            raise FineTuneError(f"Training file not found: {self.training_file}")

        upload = await self.client.files.create(file=self.training_file, purpose="fine-tune")
        if not upload or not upload.id:
            raise FineTuneError("Failed to upload file for fine tuning")
        logger.info(f"Uploaded training file {self.training_file} as {upload.id}")
        return upload.id

    async def _create_job(self, file_id: str) -> FineTuneJob:
        job = await self.client.fine_tuning.jobs.create(
            training_file=file_id,
            model=self.base_model,
        )
        if not job or not job.id:
            raise FineTuneError("Failed to create fine tuning job")
        logger.info(f"Created fine tuning job {job.id} on {self.base_model}")
        return FineTuneJob(file_id=file_id, job_id=job.id, status=JobStatus.from_api(job.status))

    async def _poll(self, job: FineTuneJob) -> str:
        """Check the job every poll interval until it reaches a terminal status."""
        while True:
            await self._sleep(self.poll_interval)
            if self.state.phase == TuningPhase.JOB_CREATED:
                self.state.message = "Fine tuning starting"
            self.state.phase = TuningPhase.POLLING

            info = await self.client.fine_tuning.jobs.retrieve(job.job_id)
            job.status = JobStatus.from_api(info.status)
            logger.debug(f"Fine tuning job {job.job_id} status: {info.status}")

            if job.status in (JobStatus.FAILED, JobStatus.CANCELLED):
                raise FineTuneError(f"Fine tuning job {job.job_id} {job.status.value}")

            if job.status == JobStatus.SUCCEEDED:
                if not info.fine_tuned_model:
                    raise FineTuneError(f"Fine tuning job {job.job_id} returned no model")
                job.fine_tuned_model = info.fine_tuned_model
                return info.fine_tuned_model

            self.state.message = "Fine tuning in progress"

    def _reset(self) -> None:
        self.state.phase = TuningPhase.NOT_STARTED
        self.state.message = ""
