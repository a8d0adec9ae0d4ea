"""
Picogen API Client
==================

Async client for the Picogen job-based generation platform.
Supports Stability and Midjourney style image jobs.

API Documentation: https://picogen.io/docs

Architecture:
- Async request-response pattern
- Submit job → Poll status → Download result
- Results are written to the configured output directory
"""

import asyncio
import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from ..config import Settings
from ..errors import JobFailedError, PollError, RequestError, SubmissionError
from .base import BaseAPIClient
from .file_storage import ImageWriter

logger = logging.getLogger(__name__)

# /job/run answers with a list; the submitted job sits at this position
SUBMITTED_JOB_INDEX = 1


class JobStatus(str, Enum):
    """Picogen job statuses"""
    QUEUED = "queued"
    RUNNING = "running"
    COMPLETED = "completed"
    ERROR = "error"


class JobState(str, Enum):
    """Client-side view of a job's lifecycle"""
    SUBMITTED = "submitted"
    RUNNING = "running"
    COMPLETED = "completed"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (JobState.COMPLETED, JobState.ERROR)


def next_state(state: JobState, status: str) -> JobState:
    """
    Transition function of the polling state machine.

    Any status other than completed or error keeps the job running.

    Raises:
        ValueError: If state is already terminal
    """
    if state.is_terminal:
        raise ValueError(f"No transition out of terminal state {state.value}")
    if status == JobStatus.COMPLETED.value:
        return JobState.COMPLETED
    if status == JobStatus.ERROR.value:
        return JobState.ERROR
    return JobState.RUNNING


class StabilityJobRequest(BaseModel):
    command: str = "stability-txt2img"
    prompt: str
    engine: str = "xl-v1.0"
    ratio: str = "1:1"
    steps: int = 30


class MidjourneyJobRequest(BaseModel):
    command: str = "mj-imagine"
    prompt: str
    version: str = "mj-5.2"
    ratio: str = "1:1"


class Job(BaseModel):
    """Submission receipt"""
    model_config = ConfigDict(frozen=True)

    id: str
    cost: int = 0


class JobStatusItem(BaseModel):
    """One status snapshot of a job"""
    id: str
    status: str
    duration_ms: Optional[int] = None
    result: List[str] = []


class JobListing(BaseModel):
    items: List[JobStatusItem] = []


SleepFunc = Callable[[float], Awaitable[Any]]


class JobPollingClient(BaseAPIClient):
    """
    Async client for Picogen.

    Usage:
        client = JobPollingClient(settings)

        # Submit, wait and download in one go
        paths = await client.run_job(MidjourneyJobRequest(prompt="a robot leaping"))

        # Or step by step
        job = await client.submit_job(request)
        item = await client.wait_for_completion(job.id)
        paths = await client.download_results(item.result)
    """

    VENDOR = "Picogen"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        """
        Args:
            settings: Explicit configuration (defaults to get_settings())
            transport: Optional httpx transport
            sleep: Awaitable used between polls; cancelling it aborts the wait
        """
        super().__init__(settings, transport)
        self.poll_interval = self.settings.poll_interval
        self._sleep = sleep

    @property
    def base_url(self) -> str:
        return self.settings.picogen_base_url

    @property
    def _headers(self) -> Dict[str, str]:
        return {
            "API-Token": self.settings.picogen_api_key.get_secret_value(),
            "Accept": "application/json",
        }

    async def submit_job(self, job_request: BaseModel) -> Job:
        """
        Submit a generation job.

        Returns:
            Job with id and cost

        Raises:
            SubmissionError: On transport failure or malformed response
        """
        body = job_request.model_dump(mode="json")
        logger.info(f"Picogen request: {body}")

        try:
            result = await self._request("POST", "/job/run", json=body)
        except RequestError as e:
            raise SubmissionError(f"Picogen job submission failed: {e}") from e

        logger.info(f"Picogen server response: {result}")

        if not isinstance(result, list) or len(result) <= SUBMITTED_JOB_INDEX:
            raise SubmissionError(f"Unexpected Picogen submission response: {result!r}")

        entry = result[SUBMITTED_JOB_INDEX]
        if entry is None:
            raise SubmissionError("Picogen submission response holds no job")

        try:
            job = Job.model_validate(entry)
        except ValidationError as e:
            raise SubmissionError(f"Malformed Picogen job object: {e}") from e

        logger.info(f"Picogen job submitted: id={job.id}, cost={job.cost}")
        return job

    async def do_stability_job(self, job_request: StabilityJobRequest) -> Job:
        return await self.submit_job(job_request)

    async def do_midjourney_job(self, job_request: MidjourneyJobRequest) -> Job:
        return await self.submit_job(job_request)

    async def poll_status(self, job_id: str) -> JobStatusItem:
        """
        Fetch the current status snapshot of a job.

        Returns:
            First non-null item of the status response

        Raises:
            PollError: On transport failure or when no valid snapshot is present
        """
        try:
            result = await self._request("GET", f"/job/get/{job_id}")
        except RequestError as e:
            raise PollError(f"Picogen status request for {job_id} failed: {e}") from e

        if not isinstance(result, list):
            raise PollError(f"Unexpected Picogen status response: {result!r}")

        entry = next((item for item in result if item is not None), None)
        if entry is None:
            raise PollError(f"No valid status snapshot for job {job_id}")

        try:
            return JobStatusItem.model_validate(entry)
        except ValidationError as e:
            raise PollError(f"Malformed Picogen status item: {e}") from e

    async def wait_for_completion(self, job_id: str) -> JobStatusItem:
        """
        Poll a job until it completes.

        There is no attempt limit: a job that never leaves the running
        state is polled forever. Cancel the awaiting task to stop it.

        Returns:
            Completed JobStatusItem

        Raises:
            JobFailedError: As soon as any snapshot reports an error
            PollError: If a status request fails
        """
        state = JobState.SUBMITTED

        while True:
            item = await self.poll_status(job_id)
            state = next_state(state, item.status)

            if state is JobState.ERROR:
                logger.error(f"Picogen job {job_id} failed: {item}")
                raise JobFailedError(item)

            if state is JobState.COMPLETED:
                seconds = (item.duration_ms or 0) / 1000
                logger.info(f"Picogen job {job_id} completed in {seconds:.0f} seconds")
                return item

            logger.debug(f"Picogen job {job_id} status: {item.status}")
            await self._sleep(self.poll_interval)

    async def download_results(
        self,
        urls: List[str],
        now: Optional[datetime] = None,
    ) -> List[Path]:
        """
        Download result files in order.

        All files share one timestamp and take increasing index suffixes
        starting at 0; indices already on disk are skipped.
        The first failing download aborts the rest.

        Returns:
            Paths of the written files

        Raises:
            RequestError: If any URL cannot be fetched or saved
        """
        writer = ImageWriter(self.settings.output_dir, now)
        paths = []
        for url in urls:
            data = await self._fetch_bytes(url)
            try:
                paths.append(writer.write(data))
            except OSError as e:
                raise RequestError(f"Could not save {url}: {e}") from e

        logger.info(f"Saved {len(paths)} images to {self.settings.output_dir}")
        return paths

    async def get_job_list(self) -> List[str]:
        """First result URL of every completed job on the account"""
        result = await self._request("GET", "/job/list/")
        try:
            listings = [JobListing.model_validate(entry) for entry in result if entry is not None]
        except (TypeError, ValidationError) as e:
            raise RequestError(f"Unexpected Picogen job list response: {e}") from e

        return [
            item.result[0]
            for listing in listings
            for item in listing.items
            if item.status == JobStatus.COMPLETED.value and item.result
        ]

    async def run_job(
        self,
        job_request: Union[StabilityJobRequest, MidjourneyJobRequest],
    ) -> List[Path]:
        """Submit a job, wait for it and download its results (convenience method)"""
        job = await self.submit_job(job_request)
        item = await self.wait_for_completion(job.id)
        for url in item.result:
            logger.info(f"Picogen result: {url}")
        return await self.download_results(item.result)
