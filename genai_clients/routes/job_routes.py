"""
Job Routes
==========

Endpoints for image generation using the Picogen API:
- Midjourney and Stability style jobs
- Async job management with polling
- Completed results downloaded to the output directory
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from typing import List, Literal, Optional
import logging

from ..clients.picogen_client import (
    JobPollingClient,
    JobStatusItem,
    MidjourneyJobRequest,
    StabilityJobRequest,
)
from ..errors import GenAIClientError, JobFailedError
from .dependencies import get_job_client

logger = logging.getLogger(__name__)
router = APIRouter()


# Request/Response Models
class JobSubmitRequest(BaseModel):
    """Request model for a Picogen job"""
    prompt: str = Field(..., description="Text description of the desired image")
    kind: Literal["midjourney", "stability"] = Field(
        default="midjourney",
        description="Job type: midjourney (mj-5.2) or stability (xl-v1.0)"
    )
    ratio: str = Field(default="1:1", description="Aspect ratio")
    wait_for_result: bool = Field(
        default=True,
        description="If true, wait and download results. If false, return the job id immediately."
    )


class JobSubmitResponse(BaseModel):
    job_id: str
    cost: int
    status: str
    result: List[str] = []
    files: List[str] = []
    message: Optional[str] = None


def _build_job_request(request: JobSubmitRequest):
    if request.kind == "stability":
        return StabilityJobRequest(prompt=request.prompt, ratio=request.ratio)
    return MidjourneyJobRequest(prompt=request.prompt, ratio=request.ratio)


@router.post("/picogen/jobs", response_model=JobSubmitResponse)
async def submit_job_endpoint(
    request: JobSubmitRequest,
    client: JobPollingClient = Depends(get_job_client)
):
    """
    Submit a Picogen job.

    Set `wait_for_result=false` to return immediately with the job id.
    Use `/ai/picogen/jobs/{job_id}` to check progress.
    """
    logger.info(f"Picogen job request: kind={request.kind}, wait={request.wait_for_result}")

    try:
        job = await client.submit_job(_build_job_request(request))

        if not request.wait_for_result:
            return JobSubmitResponse(
                job_id=job.id,
                cost=job.cost,
                status="submitted",
                message="Job submitted. Use /ai/picogen/jobs/{job_id} to check progress."
            )

        item = await client.wait_for_completion(job.id)
        paths = await client.download_results(item.result)

        return JobSubmitResponse(
            job_id=job.id,
            cost=job.cost,
            status=item.status,
            result=item.result,
            files=[str(p) for p in paths],
            message="Job completed"
        )

    except JobFailedError as e:
        logger.error(f"Picogen job failed: {e}")
        raise HTTPException(status_code=422, detail=str(e))
    except GenAIClientError as e:
        logger.error(f"Picogen error: {e}")
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/picogen/jobs/{job_id}", response_model=JobStatusItem)
async def job_status_endpoint(
    job_id: str,
    client: JobPollingClient = Depends(get_job_client)
):
    """Current status snapshot of a job"""
    try:
        return await client.poll_status(job_id)
    except GenAIClientError as e:
        logger.error(f"Status check error: {e}")
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/picogen/jobs")
async def job_list_endpoint(client: JobPollingClient = Depends(get_job_client)):
    """First result URL of every completed job"""
    try:
        urls = await client.get_job_list()
    except GenAIClientError as e:
        logger.error(f"Job list error: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return {"results": urls}
