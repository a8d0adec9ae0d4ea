"""
Image Routes
============

Endpoints backed by the Stability AI client:
- Account balance
- Engine listing
- SDXL text-to-image written to the output directory
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from typing import List
import logging

from ..clients.stability_client import Balance, Engine, ImageGenClient
from ..errors import GenAIClientError
from .dependencies import get_image_client

logger = logging.getLogger(__name__)
router = APIRouter()


class ImageGenRequest(BaseModel):
    prompt: str
    count: int = Field(default=1, ge=1, le=10, description="Number of images (1-10)")


class ImageGenResponse(BaseModel):
    written: int
    output_dir: str


@router.get("/stability/balance", response_model=Balance)
async def balance_endpoint(client: ImageGenClient = Depends(get_image_client)):
    try:
        return await client.get_balance()
    except GenAIClientError as e:
        logger.error(f"Balance request failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/stability/engines", response_model=List[Engine])
async def engines_endpoint(client: ImageGenClient = Depends(get_image_client)):
    try:
        return await client.get_engines()
    except GenAIClientError as e:
        logger.error(f"Engine listing failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))


@router.post("/stability/generate", response_model=ImageGenResponse)
async def generate_endpoint(
    request: ImageGenRequest,
    client: ImageGenClient = Depends(get_image_client)
):
    """
    Generate images with Stable Diffusion XL.

    Artifacts the API flags as errors are skipped; `written` counts only
    the files actually saved.
    """
    try:
        written = await client.generate_images(request.prompt, request.count)
    except GenAIClientError as e:
        logger.error(f"Image generation failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return ImageGenResponse(written=written, output_dir=client.settings.output_dir)
