"""
Stability AI Client
===================

Async client for the Stability AI REST API (v1).
Supports account balance, engine listing and SDXL text-to-image.

API Documentation: https://platform.stability.ai/docs/api-reference
"""

import base64
import binascii
import logging
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import AliasChoices, BaseModel, Field, ValidationError

from ..errors import RequestError
from .base import BaseAPIClient
from .file_storage import ImageWriter

logger = logging.getLogger(__name__)

SDXL_ENGINE = "stable-diffusion-xl-1024-v1-0"


class FinishReason(str, Enum):
    """Per-artifact outcome reported by Stability"""
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"
    CONTENT_FILTERED = "CONTENT_FILTERED"


class TextPrompt(BaseModel):
    text: str
    weight: float


class ImageGenPayload(BaseModel):
    """Text-to-image request body"""
    cfg_scale: float = 7
    clip_guidance_preset: str = "NONE"
    style_preset: str = "photographic"
    height: int = 1024
    width: int = 1024
    samples: int = 1
    steps: int = 40
    text_prompts: List[TextPrompt]


class Artifact(BaseModel):
    base64: str
    finish_reason: str = Field(
        validation_alias=AliasChoices("finishReason", "finish_reason")
    )
    seed: Optional[int] = None


class Artifacts(BaseModel):
    artifacts: List[Artifact] = []


class Balance(BaseModel):
    credits: float


class Engine(BaseModel):
    id: str
    name: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None


class ImageGenClient(BaseAPIClient):
    """
    Async client for Stability AI image generation.

    Usage:
        client = ImageGenClient(settings)
        written = await client.generate_images("a lighthouse at dusk", 2)
    """

    VENDOR = "Stability"

    @property
    def base_url(self) -> str:
        return self.settings.stability_base_url

    @property
    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.settings.stability_api_key.get_secret_value()}",
            "Accept": "application/json",
        }

    async def get_balance(self) -> Balance:
        result = await self._request("GET", "/v1/user/balance")
        try:
            return Balance.model_validate(result)
        except ValidationError as e:
            raise RequestError(f"Unexpected balance response: {e}") from e

    async def get_engines(self) -> List[Engine]:
        result = await self._request("GET", "/v1/engines/list")
        try:
            return [Engine.model_validate(item) for item in result]
        except (TypeError, ValidationError) as e:
            raise RequestError(f"Unexpected engine list response: {e}") from e

    def create_payload(self, prompt: str, number_of_images: int) -> ImageGenPayload:
        return ImageGenPayload(
            samples=number_of_images,
            text_prompts=[TextPrompt(text=prompt, weight=0.5)],
        )

    async def generate_images(
        self,
        prompt: str,
        number_of_images: int = 1,
        now: Optional[datetime] = None,
    ) -> int:
        """
        Generate images and write them to the output directory.

        Artifacts flagged ERROR are never written. An artifact that fails to
        decode or write is logged and skipped.

        Args:
            prompt: Text description of the desired image
            number_of_images: Number of samples to request
            now: Generation time used in the file names (defaults to now)

        Returns:
            Number of files written
        """
        logger.info(f"Stability image gen: '{prompt[:50]}...' samples={number_of_images}")

        payload = self.create_payload(prompt, number_of_images)
        result = await self._request(
            "POST",
            f"/v1/generation/{SDXL_ENGINE}/text-to-image",
            json=payload.model_dump(mode="json"),
        )
        try:
            response = Artifacts.model_validate(result)
        except ValidationError as e:
            raise RequestError(f"Unexpected text-to-image response: {e}") from e

        writer = ImageWriter(self.settings.output_dir, now)
        written = 0
        for artifact in response.artifacts:
            if artifact.finish_reason == FinishReason.ERROR.value:
                logger.warning("Skipping artifact with finish reason ERROR")
                continue
            try:
                data = base64.b64decode(artifact.base64, validate=True)
                writer.write(data)
            except (binascii.Error, OSError) as e:
                logger.warning(f"Could not write artifact: {e}")
                continue
            written += 1

        logger.info(f"Wrote {written} images to {self.settings.output_dir}")
        return written
