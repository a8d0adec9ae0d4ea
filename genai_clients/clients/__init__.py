"""
AI API Clients
==============

HTTP clients for external generative AI services:
- OpenAI client (chat completions, model listing)
- Stability AI client (text-to-image)
- Picogen client (job-based image generation with polling)
"""

from .openai_client import (
    ChatClient,
    ChatRequest,
    ChatResponse,
    Message,
    Model,
    Role,
    GPT_35_TURBO,
    GPT_4,
)
from .stability_client import (
    ImageGenClient,
    ImageGenPayload,
    Artifact,
    Balance,
    Engine,
    FinishReason,
)
from .picogen_client import (
    JobPollingClient,
    Job,
    JobState,
    JobStatus,
    JobStatusItem,
    StabilityJobRequest,
    MidjourneyJobRequest,
    next_state,
)

__all__ = [
    # OpenAI
    "ChatClient",
    "ChatRequest",
    "ChatResponse",
    "Message",
    "Model",
    "Role",
    "GPT_35_TURBO",
    "GPT_4",
    # Stability
    "ImageGenClient",
    "ImageGenPayload",
    "Artifact",
    "Balance",
    "Engine",
    "FinishReason",
    # Picogen
    "JobPollingClient",
    "Job",
    "JobState",
    "JobStatus",
    "JobStatusItem",
    "StabilityJobRequest",
    "MidjourneyJobRequest",
    "next_state",
]
