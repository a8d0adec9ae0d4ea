"""FastAPI dependencies providing configured vendor clients."""

from ..clients.openai_client import ChatClient
from ..clients.picogen_client import JobPollingClient
from ..clients.stability_client import ImageGenClient
from ..config import get_settings


def get_chat_client() -> ChatClient:
    return ChatClient(get_settings())


def get_image_client() -> ImageGenClient:
    return ImageGenClient(get_settings())


def get_job_client() -> JobPollingClient:
    return JobPollingClient(get_settings())
