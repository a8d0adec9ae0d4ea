"""
OpenAI Chat Client
==================

Async client for the OpenAI REST API.
Supports chat completions and model listing.

API Documentation: https://platform.openai.com/docs/api-reference
"""

import logging
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from ..errors import RequestError
from .base import BaseAPIClient

logger = logging.getLogger(__name__)

GPT_35_TURBO = "gpt-3.5-turbo"
GPT_4 = "gpt-4"

DEFAULT_TEMPERATURE = 0.7


class Role(str, Enum):
    """Chat message roles"""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    role: Role
    content: str


class ChatRequest(BaseModel):
    """Body of a chat completion request"""
    model_config = ConfigDict(frozen=True)

    model: str
    messages: List[Message]
    temperature: float = DEFAULT_TEMPERATURE


class Choice(BaseModel):
    index: int = 0
    message: Message
    finish_reason: Optional[str] = None


class Usage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatResponse(BaseModel):
    """Parsed chat completion response"""
    id: Optional[str] = None
    model: Optional[str] = None
    choices: List[Choice] = []
    usage: Optional[Usage] = None


class Model(BaseModel):
    """Entry of the /v1/models listing"""
    id: str
    object: str = "model"
    created: int
    owned_by: Optional[str] = None


class ModelList(BaseModel):
    object: str = "list"
    data: List[Model]


class ChatClient(BaseAPIClient):
    """
    Async client for OpenAI chat completions.

    Usage:
        client = ChatClient(settings)
        answer = await client.get_response("Why is the sky blue?", GPT_4)
        models = await client.list_models()
    """

    VENDOR = "OpenAI"

    @property
    def base_url(self) -> str:
        return self.settings.openai_base_url

    @property
    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.settings.openai_api_key.get_secret_value()}",
            "Accept": "application/json",
        }

    async def list_models(self) -> List[Model]:
        """
        List available models, newest first.

        Models with equal creation timestamps keep the order the API returned.

        Raises:
            RequestError: On transport failure or unparseable response
        """
        result = await self._request("GET", "/v1/models")
        try:
            model_list = ModelList.model_validate(result)
        except ValidationError as e:
            raise RequestError(f"Unexpected model list response: {e}") from e

        return sorted(model_list.data, key=lambda m: m.created, reverse=True)

    def create_chat_request(self, prompt: str, model: str) -> ChatRequest:
        return ChatRequest(
            model=model,
            messages=[Message(role=Role.USER, content=prompt)],
            temperature=DEFAULT_TEMPERATURE,
        )

    async def create_chat_response(self, chat_request: ChatRequest) -> ChatResponse:
        """POST a chat request and parse the completion"""
        result = await self._request(
            "POST", "/v1/chat/completions", json=chat_request.model_dump(mode="json")
        )
        try:
            return ChatResponse.model_validate(result)
        except ValidationError as e:
            raise RequestError(f"Unexpected chat response: {e}") from e

    async def get_response(self, prompt: str, model: str = GPT_35_TURBO) -> str:
        """
        Send a single-message prompt and return the first choice's text.

        Raises:
            RequestError: On transport failure or when the response has no choices
        """
        logger.info(f"OpenAI chat: '{prompt[:50]}...' model={model}")
        response = await self.create_chat_response(self.create_chat_request(prompt, model))

        if not response.choices:
            raise RequestError(f"OpenAI returned no choices for model {model}")

        return response.choices[0].message.content
