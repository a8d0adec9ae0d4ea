"""
Chat Routes
===========

Endpoints backed by the OpenAI chat client:
- Model listing
- Single prompt chat completion
- Batch quiz generation
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from typing import List, Optional
import logging

from ..clients.openai_client import ChatClient, GPT_35_TURBO
from ..errors import GenAIClientError
from ..services.quiz_generator import QuizGenerator, DEFAULT_TOPICS
from .dependencies import get_chat_client

logger = logging.getLogger(__name__)
router = APIRouter()


# Request/Response Models
class ChatPrompt(BaseModel):
    prompt: str
    model: str = GPT_35_TURBO


class ChatAnswer(BaseModel):
    response: str
    model: str


class ModelInfo(BaseModel):
    id: str
    created: int
    owned_by: Optional[str] = None


class QuizRequest(BaseModel):
    topics: List[str] = Field(default_factory=lambda: list(DEFAULT_TOPICS), min_length=1)
    model: str = GPT_35_TURBO


@router.get("/chat/models", response_model=List[ModelInfo])
async def list_models_endpoint(chat: ChatClient = Depends(get_chat_client)):
    """List OpenAI models, newest first"""
    try:
        models = await chat.list_models()
    except GenAIClientError as e:
        logger.error(f"Model listing failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return [ModelInfo(id=m.id, created=m.created, owned_by=m.owned_by) for m in models]


@router.post("/chat", response_model=ChatAnswer)
async def chat_endpoint(prompt: ChatPrompt, chat: ChatClient = Depends(get_chat_client)):
    """Send a single prompt and return the first answer"""
    try:
        text = await chat.get_response(prompt.prompt, prompt.model)
    except GenAIClientError as e:
        logger.error(f"Chat request failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return ChatAnswer(response=text, model=prompt.model)


@router.post("/quiz")
async def quiz_endpoint(request: QuizRequest, chat: ChatClient = Depends(get_chat_client)):
    """
    Generate one multiple-choice quiz per topic.

    Topics are requested concurrently; each quiz is appended to
    chat-<topic>.txt in the output directory.
    """
    generator = QuizGenerator(chat, model=request.model)
    try:
        paths = await generator.create_quiz_with_multiple_topics(request.topics)
    except GenAIClientError as e:
        logger.error(f"Quiz generation failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return {"files": [str(p) for p in paths]}
