"""
Quiz Generator
==============

Fires one chat request per topic concurrently and appends each answer to
chat-<topic>.txt in the output directory. Requests share no state.
"""

import asyncio
import logging
import re
from pathlib import Path
from typing import Iterable, List, Optional

from ..clients.openai_client import ChatClient, ChatRequest, Message, Role, GPT_35_TURBO
from ..errors import RequestError

logger = logging.getLogger(__name__)

PATH_SEPARATORS = re.compile(r"[\\/]")

QUIZ_SYSTEM_PROMPT = """\
Create a multiple-choice quiz about the Python programming language topic in the
next message. The quiz should have between 3 and 6 questions, each
with four possible answers, with only one correct answer per question.
Label the answers A through D, and identify which answer is correct.

After each question, add a section labeled [Rationales] that explains
each of the potential answers, again labeled A through D to identify which
rationale goes with which answer.
"""

DEFAULT_TOPICS = [
    "Abstract Base Classes",
    "Exception Handling",
    "Collections",
    "Type Hints and Generics",
    "Protocols",
    "Dunder Methods",
    "File Manipulation",
    "Threads and Executors",
    "Asyncio Tasks and Futures",
    "Locks and Semaphores",
    "Sockets",
    "Decorators",
    "Generators",
    "Comprehensions",
    "Context Managers",
    "The datetime Module",
]


def quiz_filename(topic: str) -> str:
    """chat-<topic>.txt with path separators in the topic replaced"""
    return f"chat-{PATH_SEPARATORS.sub('_', topic)}.txt"


class QuizGenerator:
    """Generates one quiz file per topic using the chat client"""

    def __init__(
        self,
        chat: ChatClient,
        output_dir: Optional[str] = None,
        model: str = GPT_35_TURBO,
    ):
        self.chat = chat
        self.output_dir = Path(output_dir or chat.settings.output_dir)
        self.model = model
        self.system_message = Message(role=Role.SYSTEM, content=QUIZ_SYSTEM_PROMPT)

    async def send_message(self, topic: str) -> Path:
        request = ChatRequest(
            model=self.model,
            messages=[self.system_message, Message(role=Role.USER, content=topic)],
        )
        response = await self.chat.create_chat_response(request)
        logger.info(f"Quiz '{topic}': usage={response.usage}")

        if not response.choices:
            raise RequestError(f"No quiz generated for topic '{topic}'")

        path = self.output_dir / quiz_filename(topic)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            with open(path, "a", encoding="utf-8") as f:
                f.write(response.choices[0].message.content)
        except OSError as e:
            raise RequestError(f"Could not save quiz for topic '{topic}': {e}") from e
        return path

    async def create_quiz_with_multiple_topics(
        self,
        topics: Iterable[str] = DEFAULT_TOPICS,
    ) -> List[Path]:
        """Run every topic concurrently; the first failure propagates"""
        return list(await asyncio.gather(*(self.send_message(topic) for topic in topics)))
