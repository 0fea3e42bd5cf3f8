"""Streaming client for the general-purpose chat model."""
import logging
from typing import Dict, Iterator, List, Optional

from openai import OpenAI, OpenAIError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful assistant that can chat about various topics. "
    "If users ask about calendar, schedule, appointments, or time-related queries, "
    "let them know that calendar queries are handled separately by the calendar system. "
    "For all other topics, provide helpful and engaging responses."
)


class ChatModelError(Exception):
    """Raised when the chat model request fails."""


class ChatModelClient:
    """Client for streamed chat completions."""

    def __init__(
        self,
        model: str = "gpt-4o",
        temperature: float = 0.7,
        timeout: int = 30,
        client: Optional[OpenAI] = None
    ):
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self._client = client

    def _ensure_client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(timeout=self.timeout)
        return self._client

    def stream_reply(self, messages: List[Dict[str, str]]) -> Iterator[str]:
        """
        Stream the assistant reply for a conversation.

        Args:
            messages: Conversation as role/content dicts, oldest first

        Yields:
            Text chunks as they arrive

        Raises:
            ChatModelError: If the request or the stream fails
        """
        conversation = [{'role': 'system', 'content': SYSTEM_PROMPT}, *messages]

        try:
            stream = self._ensure_client().chat.completions.create(
                model=self.model,
                messages=conversation,
                temperature=self.temperature,
                stream=True
            )
            for chunk in stream:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta.content
                if delta:
                    yield delta
        except OpenAIError as e:
            logger.error(f"Chat model request failed: {e}", exc_info=True)
            raise ChatModelError(str(e)) from e

    def complete(self, messages: List[Dict[str, str]]) -> str:
        """Collect a streamed reply into one string."""
        return ''.join(self.stream_reply(messages))
