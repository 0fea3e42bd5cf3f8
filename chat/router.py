"""Routes user messages to the calendar webhook or the chat model."""
import logging
from typing import Dict, Iterable, List

import requests

from chat.classifier import is_calendar_query
from chat.models import ChatMessage, ChatReply
from clients.calendar_webhook import CalendarServiceError, CalendarWebhookClient
from clients.chat_model import ChatModelClient
from interpreter.dispatcher import format_response

logger = logging.getLogger(__name__)

SOURCE_CALENDAR = 'calendar'
SOURCE_CHAT = 'chat'


class ChatRouter:
    """Sends each message to one upstream and builds the assistant reply."""

    def __init__(
        self,
        webhook_client: CalendarWebhookClient,
        chat_client: ChatModelClient,
        route_all_to_calendar: bool = True
    ):
        self.webhook_client = webhook_client
        self.chat_client = chat_client
        self.route_all_to_calendar = route_all_to_calendar

    def handle(
        self,
        message: str,
        history: Iterable[Dict[str, str]] = (),
        interactive: bool = True
    ) -> ChatReply:
        """
        Answer a user message.

        Args:
            message: The user's message
            history: Earlier role/content messages, oldest first; only the
                chat model sees them
            interactive: When False the reply text is returned without
                structuring

        Returns:
            ChatReply with the assistant message and, for calendar replies,
            the interpreted response

        Raises:
            ChatModelError: If the chat model request fails
        """
        if is_calendar_query(message, route_all=self.route_all_to_calendar):
            return self._handle_calendar(message, interactive)
        return self._handle_chat(message, history)

    def _handle_calendar(self, message: str, interactive: bool) -> ChatReply:
        try:
            reply = self.webhook_client.send(message)
        except (CalendarServiceError, requests.RequestException) as e:
            logger.error(
                f"Calendar query error: {e}",
                extra={'error_type': type(e).__name__}
            )
            assistant = ChatMessage(
                role='assistant',
                content=(
                    "Sorry, I couldn't retrieve your calendar information. "
                    f"Error: {e}"
                )
            )
            return ChatReply(source=SOURCE_CALENDAR, message=assistant)

        assistant = ChatMessage(
            role='assistant',
            content=reply.spoken,
            web_response=reply.web_response
        )

        formatted = None
        if interactive and assistant.is_calendar_response:
            formatted = format_response(assistant.display_text)
            logger.info(
                "Formatted calendar response",
                extra={'kind': formatted.kind}
            )

        return ChatReply(source=SOURCE_CALENDAR, message=assistant, formatted=formatted)

    def _handle_chat(self, message: str, history: Iterable[Dict[str, str]]) -> ChatReply:
        conversation: List[Dict[str, str]] = [
            {'role': item['role'], 'content': item['content']}
            for item in history
        ]
        conversation.append({'role': 'user', 'content': message})

        content = self.chat_client.complete(conversation)
        return ChatReply(
            source=SOURCE_CHAT,
            message=ChatMessage(role='assistant', content=content)
        )
