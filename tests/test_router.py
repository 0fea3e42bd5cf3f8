"""Unit tests for ChatRouter."""
from unittest.mock import Mock

import pytest
import requests

from chat.models import WebhookReply
from chat.router import SOURCE_CALENDAR, SOURCE_CHAT, ChatRouter
from clients.calendar_webhook import CalendarServiceError
from interpreter.models import PlainResponse, StructuredResponse


@pytest.fixture
def webhook_client():
    """Create a mock webhook client."""
    return Mock()


@pytest.fixture
def chat_client():
    """Create a mock chat model client."""
    client = Mock()
    client.complete.return_value = "Paris is the capital of France."
    return client


class TestChatRouter:
    """Test cases for ChatRouter class."""

    def test_calendar_reply_uses_web_response(self, webhook_client, chat_client):
        """Test the web response is interpreted instead of the spoken text."""
        webhook_client.send.return_value = WebhookReply(
            spoken="You have one event on Monday.",
            web_response="**This Week**\n**Monday**\n• 9:00 AM: Standup"
        )
        router = ChatRouter(webhook_client, chat_client)

        reply = router.handle("What's on this week?")

        assert reply.source == SOURCE_CALENDAR
        assert reply.message.role == 'assistant'
        assert reply.message.content == "You have one event on Monday."
        assert isinstance(reply.formatted, StructuredResponse)
        assert reply.formatted.title == "This Week"
        webhook_client.send.assert_called_once_with("What's on this week?")
        chat_client.complete.assert_not_called()

    def test_calendar_reply_with_event_list_content(self, webhook_client, chat_client):
        """Test spoken text with an event list is interpreted."""
        webhook_client.send.return_value = WebhookReply(
            spoken="You have 1 event: Friday, Jun 13 at 9:00 AM: Standup"
        )
        router = ChatRouter(webhook_client, chat_client)

        reply = router.handle("agenda")

        assert reply.formatted.title == "You have 1 event June:"

    def test_calendar_reply_with_header_sentence_content(self, webhook_client, chat_client):
        """Test spoken "You have N events next week:" text is interpreted."""
        webhook_client.send.return_value = WebhookReply(
            spoken=(
                "You have 2 events next week: Monday, Jun 9 at 7:00 AM: Train Laurie, "
                "Wednesday, Jun 11 at 3:00 PM: Dentist"
            )
        )
        router = ChatRouter(webhook_client, chat_client)

        reply = router.handle("next week")

        assert isinstance(reply.formatted, StructuredResponse)
        assert reply.formatted.title == "You have 2 events next week:"

    def test_calendar_reply_plain_spoken_text_not_formatted(self, webhook_client, chat_client):
        """Test spoken text without calendar content is left alone."""
        webhook_client.send.return_value = WebhookReply(spoken="Your meeting was booked.")
        router = ChatRouter(webhook_client, chat_client)

        reply = router.handle("book a meeting")

        assert reply.formatted is None
        assert reply.message.content == "Your meeting was booked."

    def test_calendar_reply_unparsed_web_response_is_plain(self, webhook_client, chat_client):
        """Test a web response matching no shape becomes plain segments."""
        webhook_client.send.return_value = WebhookReply(
            spoken="Done",
            web_response="Created. You can view it [here](https://cal.test/e/7)"
        )
        router = ChatRouter(webhook_client, chat_client)

        reply = router.handle("create lunch")

        assert isinstance(reply.formatted, PlainResponse)

    def test_non_interactive_skips_structuring(self, webhook_client, chat_client):
        """Test the raw text is passed through when not interactive."""
        webhook_client.send.return_value = WebhookReply(
            spoken="spoken",
            web_response="**Week**\n**Monday**"
        )
        router = ChatRouter(webhook_client, chat_client)

        reply = router.handle("week", interactive=False)

        assert reply.formatted is None
        assert reply.message.web_response == "**Week**\n**Monday**"

    @pytest.mark.parametrize("error", [
        CalendarServiceError("WEBHOOK_URL environment variable is not set"),
        requests.ConnectionError("refused"),
    ])
    def test_calendar_failure_becomes_message(self, webhook_client, chat_client, error):
        """Test webhook failures turn into an assistant message."""
        webhook_client.send.side_effect = error
        router = ChatRouter(webhook_client, chat_client)

        reply = router.handle("what's today?")

        assert reply.source == SOURCE_CALENDAR
        assert reply.formatted is None
        assert reply.message.content == (
            "Sorry, I couldn't retrieve your calendar information. "
            f"Error: {error}"
        )

    def test_chat_route_with_history(self, webhook_client, chat_client):
        """Test non-calendar messages go to the chat model with history."""
        router = ChatRouter(webhook_client, chat_client, route_all_to_calendar=False)
        history = [
            {'role': 'user', 'content': 'Hi', 'createdAt': 'ignored'},
            {'role': 'assistant', 'content': 'Hello!'}
        ]

        reply = router.handle("What is the capital of France?", history=history)

        assert reply.source == SOURCE_CHAT
        assert reply.formatted is None
        assert reply.message.content == "Paris is the capital of France."
        chat_client.complete.assert_called_once_with([
            {'role': 'user', 'content': 'Hi'},
            {'role': 'assistant', 'content': 'Hello!'},
            {'role': 'user', 'content': 'What is the capital of France?'}
        ])
        webhook_client.send.assert_not_called()

    def test_chat_reply_never_formatted(self, webhook_client, chat_client):
        """Test model output containing a list marker is not interpreted."""
        chat_client.complete.return_value = "You have 1 event: Monday, Jun 9 at 7:00 AM: Gym"
        router = ChatRouter(webhook_client, chat_client, route_all_to_calendar=False)

        reply = router.handle("write me a sample sentence")

        assert reply.formatted is None

    def test_reply_to_dict(self, webhook_client, chat_client):
        """Test serialization of a reply."""
        webhook_client.send.return_value = WebhookReply(
            spoken="spoken",
            web_response="https://cal.test/x"
        )
        router = ChatRouter(webhook_client, chat_client)

        data = router.handle("calendar").to_dict()

        assert data['source'] == 'calendar'
        assert data['message']['content'] == 'spoken'
        assert data['message']['webResponse'] == 'https://cal.test/x'
        assert data['formatted'] == {
            'kind': 'plain',
            'segments': [{'kind': 'link', 'display': 'here', 'href': 'https://cal.test/x'}]
        }
