"""Unit tests for ChatModelClient."""
from unittest.mock import MagicMock, Mock

import pytest
from openai import OpenAIError

from clients.chat_model import SYSTEM_PROMPT, ChatModelClient, ChatModelError


def _chunk(content):
    chunk = Mock()
    chunk.choices = [Mock()]
    chunk.choices[0].delta.content = content
    return chunk


@pytest.fixture
def openai_client():
    """Create a mock OpenAI client."""
    return MagicMock()


class TestChatModelClient:
    """Test cases for ChatModelClient class."""

    def test_stream_reply_yields_content(self, openai_client):
        """Test streamed deltas are yielded in order."""
        empty = Mock()
        empty.choices = []
        openai_client.chat.completions.create.return_value = iter([
            _chunk("Hello"), empty, _chunk(None), _chunk(", world")
        ])

        client = ChatModelClient(client=openai_client)
        chunks = list(client.stream_reply([{'role': 'user', 'content': 'hi'}]))

        assert chunks == ["Hello", ", world"]

    def test_request_parameters(self, openai_client):
        """Test model, temperature, streaming and system prompt are sent."""
        openai_client.chat.completions.create.return_value = iter([_chunk("ok")])

        client = ChatModelClient(model="gpt-4o", temperature=0.7, client=openai_client)
        client.complete([{'role': 'user', 'content': 'hi'}])

        kwargs = openai_client.chat.completions.create.call_args.kwargs
        assert kwargs['model'] == "gpt-4o"
        assert kwargs['temperature'] == 0.7
        assert kwargs['stream'] is True
        assert kwargs['messages'] == [
            {'role': 'system', 'content': SYSTEM_PROMPT},
            {'role': 'user', 'content': 'hi'}
        ]

    def test_complete_joins_chunks(self, openai_client):
        """Test complete returns the whole reply."""
        openai_client.chat.completions.create.return_value = iter([
            _chunk("Sure, "), _chunk("here you go.")
        ])

        client = ChatModelClient(client=openai_client)

        assert client.complete([{'role': 'user', 'content': 'hi'}]) == "Sure, here you go."

    def test_api_error_wrapped(self, openai_client):
        """Test OpenAI errors surface as ChatModelError."""
        openai_client.chat.completions.create.side_effect = OpenAIError("boom")

        client = ChatModelClient(client=openai_client)

        with pytest.raises(ChatModelError, match="boom"):
            client.complete([{'role': 'user', 'content': 'hi'}])
