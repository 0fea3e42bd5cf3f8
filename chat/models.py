"""Data models for chat messages and replies."""
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from interpreter.event_list import matches_event_list_shape
from interpreter.models import FormattedResponse


@dataclass
class WebhookReply:
    """Reply read from the calendar webhook."""
    spoken: str
    web_response: Optional[str] = None


@dataclass
class ChatMessage:
    """Single message in a conversation."""
    role: str
    content: str
    web_response: Optional[str] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    @property
    def is_calendar_response(self) -> bool:
        """True for assistant messages carrying calendar content."""
        return self.role == 'assistant' and (
            bool(self.web_response)
            or matches_event_list_shape(self.content)
        )

    @property
    def display_text(self) -> str:
        return self.web_response or self.content

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'role': self.role,
            'content': self.content,
            'webResponse': self.web_response,
            'createdAt': self.created_at
        }


@dataclass
class ChatReply:
    """Assistant reply plus its interpretation, if any."""
    source: str
    message: ChatMessage
    formatted: Optional[FormattedResponse] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'source': self.source,
            'message': self.message.to_dict(),
            'formatted': self.formatted.to_dict() if self.formatted else None
        }
