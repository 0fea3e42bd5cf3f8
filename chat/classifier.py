"""Predicate deciding whether a message goes to the calendar webhook."""
import logging
import re

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 5000

SUSPICIOUS_PATTERNS = (
    re.compile(r'<script>', re.IGNORECASE),
    re.compile(r'javascript:', re.IGNORECASE),
    re.compile(r'data:text/html', re.IGNORECASE),
)

CALENDAR_KEYWORD_PATTERN = re.compile(
    r'\b(calendar|schedules?|meetings?|appointments?|events?|agenda|busy|free|'
    r'today|tomorrow|week|month|remind(?:er)?s?|book|reschedule|cancel)\b',
    re.IGNORECASE
)


def is_calendar_query(message: str, route_all: bool = True) -> bool:
    """
    Decide whether a message should be answered by the calendar webhook.

    Args:
        message: The user's message
        route_all: Send every safe message to the webhook; when False only
            messages mentioning a calendar keyword are sent

    Returns:
        True if the message should go to the webhook
    """
    if not message.strip():
        logger.debug("Empty message, not a calendar query")
        return False

    if len(message) > MAX_MESSAGE_LENGTH:
        logger.info("Message too long, not a calendar query")
        return False

    if any(pattern.search(message) for pattern in SUSPICIOUS_PATTERNS):
        logger.warning("Suspicious pattern detected, not a calendar query")
        return False

    if route_all:
        return True

    return CALENDAR_KEYWORD_PATTERN.search(message) is not None
