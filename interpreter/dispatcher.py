"""Entry point that picks a parser for a calendar response."""
import logging

from interpreter.day_headers import matches_day_header_shape, parse_day_header_format
from interpreter.event_list import matches_event_list_shape, parse_event_list_format
from interpreter.links import extract_links
from interpreter.models import FormattedResponse, Matched, PlainResponse

logger = logging.getLogger(__name__)


def format_response(raw: str) -> FormattedResponse:
    """
    Interpret a raw calendar response.

    Markdown-shaped text goes to the day-header parser, "events:" lists go
    to the event-list parser, and anything else (or an event list with no
    recognisable events) becomes plain text with link segments. Only one
    parser runs per input.

    Args:
        raw: Response text from the calendar webhook

    Returns:
        StructuredResponse or PlainResponse
    """
    if matches_day_header_shape(raw):
        result = parse_day_header_format(raw)
        logger.debug("Interpreted response as day-header markdown")
        return result.response

    if matches_event_list_shape(raw):
        result = parse_event_list_format(raw)
        if isinstance(result, Matched):
            logger.debug("Interpreted response as flat event list")
            return result.response
        logger.debug("Event list marker found but no events matched")

    return PlainResponse(segments=extract_links(raw))
