"""Parser for markdown-style responses with bolded day headers."""
from typing import Dict, List

from interpreter.links import extract_links
from interpreter.models import (
    NO_MATCH,
    DayGroup,
    EventLine,
    Line,
    Matched,
    NoteLine,
    ParseResult,
    StructuredResponse,
    TextLine,
)

BOLD_MARKER = '**'
ITALIC_MARKER = '*'
BULLET = '•'
DEFAULT_TITLE = "Your Schedule"


def matches_day_header_shape(text: str) -> bool:
    """Check whether text looks like multi-line markdown content."""
    return text.startswith(BOLD_MARKER) or '\n' in text


def parse_day_header_format(text: str) -> ParseResult:
    """
    Parse a title line, bolded day headers and bullet event lines.

    Once the shape check passes this always matches: lines seen before any
    day header land in a "Your Schedule" group. A day header that repeats an
    earlier label replaces that group's lines while keeping its position.

    Args:
        text: Raw response text

    Returns:
        Matched with a StructuredResponse, or NO_MATCH if the text is not
        markdown-shaped
    """
    if not matches_day_header_shape(text):
        return NO_MATCH

    lines = [line.rstrip('\r') for line in text.split('\n')]
    has_title = lines[0].startswith(BOLD_MARKER)

    day_lines: Dict[str, List[str]] = {}
    current_day = None

    for index, line in enumerate(lines):
        if not line.strip() or (index == 0 and has_title):
            continue

        if _is_day_header(line):
            current_day = _strip_bold(line)
            day_lines[current_day] = []
        elif current_day:
            day_lines[current_day].append(line)
        else:
            day_lines.setdefault(DEFAULT_TITLE, []).append(line)

    title = _strip_bold(lines[0]) if has_title else DEFAULT_TITLE
    groups = [
        DayGroup(label=label, lines=[classify_line(line) for line in raw_lines])
        for label, raw_lines in day_lines.items()
    ]
    return Matched(StructuredResponse(title=title, groups=groups))


def classify_line(line: str) -> Line:
    """
    Turn one raw group line into an event, note or text line.

    Args:
        line: Raw line from inside a day group

    Returns:
        EventLine for bullet lines, NoteLine for italic lines, TextLine
        otherwise
    """
    if BULLET in line:
        bullet_text = line.replace(BULLET, '', 1).strip()
        if ':' not in line:
            # e.g. "• 9 AM - 10 AM (1 hour)"
            return EventLine(time=bullet_text)

        parts = bullet_text.split(':')
        time = ':'.join(parts[:2])
        title = ':'.join(parts[2:]).strip()
        return EventLine(time=time, title=title or None)

    if line.startswith(ITALIC_MARKER) and line.endswith(ITALIC_MARKER):
        return NoteLine(text=line.replace(ITALIC_MARKER, ''))

    return TextLine(segments=extract_links(line))


def _is_day_header(line: str) -> bool:
    return (
        line.startswith(BOLD_MARKER)
        and BULLET not in line
        and 'events' not in line
    )


def _strip_bold(line: str) -> str:
    return line.replace(BOLD_MARKER, '').strip()
