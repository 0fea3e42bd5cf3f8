"""Parser for "You have N events ...: Day, Date at Time: Title, ..." sentences."""
import re
from typing import Dict, List, Optional

from interpreter.models import (
    NO_MATCH,
    DayGroup,
    EventLine,
    Matched,
    ParsedEvent,
    ParseResult,
    StructuredResponse,
)

HEADER_PATTERN = re.compile(
    r'You have (\d+) events?(?:\s+((?:for|next|in)\s+[^:]+))?:',
    re.IGNORECASE
)
EVENT_PATTERN = re.compile(
    r'([A-Za-z]+), ([A-Za-z]+ \d+) at ([\d:]+\s*[AP]M): ([^,]+)(?:,|$)'
)
DATE_MONTH_PATTERN = re.compile(r'([A-Za-z]+)\s+\d+')

TRIGGERS = ('events:', 'event:')

# Checked in order; the first phrase found in the text wins.
PERIOD_KEYWORDS = (
    ('next week', 'next week'),
    ('this week', 'this week'),
    ('week', 'this week'),
    ('today', 'today'),
    ('tomorrow', 'tomorrow'),
    ('next month', 'next month'),
    ('this month', 'this month'),
)

# Checked in order; the first name found in the text wins.
MONTHS = {
    'january': 'January', 'jan': 'January',
    'february': 'February', 'feb': 'February',
    'march': 'March', 'mar': 'March',
    'april': 'April', 'apr': 'April',
    'may': 'May',
    'june': 'June', 'jun': 'June',
    'july': 'July', 'jul': 'July',
    'august': 'August', 'aug': 'August',
    'september': 'September', 'sep': 'September', 'sept': 'September',
    'october': 'October', 'oct': 'October',
    'november': 'November', 'nov': 'November',
    'december': 'December', 'dec': 'December',
}

DEFAULT_PERIOD = 'upcoming'


def matches_event_list_shape(text: str) -> bool:
    """Check for an "events:" marker or a "You have N events ...:" header."""
    return (
        any(trigger in text for trigger in TRIGGERS)
        or HEADER_PATTERN.search(text) is not None
    )


def parse_event_list_format(text: str) -> ParseResult:
    """
    Parse a single-sentence event list into day groups.

    Args:
        text: Raw response text

    Returns:
        Matched with a StructuredResponse, or NO_MATCH if the list marker is
        missing or no event could be extracted
    """
    if not matches_event_list_shape(text):
        return NO_MATCH

    events = extract_events(text)
    if not events:
        return NO_MATCH

    header = HEADER_PATTERN.search(text)
    count = header.group(1) if header else str(len(events))
    header_period = header.group(2) if header else None

    period = resolve_time_period(text, header_period)
    if period == DEFAULT_PERIOD:
        month = _month_from_date(events[0].date)
        if month:
            period = f"in {month}"

    plural = 's' if int(count) != 1 else ''
    title = f"You have {count} event{plural} {period}:"

    return Matched(StructuredResponse(title=title, groups=group_events(events)))


def extract_events(text: str) -> List[ParsedEvent]:
    """
    Extract every "<Day>, <Month Day> at <Time>: <Title>" occurrence.

    Args:
        text: Raw response text

    Returns:
        ParsedEvent objects in source order
    """
    return [
        ParsedEvent(
            day=match.group(1),
            date=match.group(2),
            time=match.group(3),
            title=match.group(4).strip(),
            matched_text=match.group(0)
        )
        for match in EVENT_PATTERN.finditer(text)
    ]


def resolve_time_period(text: str, header_period: Optional[str] = None) -> str:
    """
    Work out the time period a list of events refers to.

    Args:
        text: Raw response text
        header_period: Period phrase captured from the header sentence

    Returns:
        Period label such as "next week", "June" or "upcoming"
    """
    if header_period:
        return header_period

    lowered = text.lower()

    for keyword, period in PERIOD_KEYWORDS:
        if keyword in lowered:
            return period

    for name, full_name in MONTHS.items():
        if name in lowered:
            return full_name

    return DEFAULT_PERIOD


def group_events(events: List[ParsedEvent]) -> List[DayGroup]:
    """Group events by "<day>, <date>" in first-seen order."""
    grouped: Dict[str, DayGroup] = {}
    for event in events:
        group = grouped.setdefault(event.group_key, DayGroup(label=event.group_key))
        group.lines.append(EventLine(time=event.time, title=event.title))
    return list(grouped.values())


def _month_from_date(date: str) -> Optional[str]:
    match = DATE_MONTH_PATTERN.match(date)
    if not match:
        return None
    token = match.group(1)
    return MONTHS.get(token.lower(), token)
