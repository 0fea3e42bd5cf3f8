"""Data models for calendar response interpretation."""
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True)
class ParsedEvent:
    """Event recovered from a flat event-list sentence."""
    day: str
    date: str
    time: str
    title: str
    matched_text: str

    @property
    def group_key(self) -> str:
        return f"{self.day}, {self.date}"


@dataclass
class TextSegment:
    """Plain text run."""
    value: str
    kind: str = field(default="text", init=False)


@dataclass
class LinkSegment:
    """Link reference with fixed display text."""
    display: str
    href: str
    kind: str = field(default="link", init=False)


Segment = Union[TextSegment, LinkSegment]


@dataclass
class EventLine:
    """Timed entry inside a day group."""
    time: str
    title: Optional[str] = None
    kind: str = field(default="event", init=False)


@dataclass
class NoteLine:
    """Italic aside inside a day group."""
    text: str
    kind: str = field(default="note", init=False)


@dataclass
class TextLine:
    """Prose line after link extraction."""
    segments: List[Segment]
    kind: str = field(default="text", init=False)


Line = Union[EventLine, NoteLine, TextLine]


@dataclass
class DayGroup:
    """Lines displayed under one day label, in source order."""
    label: str
    lines: List[Line] = field(default_factory=list)


@dataclass
class StructuredResponse:
    """Day-grouped, event-itemized calendar answer."""
    title: str
    groups: List[DayGroup]
    kind: str = field(default="structured", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class PlainResponse:
    """Original text split into text and link segments."""
    segments: List[Segment]
    kind: str = field(default="plain", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


FormattedResponse = Union[StructuredResponse, PlainResponse]


@dataclass(frozen=True)
class Matched:
    """A parser recognised its shape and produced a response."""
    response: StructuredResponse


class NoMatch:
    """A parser did not recognise its shape."""

    def __repr__(self) -> str:
        return "NO_MATCH"


NO_MATCH = NoMatch()

ParseResult = Union[Matched, NoMatch]
