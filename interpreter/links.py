"""Link extraction for calendar response text."""
import re
from typing import List, Optional

from interpreter.models import LinkSegment, Segment, TextSegment

HERE_PHRASE_PATTERN = re.compile(
    r'You can view it \[here\]\((https?://[^)]+)\)',
    re.IGNORECASE
)
URL_PATTERN = re.compile(r'https?://[^\s)\]]+')

HERE_PREFACE = "You can view it "
LINK_DISPLAY = "here"


def extract_links(text: str) -> List[Segment]:
    """
    Split text into plain text runs and link references.

    "You can view it [here](URL)" phrases take precedence; when at least one
    is present, bare URLs are left untouched. Every link is displayed as
    "here".

    Args:
        text: Text span to scan

    Returns:
        Ordered list of TextSegment and LinkSegment objects
    """
    phrase_matches = list(HERE_PHRASE_PATTERN.finditer(text))
    if phrase_matches:
        return _build_segments(text, phrase_matches, preface=HERE_PREFACE)

    url_matches = list(URL_PATTERN.finditer(text))
    if not url_matches:
        return [TextSegment(text)]

    return _build_segments(text, url_matches)


def _build_segments(text: str, matches, preface: Optional[str] = None) -> List[Segment]:
    """
    Interleave the text around each match with link segments.

    Args:
        text: Original text
        matches: Regex matches in left-to-right order; the URL is the
            first group if the pattern has one, else the whole match
        preface: Literal text emitted before every link

    Returns:
        Ordered list of segments
    """
    segments: List[Segment] = []
    last_index = 0

    for match in matches:
        if match.start() > last_index:
            segments.append(TextSegment(text[last_index:match.start()]))

        if preface:
            segments.append(TextSegment(preface))

        href = match.group(1) if match.re.groups else match.group(0)
        segments.append(LinkSegment(display=LINK_DISPLAY, href=href))
        last_index = match.end()

    if last_index < len(text):
        segments.append(TextSegment(text[last_index:]))

    return segments


def segments_to_text(segments: List[Segment]) -> str:
    """Join segments back into text, writing links as markdown."""
    parts = []
    for segment in segments:
        if isinstance(segment, LinkSegment):
            parts.append(f"[{segment.display}]({segment.href})")
        else:
            parts.append(segment.value)
    return ''.join(parts)
