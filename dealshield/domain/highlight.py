"""Highlight mapping - trigger phrases to non-overlapping spans over the original text"""

import html
import re
from typing import Iterable, List
from dealshield.domain.models import HighlightSpan
from dealshield.utils.text_utils import unique_in_order


def _overlaps(start: int, end: int, claimed: List[HighlightSpan]) -> bool:
    return any(start < span.end and span.start < end for span in claimed)


def highlight_matches(text: str, phrases: Iterable[str]) -> List[HighlightSpan]:
    """
    Locate every case-insensitive literal occurrence of the phrases.

    Longest phrase wins: phrases are tried in descending length order and a
    match is only claimed when it does not overlap an already-claimed span, so a
    short phrase never fragments a longer highlight. Spans come back sorted by
    start offset and never overlap.
    """
    candidates = unique_in_order((p for p in phrases if p), key=str.casefold)
    candidates.sort(key=len, reverse=True)

    claimed: List[HighlightSpan] = []
    for phrase in candidates:
        for match in re.finditer(re.escape(phrase), text, re.IGNORECASE):
            if _overlaps(match.start(), match.end(), claimed):
                continue
            claimed.append(HighlightSpan(start=match.start(), end=match.end(), text=match.group(0)))

    return sorted(claimed, key=lambda span: span.start)


def render_markup(text: str, spans: Iterable[HighlightSpan]) -> str:
    """HTML-escape the text and wrap each span in <mark> tags"""
    parts = []
    cursor = 0
    for span in sorted(spans, key=lambda s: s.start):
        parts.append(html.escape(text[cursor:span.start]))
        parts.append(f"<mark>{html.escape(text[span.start:span.end])}</mark>")
        cursor = span.end
    parts.append(html.escape(text[cursor:]))
    return "".join(parts)
