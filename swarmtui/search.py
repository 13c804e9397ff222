"""Case-insensitive search and highlighting of terminal text."""

from __future__ import annotations

import re

from swarmtui.styles import Style

_MATCH_ON = "\x1b[93;44m"
_RESET = "\x1b[0m"
_INSENSITIVE_STYLE = Style(foreground="229", background="238")


def find_all_matches(text: str, term: str) -> list[int]:
    """Start offsets of non-overlapping case-insensitive matches of ``term``."""
    if not term:
        return []
    text_lower = text.lower()
    term_lower = term.lower()
    matches = []
    index = 0
    while (found := text_lower.find(term_lower, index)) != -1:
        matches.append(found)
        index = found + len(term)
    return matches


def highlight_matches(text: str, term: str) -> str:
    """Wrap every match of ``term`` in bright yellow on blue."""
    matches = find_all_matches(text, term)
    if not matches:
        return text
    pieces = []
    cursor = 0
    for start in matches:
        end = start + len(term)
        pieces.append(text[cursor:start])
        pieces.append(f"{_MATCH_ON}{text[start:end]}{_RESET}")
        cursor = end
    pieces.append(text[cursor:])
    return "".join(pieces)


def highlight_insensitive(text: str, term: str) -> str:
    """Highlight case-insensitive matches of ``term`` with a grey background."""
    if not term:
        return text
    pattern = re.compile(re.escape(term), re.IGNORECASE)
    return pattern.sub(lambda match: _INSENSITIVE_STYLE.render(match.group(0)), text)