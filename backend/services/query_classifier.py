"""
Decide whether a chat message asks for a new place search or follows up on
results already shown.
"""
from __future__ import annotations

import re
from typing import Iterator, List, Pattern

from domain.errors import InvalidInput

# Checked first; any hit means the user is talking about results already on screen.
FOLLOW_UP_PATTERNS: List[Pattern[str]] = [
    re.compile(p)
    for p in (
        r"\bwhich one\b",
        r"\bwhich of\b",
        r"\bthe best\b",
        r"\bof (?:these|those|them)\b",
        r"\bcompare\b",
        r"\brecommend\b",
        r"\b(?:first|second|third|last) one\b",
        r"\bmore about (?:it|that|this|them|those)\b",
        r"^\s*(?:yes|no|ok|okay|sure|thanks|thank you)[\s.!?]*$",
    )
]

NEW_SEARCH_PATTERNS: List[Pattern[str]] = [
    re.compile(p)
    for p in (
        r"\b(?:i'm|i am|im) looking for\b",
        r"\blooking for\b",
        r"\b(?:places?|spots?|sites?|parking|areas?) (?:in|near|around|at)\b",
        r"\bcamp ?sites?\b",
        r"\bcamping\b",
        r"\bis there\b",
        r"\bare there\b",
        r"\bwhere can i\b",
        r"\bovernight\b",
    )
]

# Pronouns and question words: capitalized at the start of a sentence, never a place name.
SENTENCE_WORDS = frozenset(
    {
        "i", "i'm", "im", "i'd", "i'll", "i've", "we", "we're", "you", "my", "our",
        "it", "this", "that", "there", "what", "which", "where", "when", "why",
        "how", "who", "can", "could", "would", "should", "will", "do", "does",
        "is", "are",
    }
)

_WORD_RE = re.compile(r"[^\W\d_][\w'-]*")


def normalize_message(message: str) -> str:
    """Collapse whitespace and straighten typographic apostrophes."""
    if message is None or not str(message).strip():
        raise InvalidInput("Message must not be empty")
    return " ".join(str(message).replace("’", "'").split())


def iter_words(message: str) -> Iterator[re.Match]:
    return _WORD_RE.finditer(message)


def is_capitalized_word(word: str) -> bool:
    return len(word) >= 2 and word[0].isupper() and word.lower() not in SENTENCE_WORDS


def is_new_search(message: str) -> bool:
    """
    True when `message` reads like a fresh location search.

    Follow-up phrasing wins over search phrasing; with neither, any
    capitalized word is taken as a place name and triggers a search.
    """
    text = normalize_message(message)
    lowered = text.lower()

    if any(p.search(lowered) for p in FOLLOW_UP_PATTERNS):
        return False
    if any(p.search(lowered) for p in NEW_SEARCH_PATTERNS):
        return True
    return any(is_capitalized_word(m.group(0)) for m in iter_words(text))
