"""
Derive a place search term from a chat message.
"""
from __future__ import annotations

import re
from typing import List, Optional

from services.query_classifier import is_capitalized_word, iter_words, normalize_message

_LOCATION = r"(?P<loc>[^.,;!?\n]+)"

# First match wins; ordered from most to least specific.
LOCATION_PATTERNS = [
    re.compile(
        r"\b(?:places?|spots?|sites?|campsites?|camping|parking|areas?)\s+(?:in|near|around|at)\s+" + _LOCATION,
        re.IGNORECASE,
    ),
    re.compile(r"\blooking for\b.*?\b(?:in|near|around)\s+" + _LOCATION, re.IGNORECASE),
    re.compile(r"\b(?:in|near|around)\s+" + _LOCATION, re.IGNORECASE),
]

REGION_SUFFIXES = (
    "spain", "españa", "catalonia", "catalunya", "cataluña", "france", "andorra",
    "portugal", "italy", "germany", "europe", "pyrenees", "the pyrenees",
    "pirineus", "pirineos", "costa brava", "the alps", "alps",
)

_REGION_SUFFIX_RE = re.compile(
    r"(?:\s*,\s*|\s+(?:in\s+)?)(?:" + "|".join(re.escape(s) for s in REGION_SUFFIXES) + r")\s*$",
    re.IGNORECASE,
)
# Trailing qualifiers after the place name: "Berga for tonight", "Girona with showers".
_TRAILING_CLAUSE_RE = re.compile(
    r"\s+(?:for|with|that|which|where|please|tonight|today|tomorrow|this|next|to)\b.*$",
    re.IGNORECASE,
)
_LEADING_ARTICLE_RE = re.compile(r"^(?:the)\s+", re.IGNORECASE)

STOP_WORDS = frozenset(
    {
        # verbs
        "look", "looking", "find", "finding", "search", "searching", "want", "wanna",
        "need", "show", "give", "tell", "know", "stay", "sleep", "park", "spend",
        "can", "could", "would", "should", "will", "are", "is", "there", "have", "has",
        # nouns
        "place", "places", "spot", "spots", "site", "sites", "area", "areas",
        "campsite", "campsites", "camping", "parking", "night", "overnight",
        "camper", "van", "motorhome", "somewhere",
        # prepositions, pronouns, fillers
        "for", "in", "near", "around", "at", "to", "from", "with", "the", "and",
        "some", "any", "good", "nice", "quiet", "please", "hello", "thanks",
        "me", "you", "our", "my", "we", "i'm", "im", "what", "where", "which",
        "how", "about", "this", "that", "tonight", "today", "tomorrow",
    }
)


def _clean_location(raw: str) -> str:
    loc = raw.strip()
    loc = _TRAILING_CLAUSE_RE.sub("", loc)
    loc = _LEADING_ARTICLE_RE.sub("", loc)
    while True:
        stripped = _REGION_SUFFIX_RE.sub("", loc).strip()
        # keep a bare region ("Pyrenees") rather than strip it to nothing
        if stripped == loc or len(stripped) <= 2:
            break
        loc = stripped
    return loc.strip(" '\"-")


def _from_location_phrase(text: str) -> Optional[str]:
    for pattern in LOCATION_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        loc = _clean_location(match.group("loc"))
        if len(loc) > 2:
            return loc
    return None


def _is_name_word(word: str) -> bool:
    return is_capitalized_word(word) and word.lower() not in STOP_WORDS


def _from_capitalized_run(text: str) -> Optional[str]:
    words = list(iter_words(text))
    for idx, match in enumerate(words):
        if not _is_name_word(match.group(0)):
            continue
        run = [match.group(0)]
        if idx + 1 < len(words):
            nxt = words[idx + 1]
            adjacent = not text[match.end():nxt.start()].strip()
            if adjacent and _is_name_word(nxt.group(0)):
                run.append(nxt.group(0))
        return " ".join(run)
    return None


def _from_filtered_tokens(text: str, max_tokens: int = 3) -> Optional[str]:
    cleaned = re.sub(r"[^\w\s']", " ", text.lower())
    tokens: List[str] = [
        t.strip("'") for t in cleaned.split() if t.strip("'") not in STOP_WORDS
    ]
    kept = [t for t in tokens if len(t) > 2]
    if not kept:
        return None
    return " ".join(kept[:max_tokens])


def extract_keywords(message: str) -> str:
    """
    Pull the search term out of a chat message.

    Tries an explicit "in/near/around X" phrase, then a capitalized place
    name, then the message minus filler words. Never returns an empty string.
    """
    text = normalize_message(message)
    return (
        _from_location_phrase(text)
        or _from_capitalized_run(text)
        or _from_filtered_tokens(text)
        or text
    )
