from typing import Optional, Sequence

from domain.models import Place
from settings import settings

RESULTS_HEADER = "Places found for"
NO_RESULTS_TEMPLATE = 'No places found for "{term}". Try a nearby town or a broader area.'


def truncate_text(text: str, max_chars: int) -> str:
    """Cut `text` to `max_chars`, ending with '...' when shortened."""
    text = " ".join(text.split())
    if len(text) <= max_chars:
        return text
    return text[: max(max_chars - 3, 0)].rstrip() + "..."


def format_places(
    records: Sequence[Place],
    term: str,
    max_description_chars: Optional[int] = None,
) -> str:
    """
    Render places as a numbered plain-text list.

    Deterministic: the same records and term always produce the same text.
    """
    if not records:
        return NO_RESULTS_TEMPLATE.format(term=term)

    budget = max_description_chars or settings.DESCRIPTION_MAX_CHARS
    lines = [f'{RESULTS_HEADER} "{term}" ({len(records)}):']
    for idx, place in enumerate(records, start=1):
        lines.append(f"{idx}. {place.name}")
        if place.description and place.description.strip():
            lines.append(f"   {truncate_text(place.description, budget)}")
        if place.url:
            lines.append(f"   {place.url}")
    return "\n".join(lines)
