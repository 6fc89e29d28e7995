import pytest

from domain.errors import InvalidInput
from services.keyword_extractor import extract_keywords


def test_location_phrase_after_spot():
    assert extract_keywords("I'm looking for a quiet spot in La Masella") == "La Masella"


def test_places_in_city():
    assert extract_keywords("Places in Girona") == "Girona"


@pytest.mark.parametrize(
    "message, expected",
    [
        ("Any parking near Berga, Spain?", "Berga"),
        ("campsites around Puigcerdà in Catalonia", "Puigcerdà"),
        ("spots near Berga for tonight", "Berga"),
        ("places in the Pyrenees", "Pyrenees"),
        ("I'm looking for something quiet around Ripoll.", "Ripoll"),
    ],
)
def test_location_phrase_cleanup(message, expected):
    assert extract_keywords(message) == expected


def test_capitalized_run_without_preposition():
    assert extract_keywords("What about Sant Feliu?") == "Sant Feliu"


def test_capitalized_run_is_at_most_two_words():
    assert extract_keywords("Tossa De Mar please") == "Tossa De"


def test_fallback_strips_filler_words():
    assert extract_keywords("i want a quiet place by the beach with showers") == "beach showers"


def test_fallback_keeps_at_most_three_tokens():
    assert extract_keywords("mountain lake forest river views") == "mountain lake forest"


def test_never_empty_when_everything_is_filler():
    assert extract_keywords("where?") == "where?"


def test_empty_message_rejected():
    with pytest.raises(InvalidInput):
        extract_keywords("  ")


def test_capitalized_run_skips_leading_verbs():
    assert extract_keywords("Show me Cadaqués") == "Cadaqués"
