from domain.models import Place
from services.response_formatter import format_places, truncate_text


def test_empty_result_names_the_term():
    text = format_places([], "Lleida")
    assert "Lleida" in text
    assert "no places found" in text.lower()


def test_single_place_shows_name_and_url():
    text = format_places([Place(name="A", url="u")], "X")
    assert "A" in text
    assert "u" in text
    assert "1. A" in text


def test_numbered_list_with_descriptions():
    places = [
        Place(name="Camp X", description="quiet", url="http://x"),
        Place(name="Camp Y", description=None, url=None),
    ]
    text = format_places(places, "Berga")
    lines = text.splitlines()

    assert lines[0] == 'Places found for "Berga" (2):'
    assert lines[1] == "1. Camp X"
    assert lines[2].strip() == "quiet"
    assert lines[3].strip() == "http://x"
    assert lines[4] == "2. Camp Y"
    assert len(lines) == 5


def test_long_description_is_truncated_with_ellipsis():
    place = Place(name="Long", description="word " * 100, url="http://l")
    text = format_places([place], "Girona", max_description_chars=40)
    desc_line = text.splitlines()[2].strip()

    assert desc_line.endswith("...")
    assert len(desc_line) <= 40


def test_formatting_is_stable():
    places = [Place(name="Camp X", description="quiet", url="http://x")]
    assert format_places(places, "Berga") == format_places(places, "Berga")


def test_truncate_text_leaves_short_text_alone():
    assert truncate_text("short  text", 50) == "short text"
