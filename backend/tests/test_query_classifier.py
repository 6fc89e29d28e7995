import pytest

from domain.errors import InvalidInput
from services.query_classifier import is_new_search


def test_which_one_is_a_follow_up():
    assert is_new_search("Which one is best?") is False


def test_places_in_city_is_new_search():
    assert is_new_search("Places in Girona") is True


@pytest.mark.parametrize("message", ["", "   ", "\n\t"])
def test_empty_message_is_rejected(message):
    with pytest.raises(InvalidInput):
        is_new_search(message)


@pytest.mark.parametrize(
    "message",
    [
        "Can you compare the first two?",
        "Which of these has showers?",
        "What would you recommend?",
        "ok",
        "Yes!",
        "Tell me more about it",
    ],
)
def test_follow_up_phrasing(message):
    assert is_new_search(message) is False


def test_follow_up_wins_over_search_phrasing():
    # "the best" is checked before "campsite"
    assert is_new_search("What is the best campsite?") is False


@pytest.mark.parametrize(
    "message",
    [
        "I'm looking for somewhere to sleep",
        "I’m looking for a spot tonight",
        "is there parking near the beach?",
        "any campsite around here",
        "Spots near the lake",
    ],
)
def test_search_phrasing(message):
    assert is_new_search(message) is True


def test_capitalized_place_name_defaults_to_search():
    assert is_new_search("what about Berga") is True


def test_plain_lowercase_chatter_is_not_a_search():
    assert is_new_search("hmm that sounds nice") is False


def test_sentence_words_do_not_count_as_place_names():
    assert is_new_search("How much does it cost") is False


@pytest.mark.parametrize("message", ["Hello", "Tell me something", "Show me options", "Hello there"])
def test_any_other_capitalized_word_biases_toward_search(message):
    assert is_new_search(message) is True


@pytest.mark.parametrize("message", ["Where do we go", "Is it open", "You said that"])
def test_pronouns_and_question_words_are_not_place_names(message):
    assert is_new_search(message) is False
