"""
Tests for the SQLAlchemy place store.
"""
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from domain.errors import InvalidInput, StoreError
from domain.models import Place
from repositories.places import PlacesRepository


def _place(name, url, description=None, address=None):
    return Place(name=name, description=description, address=address, url=url, latitude=42.1, longitude=1.8)


def test_upsert_then_find_by_name(session_factory):
    repo = PlacesRepository()
    with session_factory() as session:
        repo.upsert(session, _place("Camping Berga Resort", "http://p4n/1"))
        records, total = repo.find(session, "berga", limit=5)

    assert total == 1
    assert records[0].name == "Camping Berga Resort"
    assert records[0].url == "http://p4n/1"
    assert records[0].latitude == pytest.approx(42.1)


def test_upsert_same_url_overwrites_instead_of_duplicating(session_factory):
    repo = PlacesRepository()
    with session_factory() as session:
        repo.upsert(session, _place("Old name", "http://p4n/1", description="old"))
        repo.upsert(session, _place("New name", "http://p4n/1", description="new"))

        assert repo.count(session) == 1
        stored = repo.get_by_url(session, "http://p4n/1")

    assert stored.name == "New name"
    assert stored.description == "new"


def test_find_matches_description_and_address_case_insensitive(session_factory):
    repo = PlacesRepository()
    with session_factory() as session:
        repo.upsert(session, _place("Area A", "u1", description="Quiet spot near GIRONA"))
        repo.upsert(session, _place("Area B", "u2", address="Carrer Major, Girona"))
        repo.upsert(session, _place("Area C", "u3", description="Lleida"))

        records, total = repo.find(session, "Girona", limit=10)

    assert total == 2
    assert {r.url for r in records} == {"u1", "u2"}


@pytest.mark.parametrize("term", ["àger", "ÀGER", "Àger"])
def test_find_folds_accented_letters(session_factory, term):
    repo = PlacesRepository()
    with session_factory() as session:
        repo.upsert(session, _place("Camping Àger", "http://p4n/ager"))
        repo.upsert(session, _place("Càmping Ós de Balaguer", "http://p4n/os", address="CAMÍ DEL RIU"))

        records, total = repo.find(session, term, limit=5)
        by_address, _ = repo.find(session, "camí del riu", limit=5)

    assert total == 1
    assert records[0].url == "http://p4n/ager"
    assert [r.url for r in by_address] == ["http://p4n/os"]


def test_find_respects_limit_but_reports_total(session_factory):
    repo = PlacesRepository()
    with session_factory() as session:
        for i in range(7):
            repo.upsert(session, _place(f"Girona spot {i}", f"u{i}"))
        records, total = repo.find(session, "girona", limit=5)

    assert len(records) == 5
    assert total == 7


def test_search_fields_are_configurable(session_factory):
    repo = PlacesRepository(search_fields=["name", "description"])
    with session_factory() as session:
        repo.upsert(session, _place("Area B", "u2", address="Carrer Major, Girona"))
        records, total = repo.find(session, "girona", limit=5)

    assert records == []
    assert total == 0


def test_like_wildcards_are_literal(session_factory):
    repo = PlacesRepository()
    with session_factory() as session:
        repo.upsert(session, _place("Area 100% free", "u1"))
        repo.upsert(session, _place("Area 1000 free", "u2"))
        records, _ = repo.find(session, "100%", limit=5)

    assert [r.url for r in records] == ["u1"]


def test_unknown_search_field_rejected():
    with pytest.raises(ValueError):
        PlacesRepository(search_fields=["name", "url"])


def test_find_rejects_blank_term(session_factory):
    with session_factory() as session:
        with pytest.raises(InvalidInput):
            PlacesRepository().find(session, "  ", limit=5)


def test_upsert_without_url_is_a_store_error(session_factory):
    with session_factory() as session:
        with pytest.raises(StoreError):
            PlacesRepository().upsert(session, Place(name="Nameless"))


def test_database_failures_become_store_errors():
    session = MagicMock()
    session.query.side_effect = OperationalError("SELECT", {}, Exception("db down"))
    session.execute.side_effect = OperationalError("INSERT", {}, Exception("db down"))
    repo = PlacesRepository()

    with pytest.raises(StoreError):
        repo.find(session, "girona", limit=5)
    with pytest.raises(StoreError):
        repo.upsert(session, _place("A", "u1"))
    session.rollback.assert_called_once()


def test_places_linked_to_a_term_match_it_without_text_overlap(session_factory):
    repo = PlacesRepository()
    with session_factory() as session:
        repo.upsert(session, _place("Camp X", "http://x", description="quiet"), search_term="Berga")
        repo.upsert(session, _place("Camp X", "http://x", description="quiet"), search_term=" berga ")

        records, total = repo.find(session, "BERGA", limit=5)
        other, _ = repo.find(session, "Girona", limit=5)

    assert [r.url for r in records] == ["http://x"]
    assert total == 1
    assert other == []
