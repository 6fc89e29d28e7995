import sys
from pathlib import Path

import pytest

# Ensure the backend package root is on sys.path for direct pytest runs
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))


@pytest.fixture
def session_factory(tmp_path):
    """Sessionmaker bound to a throwaway SQLite place store."""
    from sqlalchemy import create_engine
    from sqlalchemy.orm import sessionmaker

    from db import init_db

    engine = create_engine(
        f"sqlite:///{tmp_path / 'places.db'}", connect_args={"check_same_thread": False}
    )
    init_db(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False)
    engine.dispose()


class FakeProvider:
    """Place provider double that records every lookup."""

    def __init__(self, places=None, error=None):
        self.places = list(places or [])
        self.error = error
        self.calls = []

    def lookup(self, location, max_results=10):
        self.calls.append((location, max_results))
        if self.error is not None:
            raise self.error
        return list(self.places[:max_results])


@pytest.fixture
def fake_provider_cls():
    return FakeProvider
