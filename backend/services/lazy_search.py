"""
Two-tier place search: serve from the local store, fall back to the external
provider on a miss and cache what it returns.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional, Protocol

from sqlalchemy.orm import Session

from domain.errors import InvalidInput, ProviderError, StoreError
from domain.models import Place, SearchResult, SearchStatus
from repositories.places import PlacesRepository
from settings import settings

logger = logging.getLogger(__name__)


class PlaceProvider(Protocol):
    def lookup(self, location: str, max_results: int = 10) -> List[Place]:
        ...


class LazySearchService:
    def __init__(
        self,
        session_factory: Callable[[], Session],
        provider: Optional[PlaceProvider],
        repository: Optional[PlacesRepository] = None,
        result_limit: Optional[int] = None,
        provider_limit: Optional[int] = None,
    ):
        self.session_factory = session_factory
        self.provider = provider
        self.repository = repository or PlacesRepository(settings.SEARCH_FIELDS)
        self.result_limit = result_limit or settings.SEARCH_RESULT_LIMIT
        self.provider_limit = provider_limit or settings.PROVIDER_RESULT_LIMIT

    def search(self, term: str) -> SearchResult:
        """
        Return places matching `term`.

        The provider is called at most once, and only when the store has no
        match. Fetched places are persisted one by one and returned as fetched.
        """
        if not isinstance(term, str) or not term.strip():
            raise InvalidInput("Search term must be a non-empty string")
        term = term.strip()

        with self.session_factory() as session:
            cached = self._find_cached(session, term)
        if cached is not None:
            return cached

        # No session is held while the provider call is in flight.
        fetched = self._fetch(term)
        if not fetched:
            logger.info("No places found for %r in store or provider", term)
            return SearchResult(term=term, status=SearchStatus.NO_MATCH)

        with self.session_factory() as session:
            stored = self._persist(session, term, fetched)
        logger.info("Fetched %d places for %r, stored %d", len(fetched), term, stored)
        return SearchResult(
            term=term,
            status=SearchStatus.FETCHED,
            records=fetched,
            total_matched=len(fetched),
        )

    def _find_cached(self, session: Session, term: str) -> Optional[SearchResult]:
        try:
            records, total = self.repository.find(session, term, self.result_limit)
        except StoreError as exc:
            # An unreachable store is treated like an empty one.
            logger.warning("Store lookup failed for %r, falling back to provider: %s", term, exc)
            return None
        if not records:
            return None
        logger.debug("Store hit for %r: %d of %d matches", term, len(records), total)
        return SearchResult(
            term=term,
            status=SearchStatus.CACHED,
            records=records,
            total_matched=total,
        )

    def _fetch(self, term: str) -> List[Place]:
        if self.provider is None:
            logger.debug("Provider disabled; skipping fetch for %r", term)
            return []
        try:
            return list(self.provider.lookup(term, max_results=self.provider_limit))
        except ProviderError as exc:
            logger.warning("Provider lookup failed for %r: %s", term, exc)
            return []

    def _persist(self, session: Session, term: str, places: List[Place]) -> int:
        stored = 0
        for place in places:
            try:
                self.repository.upsert(session, place, search_term=term)
                stored += 1
            except StoreError as exc:
                logger.warning("Could not store place %r: %s", place.name, exc)
        return stored
