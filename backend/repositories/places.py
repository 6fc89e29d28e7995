"""
Place repository backed by SQLAlchemy/SQLite.
"""
from datetime import datetime
from typing import List, Optional, Sequence, Tuple
from sqlalchemy import func, or_, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from domain.errors import InvalidInput, StoreError
from domain.models import Place
from repositories.models import PlaceORM, PlaceSearchORM

SEARCHABLE_FIELDS = ("name", "description", "address")


def normalize_term(term: str) -> str:
    return " ".join(term.casefold().split())


def _place_from_orm(orm: PlaceORM) -> Place:
    return Place(
        name=orm.name,
        description=orm.description,
        latitude=orm.latitude,
        longitude=orm.longitude,
        address=orm.address,
        url=orm.url,
    )


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class PlacesRepository:
    """Substring search and upsert-by-url for places."""

    def __init__(self, search_fields: Optional[Sequence[str]] = None):
        fields = tuple(search_fields or SEARCHABLE_FIELDS)
        unknown = [f for f in fields if f not in SEARCHABLE_FIELDS]
        if unknown:
            raise ValueError(f"Unsupported search fields: {', '.join(unknown)}")
        self.search_fields = fields

    def find(self, session: Session, term: str, limit: int) -> Tuple[List[Place], int]:
        """
        Case-insensitive substring match of `term` over the configured fields (OR).

        Places previously fetched for the same term also match, even when the
        term appears in none of their fields. Returns up to `limit` places plus
        the total number of matching rows.
        """
        if not term or not term.strip():
            raise InvalidInput("Search term must not be empty")
        normalized = normalize_term(term)
        pattern = f"%{_escape_like(normalized)}%"
        clauses = [
            func.casefold(getattr(PlaceORM, field)).like(pattern, escape="\\")
            for field in self.search_fields
        ]
        linked_urls = select(PlaceSearchORM.place_url).where(PlaceSearchORM.term == normalized)
        clauses.append(PlaceORM.url.in_(linked_urls))
        try:
            query = session.query(PlaceORM).filter(or_(*clauses))
            total = query.count()
            rows = query.order_by(PlaceORM.id).limit(limit).all()
        except SQLAlchemyError as exc:
            raise StoreError(f"Place search failed for {term!r}: {exc}") from exc
        return [_place_from_orm(r) for r in rows], total

    def get_by_url(self, session: Session, url: str) -> Optional[Place]:
        try:
            orm = session.query(PlaceORM).filter(PlaceORM.url == url).one_or_none()
        except SQLAlchemyError as exc:
            raise StoreError(f"Place lookup failed for {url!r}: {exc}") from exc
        return _place_from_orm(orm) if orm else None

    def count(self, session: Session) -> int:
        try:
            return session.query(PlaceORM).count()
        except SQLAlchemyError as exc:
            raise StoreError(f"Place count failed: {exc}") from exc

    def upsert(self, session: Session, place: Place, search_term: Optional[str] = None) -> Place:
        """
        Insert `place`, or overwrite the stored fields of the place with the same url.

        When `search_term` is given the place is also linked to it, so later
        searches for that term find it in the store.
        """
        if not place.url:
            raise StoreError(f"Place {place.name!r} has no url and cannot be stored")
        now = datetime.utcnow()
        values = {
            "url": place.url,
            "name": place.name,
            "description": place.description,
            "latitude": place.latitude,
            "longitude": place.longitude,
            "address": place.address,
            "updated_at": now,
        }
        stmt = sqlite_insert(PlaceORM).values(created_at=now, **values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[PlaceORM.url],
            set_={k: v for k, v in values.items() if k != "url"},
        )
        try:
            session.execute(stmt)
            if search_term and search_term.strip():
                link = sqlite_insert(PlaceSearchORM).values(
                    term=normalize_term(search_term), place_url=place.url, created_at=now
                )
                session.execute(link.on_conflict_do_nothing(index_elements=["term", "place_url"]))
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError(f"Place upsert failed for {place.url!r}: {exc}") from exc
        return place
