"""
SQLAlchemy ORM models for persistence.
"""
from datetime import datetime
from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint

from db import Base


class PlaceORM(Base):
    __tablename__ = "places"

    id = Column(Integer, primary_key=True, autoincrement=True)
    url = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    address = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class PlaceSearchORM(Base):
    """Links a normalized search term to a place it fetched from the provider."""
    __tablename__ = "place_searches"
    __table_args__ = (UniqueConstraint("term", "place_url", name="uq_place_searches_term_url"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    term = Column(String, nullable=False, index=True)
    place_url = Column(String, ForeignKey("places.url"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
