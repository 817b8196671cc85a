"""SQLAlchemy ORM models for the area/climb hierarchy."""
from sqlalchemy import (
    Column, Integer, BigInteger, String, Float, Text, Enum, TIMESTAMP,
    ForeignKey, Index, UniqueConstraint,
)
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import enum

from .database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ClimbType(str, enum.Enum):
    SPORT = "Sport"
    TRAD = "Trad"
    BOULDER = "Boulder"


class MediaType(str, enum.Enum):
    PHOTO = "Photo"
    VIDEO = "Video"


class Area(Base):
    """
    Hierarchical climbing area.

    States -> Areas -> Sub-areas -> Walls. Top-level areas have no parent.
    Deleting an area removes its sub-areas and climbs.
    """
    __tablename__ = "areas"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(160), nullable=False)
    state = Column(String(64), nullable=True)
    country = Column(String(64), nullable=False, default="United States")
    lat = Column(Float, nullable=True)
    lng = Column(Float, nullable=True)
    parent_id = Column(Integer, ForeignKey("areas.id", ondelete="CASCADE"), nullable=True)

    # Relationships
    parent = relationship("Area", remote_side=[id], back_populates="children")
    children = relationship(
        "Area",
        back_populates="parent",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    climbs = relationship(
        "Climb",
        back_populates="area",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_area_parent", "parent_id"),
        Index("idx_area_name_parent", "name", "parent_id"),
        Index("idx_area_state", "state"),
    )


class Climb(Base):
    """A single route attached to exactly one area."""
    __tablename__ = "climbs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    area_id = Column(Integer, ForeignKey("areas.id", ondelete="CASCADE"), nullable=False)

    name = Column(String(160), nullable=False)
    type = Column(Enum(ClimbType, values_callable=lambda e: [m.value for m in e]),
                  nullable=False, default=ClimbType.SPORT)
    yds = Column(String(16), nullable=True)
    lat = Column(Float, nullable=True)
    lng = Column(Float, nullable=True)
    length_meters = Column(Integer, nullable=True)
    description = Column(String(4000), nullable=True)

    # Overhead/hero image
    hero_url = Column(String(512), nullable=True)
    hero_attribution = Column(String(256), nullable=True)

    # Import provenance; (source, source_id) is the idempotency key
    source = Column(String(32), nullable=True)
    source_id = Column(String(64), nullable=True)

    area = relationship("Area", back_populates="climbs")
    media = relationship(
        "Media",
        back_populates="climb",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    notes = relationship(
        "RouteNote",
        back_populates="climb",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="RouteNote.created_at.desc()",
    )

    __table_args__ = (
        Index("idx_climb_area", "area_id"),
        Index("idx_climb_name", "name"),
        UniqueConstraint("source", "source_id", name="uq_climb_source"),
    )


class Media(Base):
    """User-submitted photo or short video for a climb."""
    __tablename__ = "media"

    id = Column(Integer, primary_key=True, autoincrement=True)
    climb_id = Column(Integer, ForeignKey("climbs.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(64), nullable=True)  # weak reference, no FK

    type = Column(Enum(MediaType, values_callable=lambda e: [m.value for m in e]),
                  nullable=False, default=MediaType.PHOTO)
    url = Column(String(512), nullable=False)
    thumbnail_url = Column(String(512), nullable=True)
    caption = Column(String(512), nullable=True)
    duration_seconds = Column(Integer, nullable=True)
    bytes = Column(BigInteger, nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    climb = relationship("Climb", back_populates="media")

    __table_args__ = (
        Index("idx_media_climb", "climb_id"),
        Index("idx_media_user", "user_id"),
        Index("idx_media_created", "created_at"),
    )


class RouteNote(Base):
    """Free-text note left on a climb."""
    __tablename__ = "route_notes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    climb_id = Column(Integer, ForeignKey("climbs.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(64), nullable=True)  # weak reference, no FK
    body = Column(Text, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

    climb = relationship("Climb", back_populates="notes")

    __table_args__ = (
        Index("idx_note_climb", "climb_id"),
        Index("idx_note_user", "user_id"),
    )
