"""Direct catalog writes and reads: areas, climbs and route notes."""
import structlog
from typing import Optional

from sqlalchemy.orm import Session, selectinload

from tufo.db import Area, Climb, ClimbType, RouteNote
from tufo.errors import NotFoundError, ValidationFailure
from .geo import validate_coordinates

log = structlog.get_logger()

MAX_NAME_LENGTH = 160
MAX_NOTE_LENGTH = 2000
MAX_DESCRIPTION_LENGTH = 4000


def _require_name(name: Optional[str], what: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationFailure(f"{what} name is required")
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationFailure(f"{what} name must be at most {MAX_NAME_LENGTH} characters")
    return name


def _check_coordinates(lat: Optional[float], lng: Optional[float]):
    if lat is not None or lng is not None:
        validate_coordinates(lat if lat is not None else 0.0, lng if lng is not None else 0.0)


def create_area(
    session: Session,
    name: str,
    state: Optional[str] = None,
    country: str = "United States",
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    parent_id: Optional[int] = None,
) -> Area:
    """Create an area; a child can only be attached to an existing parent."""
    name = _require_name(name, "Area")
    _check_coordinates(lat, lng)

    if parent_id is not None and not session.get(Area, parent_id):
        raise NotFoundError(f"Parent area {parent_id} not found")

    area = Area(name=name, state=state, country=country or "United States", lat=lat, lng=lng, parent_id=parent_id)
    session.add(area)
    session.commit()
    session.refresh(area)

    log.info("area_created", id=area.id, name=area.name, parent_id=parent_id)
    return area


def list_climbs(session: Session) -> list[Climb]:
    return (
        session.query(Climb)
        .options(selectinload(Climb.media), selectinload(Climb.notes))
        .order_by(Climb.id)
        .all()
    )


def get_climb(session: Session, climb_id: int) -> Climb:
    """A climb with its area, media and notes (newest first)."""
    climb = (
        session.query(Climb)
        .options(selectinload(Climb.area), selectinload(Climb.media), selectinload(Climb.notes))
        .filter(Climb.id == climb_id)
        .first()
    )
    if not climb:
        raise NotFoundError(f"Climb {climb_id} not found")
    return climb


def create_climb(
    session: Session,
    area_id: int,
    name: str,
    type: str = ClimbType.SPORT.value,
    yds: Optional[str] = None,
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    length_meters: Optional[int] = None,
    description: Optional[str] = None,
    hero_url: Optional[str] = None,
    hero_attribution: Optional[str] = None,
    source: Optional[str] = None,
    source_id: Optional[str] = None,
) -> Climb:
    name = _require_name(name, "Climb")
    _check_coordinates(lat, lng)

    try:
        climb_type = ClimbType(type)
    except ValueError:
        allowed = ", ".join(t.value for t in ClimbType)
        raise ValidationFailure(f"Climb type must be one of: {allowed}")

    if length_meters is not None and length_meters < 0:
        raise ValidationFailure("Length must not be negative")
    if description and len(description) > MAX_DESCRIPTION_LENGTH:
        raise ValidationFailure(f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters")

    if not session.get(Area, area_id):
        raise NotFoundError(f"Area {area_id} not found")

    if source and source_id:
        duplicate = session.query(Climb).filter(Climb.source == source, Climb.source_id == source_id).first()
        if duplicate:
            raise ValidationFailure(f"Climb {source}:{source_id} already exists")

    climb = Climb(
        area_id=area_id,
        name=name,
        type=climb_type,
        yds=yds,
        lat=lat,
        lng=lng,
        length_meters=length_meters,
        description=description,
        hero_url=hero_url,
        hero_attribution=hero_attribution,
        source=source,
        source_id=source_id,
    )
    session.add(climb)
    session.commit()
    session.refresh(climb)

    log.info("climb_created", id=climb.id, name=climb.name, area_id=area_id)
    return climb


def add_note(session: Session, climb_id: int, body: str, user_id: Optional[str] = None) -> RouteNote:
    """Attach a note to a climb."""
    body = (body or "").strip()
    if not body:
        raise ValidationFailure("Note body is required")
    if len(body) > MAX_NOTE_LENGTH:
        raise ValidationFailure(f"Note must be at most {MAX_NOTE_LENGTH} characters")

    if not session.get(Climb, climb_id):
        raise NotFoundError(f"Climb {climb_id} not found")

    note = RouteNote(climb_id=climb_id, body=body, user_id=user_id)
    session.add(note)
    session.commit()
    session.refresh(note)

    log.info("note_added", climb_id=climb_id, note_id=note.id)
    return note
