"""Unified search across states, areas at any depth and climbs."""
import structlog
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.orm import Session

from tufo.db import Area, Climb
from .aggregation import AreaTree

log = structlog.get_logger()

STATE_MATCH_LIMIT = 5
AREA_MATCH_LIMIT = 10
CLIMB_MATCH_LIMIT = 10
TOTAL_LIMIT = 20

BREADCRUMB_SEPARATOR = " > "


@dataclass
class SearchResult:
    id: int
    name: str
    type: str  # "area" or "climb"
    hierarchy: str
    location: Optional[str] = None
    breadcrumb: list[str] = field(default_factory=list)
    grade: Optional[str] = None
    climb_count: Optional[int] = None


def unified_search(session: Session, q: str) -> list[SearchResult]:
    """
    Search states, areas and climbs by case-insensitive substring.

    Groups come back in a fixed order (state matches, area matches, climb
    matches) with duplicates on (id, type) dropped, capped at 20 results.
    """
    if not q or not q.strip():
        return []

    term = q.strip()
    tree = AreaTree.load(session)
    results: list[SearchResult] = []

    # 1. States -> top-level areas in that state
    state_areas = (
        session.query(Area)
        .filter(
            Area.state.isnot(None),
            Area.state.icontains(term, autoescape=True),
            Area.parent_id.is_(None),
        )
        .order_by(Area.id)
        .limit(STATE_MATCH_LIMIT)
        .all()
    )
    for area in state_areas:
        results.append(SearchResult(
            id=area.id,
            name=area.name,
            type="area",
            hierarchy="State → Area",
            location=area.state,
            breadcrumb=tree.breadcrumb(area.id),
            climb_count=tree.total_climb_count(area.id),
        ))

    # 2. Areas at any level of the hierarchy
    named_areas = (
        session.query(Area)
        .filter(Area.name.icontains(term, autoescape=True))
        .order_by(Area.id)
        .limit(AREA_MATCH_LIMIT)
        .all()
    )
    for area in named_areas:
        path = tree.breadcrumb(area.id)
        results.append(SearchResult(
            id=area.id,
            name=area.name,
            type="area",
            hierarchy="Top-Level" if area.parent_id is None else "Sub-Area",
            location=BREADCRUMB_SEPARATOR.join(path),
            breadcrumb=path,
            climb_count=tree.total_climb_count(area.id),
        ))

    # 3. Climbs
    climbs = (
        session.query(Climb)
        .filter(Climb.name.icontains(term, autoescape=True))
        .order_by(Climb.id)
        .limit(CLIMB_MATCH_LIMIT)
        .all()
    )
    for climb in climbs:
        path = tree.breadcrumb(climb.area_id)
        results.append(SearchResult(
            id=climb.id,
            name=climb.name,
            type="climb",
            hierarchy="Route",
            location=BREADCRUMB_SEPARATOR.join(path) if path else "Unknown",
            breadcrumb=path,
            grade=climb.yds,
        ))

    unique = []
    seen = set()
    for result in results:
        key = (result.id, result.type)
        if key in seen:
            continue
        seen.add(key)
        unique.append(result)

    log.debug("unified_search", q=q, matches=len(results), returned=min(len(unique), TOTAL_LIMIT))
    return unique[:TOTAL_LIMIT]
