"""
Areas API - hierarchical navigation of climbing areas.

- GET /api/areas - Top-level areas with rolled-up climb counts
- GET /api/areas/by-state - Area and climb counts per state
- GET /api/areas/nearby - Parent areas near a point
- GET /api/areas/{id} - Area with sub-areas and climbs
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tufo.db import get_db
from tufo.services import aggregation, geo, catalog
from tufo.api.models import (
    AreaCreate,
    AreaResponse,
    AreaSummaryResponse,
    AreaDetailResponse,
    NearbyAreaResponse,
    StateSummaryResponse,
    ClimbSummaryResponse,
)

router = APIRouter(prefix="/api/areas", tags=["areas"])


@router.get("", response_model=list[AreaSummaryResponse])
def list_top_level(db: Session = Depends(get_db)):
    """All areas without a parent."""
    return aggregation.top_level_areas(db)


@router.get("/by-state", response_model=list[StateSummaryResponse])
def by_state(db: Session = Depends(get_db)):
    return aggregation.state_summaries(db)


@router.get("/by-state/{state}", response_model=list[AreaSummaryResponse])
def areas_in_state(state: str, db: Session = Depends(get_db)):
    return aggregation.areas_in_state(db, state)


@router.get("/nearby", response_model=list[NearbyAreaResponse])
def nearby(
    lat: float = Query(..., ge=-90, le=90, description="Latitude"),
    lng: float = Query(..., ge=-180, le=180, description="Longitude"),
    radius: float = Query(geo.DEFAULT_RADIUS_MILES, ge=0, description="Search radius in miles"),
    db: Session = Depends(get_db),
):
    """Parent areas (top-level or with sub-areas) within the radius, nearest first."""
    return [
        NearbyAreaResponse(
            id=n.area.id,
            name=n.area.name,
            climb_count=n.climb_count,
            lat=n.area.lat,
            lng=n.area.lng,
            distance_miles=round(n.distance_miles, 2),
        )
        for n in geo.nearby_areas(db, lat, lng, radius)
    ]


@router.get("/search", response_model=list[AreaResponse])
def search(q: str = Query("", description="Search query"), db: Session = Depends(get_db)):
    return aggregation.search_areas_by_name(db, q)


@router.get("/{area_id}", response_model=AreaDetailResponse)
def get_area(area_id: int, db: Session = Depends(get_db)):
    detail = aggregation.area_detail(db, area_id)
    area = detail.area

    return AreaDetailResponse(
        id=area.id,
        name=area.name,
        state=area.state,
        country=area.country,
        lat=area.lat,
        lng=area.lng,
        parent_id=area.parent_id,
        sub_areas=[AreaSummaryResponse.model_validate(s) for s in detail.sub_areas],
        climbs=[ClimbSummaryResponse.model_validate(c) for c in detail.climbs],
    )


@router.get("/{area_id}/breadcrumb", response_model=list[str])
def get_breadcrumb(area_id: int, db: Session = Depends(get_db)):
    """Names from the root area down to this one."""
    # Raises NotFoundError for unknown ids
    aggregation.area_detail(db, area_id)
    return aggregation.breadcrumb(db, area_id)


@router.post("", response_model=AreaResponse, status_code=201)
def create_area(payload: AreaCreate, db: Session = Depends(get_db)):
    return catalog.create_area(db, **payload.model_dump())
