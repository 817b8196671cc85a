from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from tufo.db.models import ClimbType, MediaType


# --- Area (Hierarchy) Models ---

class AreaCreate(BaseModel):
    name: str
    state: Optional[str] = None
    country: str = "United States"
    lat: Optional[float] = None
    lng: Optional[float] = None
    parent_id: Optional[int] = None


class AreaResponse(BaseModel):
    id: int
    name: str
    state: Optional[str] = None
    country: str = "United States"
    lat: Optional[float] = None
    lng: Optional[float] = None
    parent_id: Optional[int] = None

    model_config = {"from_attributes": True}


class AreaSummaryResponse(BaseModel):
    """Area with the climb count rolled up over all of its sub-areas."""
    id: int
    name: str
    climb_count: int
    lat: Optional[float] = None
    lng: Optional[float] = None

    model_config = {"from_attributes": True}


class NearbyAreaResponse(AreaSummaryResponse):
    distance_miles: float


class StateSummaryResponse(BaseModel):
    state: str
    area_count: int
    climb_count: int

    model_config = {"from_attributes": True}


class ClimbSummaryResponse(BaseModel):
    id: int
    name: str
    type: ClimbType
    yds: Optional[str] = None

    model_config = {"from_attributes": True}


class AreaDetailResponse(AreaResponse):
    sub_areas: list[AreaSummaryResponse] = Field(default_factory=list)
    climbs: list[ClimbSummaryResponse] = Field(default_factory=list)


# --- Climb Models ---

class MediaResponse(BaseModel):
    id: int
    climb_id: int
    user_id: Optional[str] = None
    type: MediaType
    url: str
    thumbnail_url: Optional[str] = None
    caption: Optional[str] = None
    duration_seconds: Optional[int] = None
    bytes: Optional[int] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class NoteCreate(BaseModel):
    body: str


class NoteResponse(BaseModel):
    id: int
    climb_id: int
    user_id: Optional[str] = None
    body: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ClimbCreate(BaseModel):
    area_id: int
    name: str
    type: ClimbType = ClimbType.SPORT
    yds: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    length_meters: Optional[int] = None
    description: Optional[str] = None
    hero_url: Optional[str] = None
    hero_attribution: Optional[str] = None
    source: Optional[str] = None
    source_id: Optional[str] = None


class ClimbResponse(BaseModel):
    id: int
    area_id: int
    name: str
    type: ClimbType
    yds: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    length_meters: Optional[int] = None
    description: Optional[str] = None
    hero_url: Optional[str] = None
    hero_attribution: Optional[str] = None
    source: Optional[str] = None
    source_id: Optional[str] = None

    model_config = {"from_attributes": True}


class ClimbDetailResponse(ClimbResponse):
    area: Optional[AreaResponse] = None
    media: list[MediaResponse] = Field(default_factory=list)
    notes: list[NoteResponse] = Field(default_factory=list)


# --- Search Models ---

class SearchResultResponse(BaseModel):
    id: int
    name: str
    type: str = Field(description="'area' or 'climb'")
    hierarchy: str = Field(description="State → Area, Top-Level, Sub-Area or Route")
    location: Optional[str] = Field(default=None, description="Texas > Barton Creek Greenbelt > Gus Fruh")
    breadcrumb: list[str] = Field(default_factory=list)
    grade: Optional[str] = None
    climb_count: Optional[int] = None

    model_config = {"from_attributes": True}


# --- Import / Maintenance Models ---

class SearchImportRequest(BaseModel):
    area_name: str
    state: Optional[str] = None
    include_trad: bool = True


class AllStatesImportRequest(BaseModel):
    include_trad: bool = False


class ImportResultResponse(BaseModel):
    success: bool
    message: str = ""
    areas_imported: int = 0
    climbs_imported: int = 0
    climbs_skipped: int = 0
    errors: list[str] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class MaintenanceResultResponse(BaseModel):
    success: bool
    message: str = ""
    areas_changed: int = 0
    areas_deleted: int = 0
    climbs_deleted: int = 0

    model_config = {"from_attributes": True}
