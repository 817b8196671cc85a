from .catalog import (
    AreaCreate,
    AreaResponse,
    AreaSummaryResponse,
    NearbyAreaResponse,
    StateSummaryResponse,
    ClimbSummaryResponse,
    AreaDetailResponse,
    MediaResponse,
    NoteCreate,
    NoteResponse,
    ClimbCreate,
    ClimbResponse,
    ClimbDetailResponse,
    SearchResultResponse,
    SearchImportRequest,
    AllStatesImportRequest,
    ImportResultResponse,
    MaintenanceResultResponse,
)
