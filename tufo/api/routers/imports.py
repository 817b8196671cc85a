"""
Import and maintenance API.

Import endpoints pull from OpenBeta; maintenance endpoints rewrite or
delete data in bulk.
"""
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from tufo.db import get_db
from tufo.errors import ValidationFailure
from tufo.services import OpenBetaImporter, MaintenanceService
from tufo.api.deps import get_openbeta_client
from tufo.api.models import (
    SearchImportRequest,
    AllStatesImportRequest,
    ImportResultResponse,
    MaintenanceResultResponse,
)

router = APIRouter(prefix="/api/import", tags=["import"])


def _respond(result, model):
    body = model.model_validate(result).model_dump()
    return JSONResponse(status_code=200 if result.success else 400, content=body)


@router.post("/search", response_model=ImportResultResponse)
def import_by_name(
    request: SearchImportRequest,
    db: Session = Depends(get_db),
    client=Depends(get_openbeta_client),
):
    """Import an area by name with its sub-areas, walls and climbs."""
    if not request.area_name or not request.area_name.strip():
        raise ValidationFailure("Area name is required")

    importer = OpenBetaImporter(db, client)
    result = importer.import_area_by_name(
        request.area_name.strip(),
        state=request.state,
        include_trad=request.include_trad,
    )
    return _respond(result, ImportResultResponse)


@router.post("/all-states", response_model=ImportResultResponse)
def import_all_states(
    request: Optional[AllStatesImportRequest] = None,
    db: Session = Depends(get_db),
    client=Depends(get_openbeta_client),
):
    """Import all 50 US states (sport + boulder unless include_trad)."""
    importer = OpenBetaImporter(db, client)
    result = importer.import_all_states(include_trad=request.include_trad if request else False)
    return _respond(result, ImportResultResponse)


@router.post("/fix-states", response_model=MaintenanceResultResponse)
def fix_state_names(db: Session = Depends(get_db)):
    """Rewrite state codes (TX -> Texas)."""
    return _respond(MaintenanceService(db).normalize_state_names(), MaintenanceResultResponse)


@router.delete("/area/{area_name}", response_model=MaintenanceResultResponse)
def delete_area(area_name: str, db: Session = Depends(get_db)):
    """Delete a top-level area and all its children and climbs."""
    return _respond(MaintenanceService(db).delete_area_by_name(area_name), MaintenanceResultResponse)


@router.delete("/reset", response_model=MaintenanceResultResponse)
def reset_database(db: Session = Depends(get_db)):
    """Delete ALL areas and climbs."""
    return _respond(MaintenanceService(db).reset_all(), MaintenanceResultResponse)
