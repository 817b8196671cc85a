"""Climbs API - routes, their notes and uploaded media."""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from tufo.config import Settings, get_settings
from tufo.db import get_db
from tufo.services import catalog
from tufo.services.media import MediaService
from tufo.api.deps import get_current_user_id, get_media_processor
from tufo.api.models import (
    ClimbCreate,
    ClimbResponse,
    ClimbDetailResponse,
    MediaResponse,
    NoteCreate,
    NoteResponse,
)

router = APIRouter(prefix="/api/climbs", tags=["climbs"])


@router.get("", response_model=list[ClimbResponse])
def list_climbs(db: Session = Depends(get_db)):
    return catalog.list_climbs(db)


@router.get("/{climb_id}", response_model=ClimbDetailResponse)
def get_climb(climb_id: int, db: Session = Depends(get_db)):
    return catalog.get_climb(db, climb_id)


@router.post("", response_model=ClimbResponse, status_code=201)
def create_climb(payload: ClimbCreate, db: Session = Depends(get_db)):
    data = payload.model_dump()
    data["type"] = payload.type.value
    return catalog.create_climb(db, **data)


@router.post("/{climb_id}/notes", response_model=NoteResponse, status_code=201)
def add_note(
    climb_id: int,
    payload: NoteCreate,
    user_id: Optional[str] = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return catalog.add_note(db, climb_id, payload.body, user_id=user_id)


@router.post("/{climb_id}/media", response_model=MediaResponse, status_code=201)
def upload_media(
    climb_id: int,
    file: UploadFile = File(...),
    caption: Optional[str] = Form(None),
    user_id: Optional[str] = Depends(get_current_user_id),
    processor=Depends(get_media_processor),
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
):
    """Upload a photo (jpg/png/webp) or a video (mp4/webm/mov, 60s max)."""
    service = MediaService(db, processor=processor, settings=settings)
    return service.attach_upload(
        climb_id,
        filename=file.filename or "",
        content_type=file.content_type,
        stream=file.file,
        caption=caption,
        user_id=user_id,
    )
