from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tufo.db import get_db
from tufo.services import unified_search
from tufo.api.models import SearchResultResponse

router = APIRouter(prefix="/api/search", tags=["search"])


@router.get("", response_model=list[SearchResultResponse])
def search(q: str = Query("", description="States, areas at any level, and climbs"), db: Session = Depends(get_db)):
    return unified_search(db, q)
