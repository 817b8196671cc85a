from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tufo.db import get_db
from tufo.services import seed_sample

router = APIRouter(prefix="/api/seed", tags=["seed"])


@router.post("/sample")
def sample(db: Session = Depends(get_db)):
    seeded = seed_sample(db)
    return {"seeded": seeded, "message": "Seeded." if seeded else "Already seeded."}
