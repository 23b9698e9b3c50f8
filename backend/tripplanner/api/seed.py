from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from tripplanner.core.database import get_db
from tripplanner.services.seed import reseed_reference_data

router = APIRouter(prefix="/seed", tags=["seed"])


class SeedResponse(BaseModel):
    message: str
    cities: int
    activities: int


@router.post("", response_model=SeedResponse)
async def seed_database(db: Session = Depends(get_db)):
    """Wipe and repopulate cities and activities. Only mounted in development."""
    counts = reseed_reference_data(db)
    return SeedResponse(message="Database seeded successfully", **counts)
