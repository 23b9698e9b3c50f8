from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from tripplanner.core.database import get_db
from tripplanner.core.errors import NotFoundError
from tripplanner.models import Trip
from tripplanner.schemas import SharedTripResponse

router = APIRouter(prefix="/shared", tags=["shared"])


@router.get("/{token}", response_model=SharedTripResponse)
async def get_shared_trip(token: str, db: Session = Depends(get_db)):
    """Public read-only view of a trip shared by link."""
    trip = db.query(Trip).filter(
        Trip.share_token == token,
        Trip.is_public == True
    ).first()
    
    if not trip:
        raise NotFoundError("Trip not found or not public")
    
    return trip
