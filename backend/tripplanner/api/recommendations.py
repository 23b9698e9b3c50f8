from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from tripplanner.core.config import Settings
from tripplanner.core.database import get_db
from tripplanner.auth.middleware import CurrentUser, get_current_user, get_settings
from tripplanner.schemas import CityResponse
from tripplanner.services.recommendations import recommend_destinations

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


@router.get("/destinations", response_model=List[CityResponse])
async def get_destination_recommendations(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    settings: Settings = Depends(get_settings)
):
    """Popular cities the caller has not added to any trip."""
    return recommend_destinations(db, current_user.user_id, settings.recommendation_limit)
