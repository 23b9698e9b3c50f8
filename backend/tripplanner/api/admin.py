import logging
from datetime import datetime, timedelta, timezone
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session
from typing import List

from tripplanner.core.database import get_db
from tripplanner.core.errors import NotFoundError, ValidationError
from tripplanner.models import Activity, City, Trip, User
from tripplanner.auth.middleware import CurrentUser, require_admin
from tripplanner.schemas import CityResponse, MessageResponse, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])

RECENT_TRIPS_DAYS = 30
TOP_N = 10


class StatsResponse(BaseModel):
    total_users: int
    total_trips: int
    total_cities: int
    total_activities: int
    recent_trips: int
    popular_cities: List[CityResponse]
    recent_users: List[UserResponse]


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
):
    """Platform-wide counts for the admin dashboard."""
    since = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(days=RECENT_TRIPS_DAYS)
    
    return StatsResponse(
        total_users=db.query(User).count(),
        total_trips=db.query(Trip).count(),
        total_cities=db.query(City).count(),
        total_activities=db.query(Activity).count(),
        recent_trips=db.query(Trip).filter(Trip.created_at >= since).count(),
        popular_cities=[
            CityResponse.model_validate(city)
            for city in db.query(City).order_by(City.popularity.desc()).limit(TOP_N).all()
        ],
        recent_users=[
            UserResponse.model_validate(user)
            for user in db.query(User).order_by(User.created_at.desc(), User.id.desc()).limit(TOP_N).all()
        ]
    )


@router.get("/users", response_model=List[UserResponse])
async def get_users(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
):
    """All users, newest first."""
    return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
):
    """Delete a user and all of their trips."""
    if user_id == current_user.user_id:
        raise ValidationError("Cannot delete your own account")
    
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    
    db.delete(user)
    db.commit()
    
    logger.warning("User deleted by admin", extra={"user_id": user_id, "admin_id": current_user.user_id})
    return {"message": "User deleted successfully"}
