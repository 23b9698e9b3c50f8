import logging
from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session
from typing import List, Optional
from tripplanner.core.database import get_db
from tripplanner.core.errors import NotFoundError
from tripplanner.models import City, User
from tripplanner.auth.middleware import get_current_user, CurrentUser
from tripplanner.schemas import MessageResponse, ProfileResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


class PreferencesUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    language: Optional[str] = Field(None, min_length=2, max_length=10)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)


class ProfileUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    profile_picture: Optional[str] = Field(None, max_length=500)
    preferences: Optional[PreferencesUpdate] = None
    saved_destinations: Optional[List[int]] = None


class ProfileUpdateResponse(BaseModel):
    message: str
    user: ProfileResponse


def get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Get the caller's profile including saved destinations."""
    return get_user_or_404(db, current_user.user_id)


@router.put("/profile", response_model=ProfileUpdateResponse)
async def update_profile(
    profile_data: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Update name, picture, preferences and the saved-destination set."""
    user = get_user_or_404(db, current_user.user_id)
    
    if profile_data.name is not None:
        user.name = profile_data.name
    if profile_data.profile_picture is not None:
        user.profile_picture = profile_data.profile_picture
    if profile_data.preferences is not None:
        # Merge into a new dict so the JSON column sees the change
        preferences = dict(user.preferences or {})
        preferences.update(profile_data.preferences.model_dump(exclude_none=True))
        user.preferences = preferences
    
    if profile_data.saved_destinations is not None:
        city_ids = list(dict.fromkeys(profile_data.saved_destinations))
        cities = db.query(City).filter(City.id.in_(city_ids)).all() if city_ids else []
        if len(cities) != len(city_ids):
            raise NotFoundError("City not found")
        user.saved_destinations = cities
    
    db.commit()
    db.refresh(user)
    
    return ProfileUpdateResponse(
        message="Profile updated successfully",
        user=ProfileResponse.model_validate(user)
    )


@router.delete("/profile", response_model=MessageResponse)
async def delete_account(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Delete the caller's account and every trip they own."""
    user = get_user_or_404(db, current_user.user_id)
    
    db.delete(user)
    db.commit()
    
    logger.info("Account deleted", extra={"user_id": current_user.user_id})
    return {"message": "Account deleted successfully"}
