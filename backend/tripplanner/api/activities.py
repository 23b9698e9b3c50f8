from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session
from typing import List, Literal, Optional

from tripplanner.core.database import get_db
from tripplanner.core.errors import NotFoundError, ValidationError
from tripplanner.models import Activity, City
from tripplanner.auth.middleware import CurrentUser, require_admin
from tripplanner.schemas import ActivityResponse, MessageResponse
from tripplanner.services.filters import build_activity_filters

router = APIRouter(prefix="/activities", tags=["activities"])

ActivityType = Literal["sightseeing", "adventure", "food", "culture", "relaxation", "shopping", "nightlife"]


class ActivityCreate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    city_id: int
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = ""
    type: ActivityType = "sightseeing"
    duration: float = Field(2, gt=0, description="Duration in hours")
    estimated_cost: float = Field(0, ge=0)
    image_url: Optional[str] = Field("", max_length=500)
    location: Optional[str] = Field(None, max_length=255)
    rating: float = Field(4, ge=1, le=5)
    tags: List[str] = Field(default_factory=list)


class ActivityUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    city_id: Optional[int] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    type: Optional[ActivityType] = None
    duration: Optional[float] = Field(None, gt=0)
    estimated_cost: Optional[float] = Field(None, ge=0)
    image_url: Optional[str] = Field(None, max_length=500)
    location: Optional[str] = Field(None, max_length=255)
    rating: Optional[float] = Field(None, ge=1, le=5)
    tags: Optional[List[str]] = None


class ActivityMessageResponse(BaseModel):
    message: str
    activity: ActivityResponse


def ensure_city_exists(db: Session, city_id: int):
    if not db.query(City).filter(City.id == city_id).first():
        raise NotFoundError("City not found")


def get_activity_or_404(db: Session, activity_id: int) -> Activity:
    activity = db.query(Activity).filter(Activity.id == activity_id).first()
    if not activity:
        raise NotFoundError("Activity not found")
    return activity


@router.get("", response_model=List[ActivityResponse])
async def get_activities(
    city_id: Optional[int] = None,
    type: Optional[ActivityType] = None,
    min_cost: Optional[float] = Query(None, ge=0),
    max_cost: Optional[float] = Query(None, ge=0),
    search: Optional[str] = Query(None, description="Case-insensitive match on name"),
    db: Session = Depends(get_db)
):
    """List activities matching every supplied filter."""
    if min_cost is not None and max_cost is not None and min_cost > max_cost:
        raise ValidationError("min_cost must not exceed max_cost")
    
    criteria = build_activity_filters(
        city_id=city_id,
        activity_type=type,
        min_cost=min_cost,
        max_cost=max_cost,
        search=search
    )
    return db.query(Activity).filter(*criteria).all()


@router.get("/{activity_id}", response_model=ActivityResponse)
async def get_activity(activity_id: int, db: Session = Depends(get_db)):
    """Get a specific activity by ID."""
    return get_activity_or_404(db, activity_id)


@router.post("", response_model=ActivityMessageResponse, status_code=status.HTTP_201_CREATED)
async def create_activity(
    activity_data: ActivityCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
):
    """Create a new activity (admin only)."""
    ensure_city_exists(db, activity_data.city_id)
    
    activity = Activity(**activity_data.model_dump())
    db.add(activity)
    db.commit()
    db.refresh(activity)
    
    return ActivityMessageResponse(
        message="Activity created successfully",
        activity=ActivityResponse.model_validate(activity)
    )


@router.put("/{activity_id}", response_model=ActivityMessageResponse)
async def update_activity(
    activity_id: int,
    activity_data: ActivityUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
):
    """Update an activity (admin only)."""
    activity = get_activity_or_404(db, activity_id)
    
    update_data = {k: v for k, v in activity_data.model_dump(exclude_unset=True).items() if v is not None}
    if "city_id" in update_data:
        ensure_city_exists(db, update_data["city_id"])
    
    for field, value in update_data.items():
        setattr(activity, field, value)
    
    db.commit()
    db.refresh(activity)
    
    return ActivityMessageResponse(
        message="Activity updated successfully",
        activity=ActivityResponse.model_validate(activity)
    )


@router.delete("/{activity_id}", response_model=MessageResponse)
async def delete_activity(
    activity_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
):
    """Delete an activity (admin only); trip bookings keep their cost."""
    activity = get_activity_or_404(db, activity_id)
    
    db.delete(activity)
    db.commit()
    
    return {"message": "Activity deleted successfully"}
