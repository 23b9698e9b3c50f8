import logging
from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session
from typing import List, Optional

from tripplanner.core.database import get_db
from tripplanner.core.errors import NotFoundError
from tripplanner.models import City
from tripplanner.auth.middleware import CurrentUser, require_admin
from tripplanner.schemas import CityResponse, MessageResponse
from tripplanner.services.filters import build_city_filters, filter_by_tags, parse_tags

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cities", tags=["cities"])


class CityCreate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255, description="City name")
    country: str = Field(..., min_length=1, max_length=100, description="Country")
    description: Optional[str] = Field("", description="Description")
    image_url: Optional[str] = Field("", max_length=500)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    cost_index: int = Field(3, ge=1, le=5, description="1 (cheap) to 5 (expensive)")
    popularity: int = Field(0, ge=0)
    tags: List[str] = Field(default_factory=list, description="Tags")
    best_time_to_visit: Optional[str] = None
    currency: Optional[str] = Field(None, max_length=10)
    timezone: Optional[str] = Field(None, max_length=50)


class CityUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    country: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=500)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    cost_index: Optional[int] = Field(None, ge=1, le=5)
    popularity: Optional[int] = Field(None, ge=0)
    tags: Optional[List[str]] = None
    best_time_to_visit: Optional[str] = None
    currency: Optional[str] = Field(None, max_length=10)
    timezone: Optional[str] = Field(None, max_length=50)


class CityMessageResponse(BaseModel):
    message: str
    city: CityResponse


def get_city_or_404(db: Session, city_id: int) -> City:
    city = db.query(City).filter(City.id == city_id).first()
    if not city:
        raise NotFoundError("City not found")
    return city


@router.get("", response_model=List[CityResponse])
async def get_cities(
    country: Optional[str] = None,
    cost_index: Optional[int] = Query(None, ge=1, le=5),
    tags: Optional[str] = Query(None, description="Comma-separated; matches any"),
    search: Optional[str] = Query(None, description="Case-insensitive match on name or country"),
    db: Session = Depends(get_db)
):
    """List cities, most popular first."""
    criteria = build_city_filters(country=country, cost_index=cost_index, search=search)
    cities = db.query(City).filter(*criteria).order_by(City.popularity.desc()).all()
    return filter_by_tags(cities, parse_tags(tags))


@router.get("/{city_id}", response_model=CityResponse)
async def get_city(city_id: int, db: Session = Depends(get_db)):
    """Get a specific city by ID."""
    return get_city_or_404(db, city_id)


@router.post("", response_model=CityMessageResponse, status_code=status.HTTP_201_CREATED)
async def create_city(
    city_data: CityCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
):
    """Create a new city (admin only)."""
    city = City(**city_data.model_dump())
    
    db.add(city)
    db.commit()
    db.refresh(city)
    
    logger.info("City created", extra={"city_id": city.id, "user_id": current_user.user_id})
    return CityMessageResponse(message="City created successfully", city=CityResponse.model_validate(city))


@router.put("/{city_id}", response_model=CityMessageResponse)
async def update_city(
    city_id: int,
    city_data: CityUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
):
    """Update a city (admin only)."""
    city = get_city_or_404(db, city_id)
    
    # Update fields
    update_data = city_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is not None:
            setattr(city, field, value)
    
    db.commit()
    db.refresh(city)
    
    return CityMessageResponse(message="City updated successfully", city=CityResponse.model_validate(city))


@router.delete("/{city_id}", response_model=MessageResponse)
async def delete_city(
    city_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin)
):
    """Delete a city and its activities (admin only)."""
    city = get_city_or_404(db, city_id)
    
    db.delete(city)
    db.commit()
    
    logger.info("City deleted", extra={"city_id": city_id, "user_id": current_user.user_id})
    return {"message": "City deleted successfully"}
