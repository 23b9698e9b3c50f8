"""Response models shared by several routers.

Request bodies live next to the route that accepts them.
"""

import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    country: str
    description: Optional[str] = ""
    image_url: Optional[str] = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    cost_index: int
    popularity: int
    tags: List[str] = Field(default_factory=list)
    best_time_to_visit: Optional[str] = None
    currency: Optional[str] = None
    timezone: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None


class CitySummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    country: str
    image_url: Optional[str] = ""


class ActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    city_id: int
    name: str
    description: Optional[str] = ""
    type: str
    duration: float
    estimated_cost: float
    image_url: Optional[str] = ""
    location: Optional[str] = None
    rating: float
    tags: List[str] = Field(default_factory=list)
    city: Optional[CitySummary] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None


class ActivitySummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    type: str
    estimated_cost: float
    rating: float


class Budget(BaseModel):
    transport: float = 0
    accommodation: float = 0
    activities: float = 0
    meals: float = 0
    others: float = 0
    total: float = 0


class TripCityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    city_id: int
    arrival_date: Optional[datetime.date] = None
    departure_date: Optional[datetime.date] = None
    order: Optional[int] = None
    city: Optional[CitySummary] = None


class TripActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    activity_id: Optional[int] = None
    city_id: Optional[int] = None
    date: Optional[datetime.date] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    cost: float = 0
    notes: Optional[str] = None
    activity: Optional[ActivitySummary] = None


class TripResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    trip_name: str
    description: Optional[str] = ""
    start_date: datetime.date
    end_date: datetime.date
    cover_photo: Optional[str] = ""
    cities: List[TripCityResponse] = Field(default_factory=list)
    activities: List[TripActivityResponse] = Field(default_factory=list)
    budget: Budget
    is_public: bool
    share_token: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None


class TripMessageResponse(BaseModel):
    message: str
    trip: TripResponse


class OwnerSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str


class SharedTripResponse(BaseModel):
    """Public view of a shared trip; the owner is exposed by name only."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    trip_name: str
    description: Optional[str] = ""
    start_date: datetime.date
    end_date: datetime.date
    cover_photo: Optional[str] = ""
    cities: List[TripCityResponse] = Field(default_factory=list)
    activities: List[TripActivityResponse] = Field(default_factory=list)
    budget: Budget
    owner: Optional[OwnerSummary] = None


class Preferences(BaseModel):
    language: str = "en"
    currency: str = "USD"


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: str
    profile_picture: Optional[str] = ""
    preferences: Preferences = Field(default_factory=Preferences)
    created_at: Optional[datetime.datetime] = None


class ProfileResponse(UserResponse):
    saved_destinations: List[CitySummary] = Field(default_factory=list)


class MessageResponse(BaseModel):
    message: str
