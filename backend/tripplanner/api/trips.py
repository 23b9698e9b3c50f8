import logging
import datetime
from decimal import Decimal
from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, ConfigDict, Field, model_validator
from sqlalchemy.orm import Session
from typing import List, Optional

from tripplanner.core.config import Settings
from tripplanner.core.database import get_db
from tripplanner.core.errors import NotFoundError, ValidationError
from tripplanner.models import Activity, City, Trip, TripActivity, TripCity
from tripplanner.auth.middleware import CurrentUser, get_current_user, get_settings
from tripplanner.schemas import Budget, MessageResponse, TripMessageResponse, TripResponse
from tripplanner.services import trip_mutations

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trips", tags=["trips"])

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class TripCreate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    trip_name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = ""
    start_date: datetime.date
    end_date: datetime.date
    cover_photo: Optional[str] = Field("", max_length=500)

    @model_validator(mode="after")
    def check_dates(self) -> "TripCreate":
        if self.end_date < self.start_date:
            raise ValueError("End date must be on or after start date")
        return self


class TripUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    trip_name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    start_date: Optional[datetime.date] = None
    end_date: Optional[datetime.date] = None
    cover_photo: Optional[str] = Field(None, max_length=500)
    is_public: Optional[bool] = None


class TripCityCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    city_id: int
    arrival_date: Optional[datetime.date] = None
    departure_date: Optional[datetime.date] = None
    order: Optional[int] = Field(None, ge=0)

    @model_validator(mode="after")
    def check_dates(self) -> "TripCityCreate":
        if self.arrival_date and self.departure_date and self.departure_date < self.arrival_date:
            raise ValueError("Departure date must be on or after arrival date")
        return self


class TripActivityCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    activity_id: int
    city_id: Optional[int] = None
    date: Optional[datetime.date] = None
    start_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    cost: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = None


class BudgetUpdate(BaseModel):
    """Full replacement of the five categories.

    ``total`` is accepted so a budget read from the API can be sent back as-is,
    but it is never stored; the total is always derived.
    """
    model_config = ConfigDict(extra="forbid")

    transport: Optional[Decimal] = Field(None, ge=0)
    accommodation: Optional[Decimal] = Field(None, ge=0)
    activities: Optional[Decimal] = Field(None, ge=0)
    meals: Optional[Decimal] = Field(None, ge=0)
    others: Optional[Decimal] = Field(None, ge=0)
    total: Optional[Decimal] = None


class BudgetResponse(BaseModel):
    message: str
    budget: Budget


class ShareResponse(BaseModel):
    message: str
    share_url: str
    share_token: str


def trip_message(message: str, trip: Trip) -> TripMessageResponse:
    return TripMessageResponse(message=message, trip=TripResponse.model_validate(trip))


@router.post("", response_model=TripMessageResponse, status_code=status.HTTP_201_CREATED)
async def create_trip(
    trip_data: TripCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Create a new trip owned by the caller."""
    trip = Trip(
        user_id=current_user.user_id,
        trip_name=trip_data.trip_name,
        description=trip_data.description or "",
        start_date=trip_data.start_date,
        end_date=trip_data.end_date,
        cover_photo=trip_data.cover_photo or ""
    )

    db.add(trip)
    db.commit()
    db.refresh(trip)

    return trip_message("Trip created successfully", trip)


@router.get("", response_model=List[TripResponse])
async def get_trips(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Get all trips for the caller, newest first."""
    return db.query(Trip).filter(
        Trip.user_id == current_user.user_id
    ).order_by(Trip.created_at.desc(), Trip.id.desc()).all()


@router.get("/{trip_id}", response_model=TripResponse)
async def get_trip(
    trip_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Get a single trip owned by the caller."""
    return trip_mutations.get_owned_trip(db, trip_id, current_user.user_id)


@router.put("/{trip_id}", response_model=TripMessageResponse)
async def update_trip(
    trip_id: int,
    trip_data: TripUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    settings: Settings = Depends(get_settings)
):
    """Update the descriptive fields of a trip."""
    update_data = trip_data.model_dump(exclude_unset=True)

    def apply(trip: Trip):
        for field, value in update_data.items():
            if value is not None:
                setattr(trip, field, value)
        if trip.end_date < trip.start_date:
            raise ValidationError("End date must be on or after start date")

    trip, _ = trip_mutations.apply_trip_mutation(
        db, trip_id, current_user.user_id, apply, settings.trip_update_attempts
    )
    return trip_message("Trip updated successfully", trip)


@router.delete("/{trip_id}", response_model=MessageResponse)
async def delete_trip(
    trip_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user)
):
    """Delete a trip owned by the caller."""
    trip = trip_mutations.get_owned_trip(db, trip_id, current_user.user_id)

    db.delete(trip)
    db.commit()

    return {"message": "Trip deleted successfully"}


@router.post("/{trip_id}/cities", response_model=TripMessageResponse)
async def add_city_to_trip(
    trip_id: int,
    city_data: TripCityCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    settings: Settings = Depends(get_settings)
):
    """Append a city stop to the trip's itinerary."""
    # Ownership first so a foreign trip id never reveals anything
    trip_mutations.get_owned_trip(db, trip_id, current_user.user_id)
    if not db.query(City).filter(City.id == city_data.city_id).first():
        raise NotFoundError("City not found")

    def apply(trip: Trip):
        order = city_data.order if city_data.order is not None else len(trip.cities)
        trip_mutations.add_city(trip, TripCity(
            city_id=city_data.city_id,
            arrival_date=city_data.arrival_date,
            departure_date=city_data.departure_date,
            order=order
        ))

    trip, _ = trip_mutations.apply_trip_mutation(
        db, trip_id, current_user.user_id, apply, settings.trip_update_attempts
    )
    return trip_message("City added to trip", trip)


@router.delete("/{trip_id}/cities/{city_id}", response_model=TripMessageResponse)
async def remove_city_from_trip(
    trip_id: int,
    city_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    settings: Settings = Depends(get_settings)
):
    """Remove every stop at a city from the trip's itinerary."""
    trip, _ = trip_mutations.apply_trip_mutation(
        db,
        trip_id,
        current_user.user_id,
        lambda trip: trip_mutations.remove_city(trip, city_id),
        settings.trip_update_attempts
    )
    return trip_message("City removed from trip", trip)


@router.post("/{trip_id}/activities", response_model=TripMessageResponse)
async def add_activity_to_trip(
    trip_id: int,
    activity_data: TripActivityCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    settings: Settings = Depends(get_settings)
):
    """Book an activity on the trip and charge its cost to the budget."""
    trip_mutations.get_owned_trip(db, trip_id, current_user.user_id)
    activity = db.query(Activity).filter(Activity.id == activity_data.activity_id).first()
    if not activity:
        raise NotFoundError("Activity not found")
    if activity_data.city_id is not None and not db.query(City).filter(City.id == activity_data.city_id).first():
        raise NotFoundError("City not found")

    def apply(trip: Trip):
        trip_mutations.add_activity(trip, TripActivity(
            activity_id=activity.id,
            city_id=activity_data.city_id if activity_data.city_id is not None else activity.city_id,
            date=activity_data.date,
            start_time=activity_data.start_time,
            end_time=activity_data.end_time,
            cost=activity_data.cost or 0,
            notes=activity_data.notes
        ))

    trip, _ = trip_mutations.apply_trip_mutation(
        db, trip_id, current_user.user_id, apply, settings.trip_update_attempts
    )
    return trip_message("Activity added to trip", trip)


@router.delete("/{trip_id}/activities/{activity_id}", response_model=TripMessageResponse)
async def remove_activity_from_trip(
    trip_id: int,
    activity_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    settings: Settings = Depends(get_settings)
):
    """Remove a booked activity and refund its cost; unknown bookings are ignored."""
    trip, removed = trip_mutations.apply_trip_mutation(
        db,
        trip_id,
        current_user.user_id,
        lambda trip: trip_mutations.remove_activity(trip, activity_id),
        settings.trip_update_attempts
    )
    if not removed:
        logger.debug("Activity %s not booked on trip %s", activity_id, trip_id)
    return trip_message("Activity removed from trip", trip)


@router.delete("/{trip_id}/bookings/{booking_id}", response_model=TripMessageResponse)
async def remove_booking_from_trip(
    trip_id: int,
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    settings: Settings = Depends(get_settings)
):
    """Remove one booking by id and refund its cost, even if its activity was deleted."""
    trip, removed = trip_mutations.apply_trip_mutation(
        db,
        trip_id,
        current_user.user_id,
        lambda trip: trip_mutations.remove_booking(trip, booking_id),
        settings.trip_update_attempts
    )
    if not removed:
        raise NotFoundError("Booking not found")
    return trip_message("Booking removed from trip", trip)


@router.put("/{trip_id}/budget", response_model=BudgetResponse)
async def update_budget(
    trip_id: int,
    budget_data: BudgetUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    settings: Settings = Depends(get_settings)
):
    """Replace the trip budget wholesale."""
    values = budget_data.model_dump()
    trip, _ = trip_mutations.apply_trip_mutation(
        db,
        trip_id,
        current_user.user_id,
        lambda trip: trip_mutations.replace_budget(trip, values),
        settings.trip_update_attempts
    )
    return BudgetResponse(message="Budget updated successfully", budget=trip.budget)


@router.post("/{trip_id}/share", response_model=ShareResponse)
async def share_trip(
    trip_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
    settings: Settings = Depends(get_settings)
):
    """Make a trip public and return its share link."""
    trip, token = trip_mutations.apply_trip_mutation(
        db,
        trip_id,
        current_user.user_id,
        lambda trip: trip_mutations.ensure_share_token(trip, settings.share_token_bytes),
        settings.trip_update_attempts
    )

    logger.info("Trip shared", extra={"trip_id": trip.id, "user_id": current_user.user_id})
    return ShareResponse(
        message="Trip is now public",
        share_url=f"{request.base_url}shared/{token}",
        share_token=token
    )
