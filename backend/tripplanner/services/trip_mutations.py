"""Budget and itinerary consistency for trip-modifying operations.

Every write path that touches a budget category recomputes ``budget_total`` in
the same unit of work. Concurrent writers are detected with the trip's
``version`` column: a stale flush rolls back and the whole read-modify-write
is replayed against fresh state.
"""

import logging
import secrets
from decimal import Decimal
from typing import Any, Callable, Dict, Optional, Tuple, Union

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from tripplanner.core.errors import ConcurrentUpdateError, NotFoundError
from tripplanner.models import BUDGET_CATEGORIES, Trip, TripActivity, TripCity

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def get_owned_trip(db: Session, trip_id: int, owner_id: int) -> Trip:
    """Load a trip filtered jointly by id and owner.

    A trip owned by someone else is reported exactly like a missing one.
    """
    trip = db.query(Trip).filter(
        Trip.id == trip_id,
        Trip.user_id == owner_id
    ).first()
    
    if not trip:
        raise NotFoundError("Trip not found")
    
    return trip


def to_money(value: Union[Decimal, float, int, None]) -> Decimal:
    """Round an amount to the cent; floats go through their repr so 0.1 stays 0.10."""
    if value is None:
        return Decimal("0.00")
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT)


def recompute_budget_total(trip: Trip) -> Decimal:
    trip.budget_total = sum(
        (to_money(getattr(trip, f"budget_{name}")) for name in BUDGET_CATEGORIES),
        Decimal("0.00")
    )
    return trip.budget_total


def add_activity(trip: Trip, entry: TripActivity) -> TripActivity:
    entry.cost = to_money(entry.cost)
    trip.activities.append(entry)
    trip.budget_activities = to_money(trip.budget_activities) + entry.cost
    recompute_budget_total(trip)
    return entry


def remove_activity(trip: Trip, activity_id: int) -> bool:
    """Drop the first booking of ``activity_id``; a missing booking is a no-op."""
    entry = next((a for a in trip.activities if a.activity_id == activity_id), None)
    return _drop_booking(trip, entry)


def remove_booking(trip: Trip, booking_id: int) -> bool:
    """Drop one booking by its own id, also when its activity no longer exists."""
    entry = next((a for a in trip.activities if a.id == booking_id), None)
    return _drop_booking(trip, entry)


def _drop_booking(trip: Trip, entry: Optional[TripActivity]) -> bool:
    if entry is None:
        return False
    
    trip.budget_activities = to_money(trip.budget_activities) - to_money(entry.cost)
    recompute_budget_total(trip)
    trip.activities.remove(entry)
    return True


def replace_budget(trip: Trip, values: Dict[str, Any]) -> dict:
    """Overwrite all five categories; anything omitted becomes 0 and any total is ignored."""
    for name in BUDGET_CATEGORIES:
        setattr(trip, f"budget_{name}", to_money(values.get(name)))
    recompute_budget_total(trip)
    return trip.budget


def add_city(trip: Trip, entry: TripCity) -> TripCity:
    trip.cities.append(entry)
    return entry


def remove_city(trip: Trip, city_id: int) -> int:
    """Drop every stop at ``city_id``; returns how many were removed."""
    kept = [c for c in trip.cities if c.city_id != city_id]
    removed = len(trip.cities) - len(kept)
    trip.cities = kept
    return removed


def ensure_share_token(trip: Trip, nbytes: int = 16) -> str:
    """Reuse the trip's share token or mint one, and make the trip public."""
    if not trip.share_token:
        trip.share_token = secrets.token_hex(nbytes)
    trip.is_public = True
    return trip.share_token


def apply_trip_mutation(
    db: Session,
    trip_id: int,
    owner_id: int,
    mutate: Callable[[Trip], Any],
    attempts: int = 3,
) -> Tuple[Trip, Any]:
    """Run ``mutate`` on the caller's trip and commit it.

    ``mutate`` may be invoked more than once: when another request committed
    a newer version of the trip in the meantime, the session is rolled back
    and the trip is reloaded before trying again.
    """
    for attempt in range(1, attempts + 1):
        trip = get_owned_trip(db, trip_id, owner_id)
        result = mutate(trip)
        try:
            db.commit()
        except StaleDataError:
            db.rollback()
            logger.warning(
                "Concurrent update on trip %s (attempt %d/%d)", trip_id, attempt, attempts
            )
            continue
        db.refresh(trip)
        return trip, result
    
    raise ConcurrentUpdateError()
