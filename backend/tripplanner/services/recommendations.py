from typing import List
from sqlalchemy.orm import Session
from tripplanner.models import City, Trip, TripCity


def visited_city_ids(db: Session, user_id: int) -> List[int]:
    """Distinct cities appearing in any of the user's trips."""
    rows = db.query(TripCity.city_id).join(Trip, Trip.id == TripCity.trip_id).filter(
        Trip.user_id == user_id
    ).distinct().all()
    return [row[0] for row in rows]


def recommend_destinations(db: Session, user_id: int, limit: int = 6) -> List[City]:
    """Most popular cities the user has not planned a visit to yet.

    Cities with equal popularity come back in whatever order the store
    yields them; that order is not stable between calls.
    """
    query = db.query(City)
    
    visited = visited_city_ids(db, user_id)
    if visited:
        query = query.filter(City.id.notin_(visited))
    
    return query.order_by(City.popularity.desc()).limit(limit).all()
