from .base import BaseModel
from .user import User, ROLES
from .city import City
from .activity import Activity, ACTIVITY_TYPES
from .trip import Trip, TripCity, TripActivity, BUDGET_CATEGORIES

__all__ = [
    "BaseModel",
    "User",
    "ROLES",
    "City",
    "Activity",
    "ACTIVITY_TYPES",
    "Trip",
    "TripCity",
    "TripActivity",
    "BUDGET_CATEGORIES",
]
