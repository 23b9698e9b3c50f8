from sqlalchemy import Column, String, ForeignKey, Table, JSON
from sqlalchemy.orm import relationship
from tripplanner.core.database import Base
from .base import BaseModel, IdType

ROLES = ("user", "admin")

user_saved_destination = Table(
    "user_saved_destination",
    Base.metadata,
    Column("user_id", IdType, ForeignKey("user.id", ondelete="CASCADE"), primary_key=True),
    Column("city_id", IdType, ForeignKey("city.id", ondelete="CASCADE"), primary_key=True),
)


def default_preferences():
    return {"language": "en", "currency": "USD"}


class User(BaseModel):
    __tablename__ = "user"
    
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="user")  # user or admin
    profile_picture = Column(String(500), default="")
    preferences = Column(JSON, default=default_preferences)
    
    # Relationships
    trips = relationship("Trip", back_populates="owner", cascade="all, delete-orphan", passive_deletes=True)
    saved_destinations = relationship("City", secondary=user_saved_destination, order_by="City.id")
