from sqlalchemy import Column, String, Boolean, Date, Integer, ForeignKey, Numeric, Text
from sqlalchemy.orm import relationship
from .base import BaseModel, IdType

BUDGET_CATEGORIES = ("transport", "accommodation", "activities", "meals", "others")

# Amounts are stored to the cent so category sums stay exact
Money = Numeric(12, 2)


class Trip(BaseModel):
    __tablename__ = "trip"
    
    trip_name = Column(String(255), nullable=False)
    description = Column(Text, default="")
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    cover_photo = Column(String(500), default="")
    
    # Budget; total is always the sum of the five categories
    budget_transport = Column(Money, nullable=False, default=0)
    budget_accommodation = Column(Money, nullable=False, default=0)
    budget_activities = Column(Money, nullable=False, default=0)
    budget_meals = Column(Money, nullable=False, default=0)
    budget_others = Column(Money, nullable=False, default=0)
    budget_total = Column(Money, nullable=False, default=0)
    
    is_public = Column(Boolean, nullable=False, default=False)
    share_token = Column(String(64), unique=True, index=True, nullable=True)
    version = Column(Integer, nullable=False)
    
    # Foreign keys
    user_id = Column(IdType, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    
    # Relationships
    owner = relationship("User", back_populates="trips")
    cities = relationship(
        "TripCity",
        back_populates="trip",
        cascade="all, delete-orphan",
        order_by=lambda: [TripCity.order, TripCity.id],
    )
    activities = relationship(
        "TripActivity",
        back_populates="trip",
        cascade="all, delete-orphan",
        order_by="TripActivity.id",
    )
    
    __mapper_args__ = {"version_id_col": version}
    
    @property
    def budget(self) -> dict:
        values = {name: getattr(self, f"budget_{name}") or 0 for name in BUDGET_CATEGORIES}
        values["total"] = self.budget_total or 0
        return values


class TripCity(BaseModel):
    __tablename__ = "trip_city"
    
    arrival_date = Column(Date)
    departure_date = Column(Date)
    order = Column(Integer, default=0)
    
    # Foreign keys
    trip_id = Column(IdType, ForeignKey("trip.id", ondelete="CASCADE"), nullable=False, index=True)
    city_id = Column(IdType, ForeignKey("city.id", ondelete="CASCADE"), nullable=False, index=True)
    
    # Relationships
    trip = relationship("Trip", back_populates="cities")
    city = relationship("City")


class TripActivity(BaseModel):
    __tablename__ = "trip_activity"
    
    date = Column(Date)
    start_time = Column(String(10))
    end_time = Column(String(10))
    cost = Column(Money, nullable=False, default=0)
    notes = Column(Text)
    
    # Foreign keys; a deleted activity or city keeps the booking and its cost
    trip_id = Column(IdType, ForeignKey("trip.id", ondelete="CASCADE"), nullable=False, index=True)
    activity_id = Column(IdType, ForeignKey("activity.id", ondelete="SET NULL"), nullable=True, index=True)
    city_id = Column(IdType, ForeignKey("city.id", ondelete="SET NULL"), nullable=True)
    
    # Relationships
    trip = relationship("Trip", back_populates="activities")
    activity = relationship("Activity")
    city = relationship("City")
