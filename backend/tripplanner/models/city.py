from sqlalchemy import Column, String, Float, Integer, Text, JSON, CheckConstraint
from sqlalchemy.orm import relationship
from .base import BaseModel


class City(BaseModel):
    __tablename__ = "city"
    __table_args__ = (
        CheckConstraint("cost_index BETWEEN 1 AND 5", name="ck_city_cost_index"),
    )
    
    name = Column(String(255), nullable=False, index=True)
    country = Column(String(100), nullable=False, index=True)
    description = Column(Text, default="")
    image_url = Column(String(500), default="")
    latitude = Column(Float)
    longitude = Column(Float)
    cost_index = Column(Integer, nullable=False, default=3)  # 1 (cheap) to 5 (expensive)
    popularity = Column(Integer, nullable=False, default=0)
    tags = Column(JSON, default=list)  # e.g. ["romantic", "historic", "food"]
    best_time_to_visit = Column(String(255))
    currency = Column(String(10))
    timezone = Column(String(50))
    
    # Relationships
    activities = relationship("Activity", back_populates="city", cascade="all, delete-orphan", passive_deletes=True)
