from sqlalchemy import Column, String, Float, ForeignKey, Text, JSON, CheckConstraint
from sqlalchemy.orm import relationship
from .base import BaseModel, IdType

ACTIVITY_TYPES = ("sightseeing", "adventure", "food", "culture", "relaxation", "shopping", "nightlife")


class Activity(BaseModel):
    __tablename__ = "activity"
    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_activity_rating"),
    )
    
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, default="")
    type = Column(String(50), nullable=False, default="sightseeing", index=True)
    duration = Column(Float, nullable=False, default=2)  # hours
    estimated_cost = Column(Float, nullable=False, default=0)
    image_url = Column(String(500), default="")
    location = Column(String(255))
    rating = Column(Float, nullable=False, default=4)
    tags = Column(JSON, default=list)
    
    # Foreign keys
    city_id = Column(IdType, ForeignKey("city.id", ondelete="CASCADE"), nullable=False, index=True)
    
    # Relationships
    city = relationship("City", back_populates="activities")
