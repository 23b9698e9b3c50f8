from sqlalchemy import Column, DateTime, BigInteger, Integer
from sqlalchemy.sql import func
from tripplanner.core.database import Base

# SQLite only autoincrements INTEGER PRIMARY KEY columns
IdType = BigInteger().with_variant(Integer, "sqlite")


class BaseModel(Base):
    __abstract__ = True
    
    id = Column(IdType, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
