from sqlalchemy import Column, Integer, Text, TIMESTAMP, ForeignKey, Enum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from .base import Base

VEHICLE_TYPES = ("car", "truck", "suv", "motorcycle", "van", "other")


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(Text, nullable=True)
    make = Column(Text, nullable=True)
    model = Column(Text, nullable=True)
    year = Column(Integer, nullable=True)
    type = Column(Enum(*VEHICLE_TYPES, name="vehicle_type"), nullable=False)
    image = Column(Text, nullable=False)  # blob name, 'default.png' when none uploaded
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="vehicles")
    events = relationship("Event", back_populates="vehicle", passive_deletes=True)
