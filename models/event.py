from sqlalchemy import Column, Integer, Text, TIMESTAMP, Date, Boolean, ForeignKey, Enum
from sqlalchemy.sql import func, expression
from sqlalchemy.orm import relationship

from .base import Base

EVENT_TYPES = ("repair", "modification", "story", "maintenance")


class Event(Base):
    """
    A dated journal entry against a vehicle.

    ``user_id`` is recorded at creation and is the only field consulted for
    mutation rights; it is not derived from the vehicle's owner.
    """
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(Text, nullable=False)
    detail = Column(Text, nullable=True)
    type = Column(Enum(*EVENT_TYPES, name="event_type"), nullable=False)
    date = Column(Date, nullable=False)
    odometer = Column(Integer, nullable=True)
    published = Column(Boolean, nullable=False, default=False, server_default=expression.false())
    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="events")
    vehicle = relationship("Vehicle", back_populates="events")
    comments = relationship("Comment", back_populates="event", passive_deletes=True)
    images = relationship("Image", back_populates="event", passive_deletes=True)
    likes = relationship("Like", back_populates="event", passive_deletes=True)
