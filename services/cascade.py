# services/cascade.py
"""
Dependent-row removal run inside the caller's transaction.

The FKs are declared ON DELETE CASCADE, but these helpers delete children
explicitly so the behaviour does not depend on the backend enforcing it.
They run before the owner-conditional delete of the parent; if that
delete matches no row the whole transaction is rolled back.

Each helper returns the blob names that belonged to removed rows; the
caller discards them after commit.
"""
from __future__ import annotations
from typing import List, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from models import Comment, Event, Image, Like, Vehicle


def purge_event_children(db: Session, event_ids: Sequence[int]) -> List[str]:
    if not event_ids:
        return []
    blobs = list(db.scalars(select(Image.image).where(Image.event_id.in_(event_ids))))
    for model in (Comment, Image, Like):
        db.query(model).filter(model.event_id.in_(event_ids)).delete(synchronize_session=False)
    return blobs


def purge_events(db: Session, event_ids: Sequence[int]) -> List[str]:
    blobs = purge_event_children(db, event_ids)
    if event_ids:
        db.query(Event).filter(Event.id.in_(event_ids)).delete(synchronize_session=False)
    return blobs


def purge_vehicle_children(db: Session, vehicle_ids: Sequence[int]) -> List[str]:
    if not vehicle_ids:
        return []
    event_ids = list(db.scalars(select(Event.id).where(Event.vehicle_id.in_(vehicle_ids))))
    return purge_events(db, event_ids)


def purge_user_children(db: Session, user_id: int) -> List[str]:
    """Vehicles (with their events), the user's own events, comments and likes."""
    vehicles = db.execute(select(Vehicle.id, Vehicle.image).where(Vehicle.user_id == user_id)).all()
    vehicle_ids = [v.id for v in vehicles]
    blobs = [v.image for v in vehicles]

    blobs += purge_vehicle_children(db, vehicle_ids)
    if vehicle_ids:
        db.query(Vehicle).filter(Vehicle.id.in_(vehicle_ids)).delete(synchronize_session=False)

    # Events this user posted against other users' vehicles
    own_events = list(db.scalars(select(Event.id).where(Event.user_id == user_id)))
    blobs += purge_events(db, own_events)

    db.query(Comment).filter(Comment.user_id == user_id).delete(synchronize_session=False)
    db.query(Like).filter(Like.user_id == user_id).delete(synchronize_session=False)
    return blobs
