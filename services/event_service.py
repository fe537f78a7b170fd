# services/event_service.py
from __future__ import annotations
import datetime as _dt
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from models import Comment, Event, User, Vehicle, EVENT_TYPES
from services.base import MutableResourceService
from services.cascade import purge_event_children
from services.pagination import Page, by_enum, by_fk
from services.projections import (
    comment_dict,
    event_dict,
    image_dict,
    like_dict,
    user_public,
    vehicle_dict,
)

EVENT_FIELDS = frozenset({"vehicle_id", "title", "detail", "type", "date", "odometer", "published"})


def _parse_ymd(s: Any) -> _dt.date:
    if isinstance(s, _dt.datetime):
        return s.date()
    if isinstance(s, _dt.date):
        return s
    try:
        y, m, d = (int(p) for p in str(s).strip().split("-"))
        return _dt.date(y, m, d)
    except Exception:
        raise ValueError(f"Invalid date (expected YYYY-MM-DD): {s!r}")


class EventService(MutableResourceService):
    """
    Events carry their own `user_id`. Only that field decides who may mutate
    an event; owning the vehicle grants nothing.
    """
    model = Event
    owner_column = "user_id"
    parents = {"user_id": User, "vehicle_id": Vehicle}
    create_fields = EVENT_FIELDS | {"user_id"}
    update_fields = EVENT_FIELDS
    enum_fields = {"type": EVENT_TYPES}

    def _coerce(self, values: dict) -> dict:
        if "date" in values:
            values["date"] = _parse_ymd(values["date"])
        if "published" in values:
            values["published"] = bool(values["published"])
        return values

    def list_by_vehicle(self, vehicle_id: Any, page: Optional[Page] = None) -> List[Event]:
        return self.list(by_fk("vehicle_id", vehicle_id), page)

    def list_by_type(self, event_type: str, page: Optional[Page] = None) -> List[Event]:
        return self.list(by_enum("type", event_type, EVENT_TYPES), page)

    def list_by_user(self, user_id: Any, page: Optional[Page] = None) -> List[Event]:
        return self.list(by_fk("user_id", user_id), page)

    def _purge_children(self, db: Session, id: int) -> List[str]:
        return purge_event_children(db, [id])

    # ───────────── eager loads ───────────────────────────────────────────────
    @staticmethod
    def _load_with_relations(db: Session, id: int) -> Optional[Event]:
        return (
            db.query(Event)
            .options(
                joinedload(Event.vehicle),
                joinedload(Event.user),
                selectinload(Event.comments).joinedload(Comment.user),
                selectinload(Event.images),
                selectinload(Event.likes),
            )
            .filter(Event.id == id)
            .first()
        )

    def get_include_related(self, id: int) -> Optional[Dict[str, Any]]:
        with self._sessions() as db:
            e = self._load_with_relations(db, id)
            if not e:
                return None

            def newest(rows):
                return sorted(rows, key=lambda r: (r.created_at, r.id), reverse=True)

            return {
                **event_dict(e),
                "vehicle": vehicle_dict(e.vehicle) if e.vehicle else None,
                "user": user_public(e.user),
                "comments": [
                    {**comment_dict(c), "user": user_public(c.user)} for c in newest(e.comments)
                ],
                "images": [image_dict(i) for i in newest(e.images)],
                "likes": [like_dict(l) for l in newest(e.likes)],
            }
