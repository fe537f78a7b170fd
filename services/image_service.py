# services/image_service.py
from __future__ import annotations
from typing import Any, List, Optional

from sqlalchemy import and_, exists
from sqlalchemy.orm import Session

from models import Event, Image
from services.base import ResourceService
from services.ownership import Decision, authorize
from services.pagination import Page, by_fk


class ImageService(ResourceService):
    """
    Images have no owner column. Create and delete are allowed only to the
    user recorded on the parent event (`Event.user_id`).
    """
    model = Image
    owner_column = None
    parents = {"event_id": Event}
    create_fields = frozenset({"event_id"})
    image_field = "image"
    blob_folder = "event"

    def list_by_event(self, event_id: Any, page: Optional[Page] = None) -> List[Image]:
        return self.list(by_fk("event_id", event_id), page)

    def _owner_clause(self, caller_id: Optional[int]):
        return exists().where(
            and_(
                Event.id == Image.event_id,
                Event.user_id == caller_id,
            )
        )

    def _owner_of(self, db: Session, row: Image) -> Any:
        event = db.get(Event, row.event_id)
        return event.user_id if event else None

    def _authorize_create(self, db: Session, values: dict, caller_id: Optional[int]) -> Decision:
        event = db.get(Event, values.get("event_id")) if values.get("event_id") is not None else None
        if event is None:
            # Missing parent is reported by the FK check that follows
            return Decision.ALLOW
        return authorize(event.user_id, caller_id)
