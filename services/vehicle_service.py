# services/vehicle_service.py
from __future__ import annotations
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from models import Event, User, Vehicle, VEHICLE_TYPES
from services.base import MutableResourceService
from services.cascade import purge_vehicle_children
from services.pagination import Page, by_enum, by_fk
from services.projections import event_dict, user_public, vehicle_dict

VEHICLE_FIELDS = frozenset({"name", "make", "model", "year", "type"})


class VehicleService(MutableResourceService):
    model = Vehicle
    owner_column = "user_id"
    parents = {"user_id": User}
    create_fields = VEHICLE_FIELDS | {"user_id"}
    update_fields = VEHICLE_FIELDS
    enum_fields = {"type": VEHICLE_TYPES}
    image_field = "image"
    blob_folder = "vehicle"

    def list_by_user(self, user_id: Any, page: Optional[Page] = None) -> List[Vehicle]:
        return self.list(by_fk("user_id", user_id), page)

    def list_by_type(self, vehicle_type: str, page: Optional[Page] = None) -> List[Vehicle]:
        return self.list(by_enum("type", vehicle_type, VEHICLE_TYPES), page)

    def _purge_children(self, db: Session, id: int) -> List[str]:
        return purge_vehicle_children(db, [id])

    # ───────────── eager loads ───────────────────────────────────────────────
    @staticmethod
    def _load_with_owner_and_events(db: Session, id: int) -> Optional[Vehicle]:
        return (
            db.query(Vehicle)
            .options(joinedload(Vehicle.user), selectinload(Vehicle.events))
            .filter(Vehicle.id == id)
            .first()
        )

    def get_include_related(self, id: int) -> Optional[Dict[str, Any]]:
        """Vehicle with its owner (credentials and email stripped) and its events, newest first."""
        with self._sessions() as db:
            v = self._load_with_owner_and_events(db, id)
            if not v:
                return None
            events = sorted(v.events, key=lambda e: (e.created_at, e.id), reverse=True)
            return {
                **vehicle_dict(v),
                "user": user_public(v.user),
                "events": [event_dict(e) for e in events],
            }
