# services/user_service.py
from __future__ import annotations
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.orm import Session, selectinload

from auth.utils import hash_password
from models import User
from services.base import MutableResourceService, _sanitize_patch
from services.cascade import purge_user_children
from services.ownership import Decision
from services.projections import user_public, vehicle_dict
from services.results import DuplicateUserError, Result

PROFILE_FIELDS = frozenset({"username", "email", "password", "first_name", "last_name", "bio"})


class UserService(MutableResourceService):
    """
    Registration and profile management. A user row is owned by itself:
    only the user may update or delete it. Deleting a user removes their
    vehicles (with every event on them), their events, comments and likes.
    """
    model = User
    owner_column = "id"
    create_fields = PROFILE_FIELDS
    update_fields = PROFILE_FIELDS

    def _coerce(self, values: dict) -> dict:
        if "email" in values:
            values["email"] = str(values["email"]).strip().lower()
        if "username" in values:
            values["username"] = str(values["username"]).strip()
        if "password" in values:
            values["password_hash"] = hash_password(str(values.pop("password")))
        return values

    def _authorize_create(self, db: Session, values: dict, caller_id: Optional[int]) -> Decision:
        # Registration: there is no owner yet
        return Decision.ALLOW

    def _deferred_columns(self) -> set:
        return {"username", "email"}

    @staticmethod
    def _check_unique(db: Session, values: dict, exclude_id: Optional[int] = None) -> None:
        for field in ("username", "email"):
            if field not in values:
                continue
            q = db.query(User.id).filter(getattr(User, field) == values[field])
            if exclude_id is not None:
                q = q.filter(User.id != exclude_id)
            if q.first():
                raise DuplicateUserError(field, values[field])

    def _patch_hook(self, db: Session, id: int, deferred: dict) -> None:
        self._check_unique(db, deferred, exclude_id=id)

    def _purge_children(self, db: Session, id: int) -> List[str]:
        return purge_user_children(db, id)

    def create(self, payload: Mapping, caller_id: Any = None) -> Result:
        probe = self._coerce(_sanitize_patch(payload, {"username", "email"}))
        with self._sessions() as db:
            self._check_unique(db, probe)
        return super().create(payload, caller_id)

    def get_by_username(self, username: str) -> Optional[User]:
        with self._sessions() as db:
            return db.query(User).filter(User.username == username.strip()).first()

    def get_include_related(self, id: int) -> Optional[Dict[str, Any]]:
        with self._sessions() as db:
            u = (
                db.query(User)
                .options(selectinload(User.vehicles))
                .filter(User.id == id)
                .first()
            )
            if not u:
                return None
            vehicles = sorted(u.vehicles, key=lambda v: (v.created_at, v.id), reverse=True)
            return {**user_public(u), "vehicles": [vehicle_dict(v) for v in vehicles]}
