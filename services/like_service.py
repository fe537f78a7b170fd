# services/like_service.py
from __future__ import annotations
import logging
from typing import Any, List, Mapping, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from models import Event, Like, User
from services.base import ResourceService, _sanitize_patch
from services.ownership import Decision, as_user_id
from services.pagination import Page, by_fk
from services.results import Result

logger = logging.getLogger(__name__)


class LikeService(ResourceService):
    """
    One like per (user, event). Creating a like that already exists is a
    no-op: the existing row comes back as a success.
    """
    model = Like
    owner_column = "user_id"
    parents = {"user_id": User, "event_id": Event}
    create_fields = frozenset({"user_id", "event_id"})

    def list_by_event(self, event_id: Any, page: Optional[Page] = None) -> List[Like]:
        return self.list(by_fk("event_id", event_id), page)

    def list_by_user(self, user_id: Any, page: Optional[Page] = None) -> List[Like]:
        return self.list(by_fk("user_id", user_id), page)

    def count_for_event(self, event_id: int) -> int:
        with self._sessions() as db:
            return db.query(func.count(Like.id)).filter(Like.event_id == event_id).scalar() or 0

    def _existing(self, db, user_id: int, event_id: int) -> Optional[Like]:
        return db.query(Like).filter(Like.user_id == user_id, Like.event_id == event_id).first()

    def create(self, payload: Mapping, caller_id: Any) -> Result:
        caller = as_user_id(caller_id)
        values = _sanitize_patch(payload, self.create_fields)
        self._coerce_ids(values)

        with self._sessions() as db:
            if self._authorize_create(db, values, caller) is Decision.DENY:
                logger.warning("Like create rejected: caller %s does not match payload owner", caller)
                return Result.denied()
            for column in self.parents:
                values.setdefault(column, None)
            self._check_parents(db, values)

            existing = self._existing(db, values["user_id"], values["event_id"])
            if existing:
                return Result.ok(existing)

            try:
                row = Like(**values)
                db.add(row)
                db.commit()
                db.refresh(row)
            except IntegrityError:
                # Lost a race with an identical insert
                db.rollback()
                existing = self._existing(db, values["user_id"], values["event_id"])
                if existing is None:
                    raise
                return Result.ok(existing)

        logger.info("Like %s created by user %s on event %s", row.id, caller, row.event_id)
        return Result.ok(row)
