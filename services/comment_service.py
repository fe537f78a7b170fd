# services/comment_service.py
from __future__ import annotations
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import joinedload

from models import Comment, Event, User
from services.base import MutableResourceService
from services.pagination import Page, by_fk
from services.projections import comment_dict, event_dict, user_public


class CommentService(MutableResourceService):
    model = Comment
    owner_column = "user_id"
    parents = {"user_id": User, "event_id": Event}
    create_fields = frozenset({"event_id", "user_id", "content"})
    update_fields = frozenset({"content"})

    def list_by_event(self, event_id: Any, page: Optional[Page] = None) -> List[Comment]:
        return self.list(by_fk("event_id", event_id), page)

    def list_by_user(self, user_id: Any, page: Optional[Page] = None) -> List[Comment]:
        return self.list(by_fk("user_id", user_id), page)

    def get_include_related(self, id: int) -> Optional[Dict[str, Any]]:
        with self._sessions() as db:
            c = (
                db.query(Comment)
                .options(joinedload(Comment.user), joinedload(Comment.event))
                .filter(Comment.id == id)
                .first()
            )
            if not c:
                return None
            return {
                **comment_dict(c),
                "user": user_public(c.user),
                "event": event_dict(c.event) if c.event else None,
            }
