# services/projections.py
"""
Plain-dict projections of ORM rows.

Every projection that can carry a User goes through `user_public`, which
drops the fields listed in `models.SENSITIVE_USER_FIELDS`.
"""
from __future__ import annotations
from datetime import date, datetime
from typing import Any, Dict, Optional

from models import Comment, Event, Image, Like, User, Vehicle, SENSITIVE_USER_FIELDS


def _iso(v: Optional[date]) -> Optional[str]:
    return v.isoformat() if isinstance(v, (date, datetime)) else None


def _stamps(row) -> Dict[str, Any]:
    return {"created_at": _iso(row.created_at), "updated_at": _iso(row.updated_at)}


def user_public(u: Optional[User]) -> Optional[Dict[str, Any]]:
    if u is None:
        return None
    data = {
        "id": u.id,
        "username": u.username,
        "email": u.email,
        "password_hash": u.password_hash,
        "first_name": u.first_name,
        "last_name": u.last_name,
        "bio": u.bio,
        **_stamps(u),
    }
    for field in SENSITIVE_USER_FIELDS:
        data.pop(field, None)
    return data


def vehicle_dict(v: Vehicle) -> Dict[str, Any]:
    return {
        "id": v.id,
        "user_id": v.user_id,
        "name": v.name,
        "make": v.make,
        "model": v.model,
        "year": v.year,
        "type": v.type,
        "image": v.image,
        **_stamps(v),
    }


def event_dict(e: Event) -> Dict[str, Any]:
    return {
        "id": e.id,
        "user_id": e.user_id,
        "vehicle_id": e.vehicle_id,
        "title": e.title,
        "detail": e.detail,
        "type": e.type,
        "date": _iso(e.date),
        "odometer": e.odometer,
        "published": bool(e.published),
        **_stamps(e),
    }


def comment_dict(c: Comment) -> Dict[str, Any]:
    return {
        "id": c.id,
        "event_id": c.event_id,
        "user_id": c.user_id,
        "content": c.content,
        **_stamps(c),
    }


def image_dict(i: Image) -> Dict[str, Any]:
    return {"id": i.id, "event_id": i.event_id, "image": i.image, **_stamps(i)}


def like_dict(l: Like) -> Dict[str, Any]:
    return {"id": l.id, "user_id": l.user_id, "event_id": l.event_id, **_stamps(l)}


_BY_TYPE = {
    User: user_public,
    Vehicle: vehicle_dict,
    Event: event_dict,
    Comment: comment_dict,
    Image: image_dict,
    Like: like_dict,
}


def project(value: Any) -> Any:
    """Project a row, a list of rows, or pass dicts/scalars through."""
    if isinstance(value, (list, tuple)):
        return [project(v) for v in value]
    fn = _BY_TYPE.get(type(value))
    return fn(value) if fn else value
