# services/registry.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import sessionmaker

from services.blob_service import AzureBlobStore, BlobStore
from services.comment_service import CommentService
from services.event_service import EventService
from services.image_service import ImageService
from services.like_service import LikeService
from services.user_service import UserService
from services.vehicle_service import VehicleService


@dataclass(frozen=True)
class JournalServices:
    users: UserService
    vehicles: VehicleService
    events: EventService
    comments: CommentService
    images: ImageService
    likes: LikeService


def build_services(
    session_factory: Optional[sessionmaker] = None,
    blob_store: Optional[BlobStore] = None,
) -> JournalServices:
    """Wire every resource service to one storage context and one blob store."""
    if session_factory is None:
        from db import default_session_factory
        session_factory = default_session_factory()
    if blob_store is None:
        blob_store = AzureBlobStore.from_env()
    return JournalServices(
        users=UserService(session_factory, blob_store),
        vehicles=VehicleService(session_factory, blob_store),
        events=EventService(session_factory, blob_store),
        comments=CommentService(session_factory, blob_store),
        images=ImageService(session_factory, blob_store),
        likes=LikeService(session_factory, blob_store),
    )
