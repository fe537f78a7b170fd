# services/base.py
from __future__ import annotations
import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.sql import func

from services.blob_service import BlobStore, DEFAULT_IMAGE, discard_blobs, store_inline_image
from services.ownership import Decision, as_user_id, authorize
from services.pagination import Filter, Page, apply
from services.results import ReferentialIntegrityError, Result

logger = logging.getLogger(__name__)

_CAMEL = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(key: str) -> str:
    return _CAMEL.sub("_", key).lower()


def _sanitize_patch(data: Mapping | None, allowed: set[str] | frozenset[str]) -> dict:
    """Return only keys present in `allowed` and non-None values. camelCase keys are accepted."""
    if not data:
        return {}
    out = {}
    for k, v in data.items():
        key = _snake(k)
        if key in allowed and v is not None:
            out[key] = v
    return out


def _payload_value(data: Mapping | None, key: str) -> Any:
    if not data:
        return None
    for k, v in data.items():
        if _snake(k) == key:
            return v
    return None


class ResourceService:
    """
    list/get/create/delete for one entity type.

    Subclasses describe the entity with class attributes:
      model          mapped class
      owner_column   column holding the owning user id (None: see _owner_clause)
      parents        FK column -> parent model, checked before anything is written
      create_fields  payload keys accepted by create
      enum_fields    column -> allowed values
      image_field    column storing a blob name fed from an inline payload
      blob_folder    folder prefix for uploaded blobs
    """
    model: Any = None
    owner_column: Optional[str] = "user_id"
    parents: Dict[str, Any] = {}
    create_fields: frozenset = frozenset()
    enum_fields: Dict[str, Sequence[str]] = {}
    image_field: Optional[str] = None
    blob_folder: str = "uploads"

    def __init__(self, session_factory: sessionmaker, blob_store: Optional[BlobStore] = None):
        self._sessions = session_factory
        self._blobs = blob_store

    @property
    def name(self) -> str:
        return self.model.__name__

    # ───────────── reads ─────────────────────────────────────────────────────
    def list(self, flt: Optional[Filter] = None, page: Optional[Page] = None) -> List[Any]:
        with self._sessions() as db:
            return apply(db.query(self.model), self.model, flt, page).all()

    def get(self, id: int) -> Optional[Any]:
        with self._sessions() as db:
            return db.get(self.model, id)

    # ───────────── hooks ─────────────────────────────────────────────────────
    def _owner_clause(self, caller_id: Optional[int]):
        return getattr(self.model, self.owner_column) == caller_id

    def _owner_of(self, db: Session, row: Any) -> Any:
        return getattr(row, self.owner_column)

    def _authorize_create(self, db: Session, values: dict, caller_id: Optional[int]) -> Decision:
        return authorize(values.get(self.owner_column), caller_id)

    def _coerce(self, values: dict) -> dict:
        return values

    def _purge_children(self, db: Session, id: int) -> List[str]:
        return []

    # ───────────── shared checks ─────────────────────────────────────────────
    def _validate_enums(self, values: dict) -> None:
        for column, allowed in self.enum_fields.items():
            if column in values and values[column] not in allowed:
                raise ValueError(f"Invalid {column}: {values[column]!r}")

    def _coerce_ids(self, values: dict) -> None:
        for column in self.parents:
            if values.get(column) is None:
                continue
            coerced = as_user_id(values[column])
            if coerced is None:
                raise ValueError(f"Invalid {column}: {values[column]!r}")
            values[column] = coerced

    def _check_parents(self, db: Session, values: dict) -> None:
        for column, parent in self.parents.items():
            if column not in values:
                continue
            if values[column] is None or db.get(parent, values[column]) is None:
                raise ReferentialIntegrityError(column, values[column])

    def _resolve_miss(self, db: Session, id: int, caller_id: Optional[int]) -> Result:
        """A conditional write touched no rows: tell NotFound from AuthorizationDenied."""
        row = db.get(self.model, id)
        if row is None:
            return Result.not_found()
        if authorize(self._owner_of(db, row), caller_id) is Decision.DENY:
            logger.warning("%s %s: caller %s is not the owner", self.name, id, caller_id)
            return Result.denied()
        # Owner matches but the row vanished between statements
        return Result.not_found()

    def _image_blob_names(self, db: Session, id: int) -> List[str]:
        if not self.image_field:
            return []
        name = db.scalar(select(getattr(self.model, self.image_field)).where(self.model.id == id))
        return [name] if name else []

    # ───────────── writes ────────────────────────────────────────────────────
    def create(self, payload: Mapping, caller_id: Any) -> Result:
        caller = as_user_id(caller_id)
        values = self._coerce(_sanitize_patch(payload, self.create_fields))
        self._validate_enums(values)
        self._coerce_ids(values)

        new_blob = None
        with self._sessions() as db:
            if self._authorize_create(db, values, caller) is Decision.DENY:
                logger.warning("%s create rejected: caller %s does not match payload owner", self.name, caller)
                return Result.denied()
            for column in self.parents:
                values.setdefault(column, None)
            self._check_parents(db, values)

            if self.image_field:
                new_blob = store_inline_image(self._blobs, _payload_value(payload, self.image_field), self.blob_folder)
                values[self.image_field] = new_blob or DEFAULT_IMAGE

            try:
                row = self.model(**values)
                db.add(row)
                db.commit()
                db.refresh(row)
            except Exception:
                db.rollback()
                if new_blob:
                    discard_blobs(self._blobs, [new_blob])
                raise

        logger.info("%s %s created by user %s", self.name, row.id, caller)
        return Result.ok(row)

    def delete(self, id: int, caller_id: Any) -> Result:
        caller = as_user_id(caller_id)
        with self._sessions() as db:
            blobs = self._purge_children(db, id) + self._image_blob_names(db, id)
            rows = (
                db.query(self.model)
                .filter(self.model.id == id, self._owner_clause(caller))
                .delete(synchronize_session=False)
            )
            if rows == 0:
                db.rollback()
                return self._resolve_miss(db, id, caller)
            db.commit()

        if self._blobs is not None:
            discard_blobs(self._blobs, blobs)
        logger.info("%s %s deleted by user %s", self.name, id, caller)
        return Result.ok(rows)


class MutableResourceService(ResourceService):
    """Adds partial update. Owner fields are never part of `update_fields`."""
    update_fields: frozenset = frozenset()

    def _deferred_columns(self) -> set:
        return set(self.parents)

    def _patch_hook(self, db: Session, id: int, deferred: dict) -> None:
        """Runs inside the transaction after the owner-conditional update matched."""

    def update(self, id: int, payload: Mapping, caller_id: Any) -> Result:
        caller = as_user_id(caller_id)
        patch = self._coerce(_sanitize_patch(payload, self.update_fields))
        self._validate_enums(patch)
        self._coerce_ids(patch)
        image_payload = _payload_value(payload, self.image_field) if self.image_field else None

        # Columns with cross-row constraints are written only after the
        # owner-conditional update matched and the hook has checked them
        deferred = {k: patch.pop(k) for k in list(patch) if k in self._deferred_columns()}

        new_blob = None
        old_blobs: List[str] = []
        with self._sessions() as db:
            if image_payload:
                # Owner pre-check before the upload; the conditional update still decides
                current = db.get(self.model, id)
                if current is None or authorize(self._owner_of(db, current), caller) is Decision.DENY:
                    db.rollback()
                    return self._resolve_miss(db, id, caller)
                old_blobs = self._image_blob_names(db, id)
                db.rollback()
                new_blob = store_inline_image(self._blobs, image_payload, self.blob_folder)
                patch[self.image_field] = new_blob

            try:
                rows = (
                    db.query(self.model)
                    .filter(self.model.id == id, self._owner_clause(caller))
                    .update({**patch, "updated_at": func.now()}, synchronize_session=False)
                )
                if rows == 0:
                    db.rollback()
                    if new_blob:
                        discard_blobs(self._blobs, [new_blob])
                    return self._resolve_miss(db, id, caller)

                self._check_parents(db, deferred)
                self._patch_hook(db, id, deferred)
                if deferred:
                    db.query(self.model).filter(self.model.id == id).update(deferred, synchronize_session=False)
                row = db.get(self.model, id, populate_existing=True)
                db.commit()
            except Exception:
                db.rollback()
                if new_blob:
                    discard_blobs(self._blobs, [new_blob])
                raise

        if new_blob and self._blobs is not None:
            discard_blobs(self._blobs, old_blobs)
        logger.info("%s %s updated by user %s (%s)", self.name, id, caller, ", ".join(sorted({**patch, **deferred})) or "no fields")
        return Result.ok(row)
