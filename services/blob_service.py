# services/blob_service.py
import base64
import binascii
import io
import logging
import mimetypes
import os
import uuid
from typing import Optional, Protocol, Tuple

from azure.storage.blob import BlobServiceClient, ContentSettings
from PIL import Image as PILImage, UnidentifiedImageError

logger = logging.getLogger(__name__)

# ────────────────────────────────────────────────────────────
# Config
# ────────────────────────────────────────────────────────────
_CONN_STR = os.environ.get("AZURE_BLOB_CONN_STRING")
_DEFAULT_CONTAINER = os.environ.get("AZURE_BLOB_CONTAINER", "ride-journal-images")
DEFAULT_IMAGE = os.environ.get("DEFAULT_VEHICLE_IMAGE", "default.png")

ALLOWED_CONTENT = {"image/jpeg", "image/png", "image/webp", "image/gif"}
_PIL_FORMATS = {"JPEG": "image/jpeg", "PNG": "image/png", "WEBP": "image/webp", "GIF": "image/gif"}


class BadImagePayload(ValueError):
    """Inline image payload could not be decoded into a supported image."""


class BlobStore(Protocol):
    def save_image(self, data: bytes, content_type: str, folder: str) -> str: ...
    def delete(self, blob_name: str) -> None: ...


# ────────────────────────────────────────────────────────────
# Helpers
# ────────────────────────────────────────────────────────────
def _guess_ext(content_type: str, fallback: str = ".bin") -> str:
    if content_type == "image/jpeg":
        return ".jpg"
    exts = mimetypes.guess_all_extensions(content_type) or []
    return exts[0] if exts else fallback


def _sniff_content_type(data: bytes) -> Optional[str]:
    try:
        with PILImage.open(io.BytesIO(data)) as im:
            return _PIL_FORMATS.get(im.format or "")
    except (UnidentifiedImageError, OSError):
        return None


def decode_image_payload(payload: str) -> Tuple[bytes, str]:
    """
    Accept a bare base64 string or a `data:<mime>;base64,<data>` URL.
    Returns (bytes, content_type). The declared type is trusted only if it
    is an allowed image type; otherwise the bytes are sniffed with Pillow.
    """
    if not isinstance(payload, str) or not payload.strip():
        raise BadImagePayload("Empty image payload")

    declared = None
    body = payload.strip()
    if body.startswith("data:"):
        header, _, body = body.partition(",")
        meta = header[len("data:"):].split(";")
        if "base64" not in meta[1:]:
            raise BadImagePayload("Only base64 data URLs are supported")
        declared = meta[0] or None

    try:
        data = base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError):
        raise BadImagePayload("Image payload is not valid base64")
    if not data:
        raise BadImagePayload("Empty image payload")

    content_type = declared if declared in ALLOWED_CONTENT else _sniff_content_type(data)
    if content_type not in ALLOWED_CONTENT:
        raise BadImagePayload("Unsupported content type")
    return data, content_type


# ────────────────────────────────────────────────────────────
# Azure implementation
# ────────────────────────────────────────────────────────────
class AzureBlobStore:
    def __init__(self, conn_str: str, container: str = _DEFAULT_CONTAINER):
        self._bsc = BlobServiceClient.from_connection_string(conn_str)
        self._container = container
        self._client = None

    @classmethod
    def from_env(cls) -> "AzureBlobStore":
        if not _CONN_STR:
            raise RuntimeError(
                "AZURE_BLOB_CONN_STRING is not set. For Azurite, use the devstore connection string."
            )
        return cls(_CONN_STR, _DEFAULT_CONTAINER)

    def _container_client(self):
        if self._client is None:
            client = self._bsc.get_container_client(self._container)
            if not client.exists():
                client.create_container()
            self._client = client
        return self._client

    def save_image(self, data: bytes, content_type: str, folder: str) -> str:
        """
        Upload raw bytes and return the blob name to store in the DB.
        Pathing: {folder}/{uuid}.{ext}
        """
        name = f"{folder}/{uuid.uuid4()}{_guess_ext(content_type, '.jpg')}"
        blob = self._container_client().get_blob_client(name)
        blob.upload_blob(
            data,
            overwrite=False,
            content_settings=ContentSettings(content_type=content_type),
        )
        logger.info("Uploaded blob %s (%d bytes)", name, len(data))
        return name

    def delete(self, blob_name: str) -> None:
        self._container_client().delete_blob(blob_name, delete_snapshots="include")


def store_inline_image(store: BlobStore, payload: Optional[str], folder: str) -> Optional[str]:
    """Decode and upload an inline payload; None when there is nothing to store."""
    if not payload:
        return None
    data, content_type = decode_image_payload(payload)
    return store.save_image(data, content_type, folder)


def discard_blobs(store: BlobStore, blob_names) -> None:
    """Best-effort removal; the default image is shared and never deleted."""
    for name in blob_names:
        if not name or name == DEFAULT_IMAGE:
            continue
        try:
            store.delete(name)
        except Exception:
            logger.warning("Failed to delete blob %s", name, exc_info=True)
