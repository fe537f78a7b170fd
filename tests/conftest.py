"""Pytest configuration and fixtures."""

import base64
import io

import pytest
from PIL import Image as PILImage

from db import make_engine, make_session_factory
from models import Base
from services.registry import build_services


class FakeBlobStore:
    """In-memory stand-in for the Azure blob store."""

    def __init__(self):
        self.saved = {}
        self.deleted = []
        self._n = 0

    def save_image(self, data: bytes, content_type: str, folder: str) -> str:
        self._n += 1
        name = f"{folder}/blob-{self._n}.img"
        self.saved[name] = (data, content_type)
        return name

    def delete(self, blob_name: str) -> None:
        self.deleted.append(blob_name)
        self.saved.pop(blob_name, None)


def png_bytes(size=(2, 2)) -> bytes:
    buf = io.BytesIO()
    PILImage.new("RGB", size, (200, 30, 30)).save(buf, "PNG")
    return buf.getvalue()


def png_data_url() -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes()).decode()


@pytest.fixture
def session_factory():
    """Create a temporary in-memory database shared by every session."""
    engine = make_engine("sqlite://")
    Base.metadata.create_all(engine)
    try:
        yield make_session_factory(engine)
    finally:
        engine.dispose()


@pytest.fixture
def blob_store():
    return FakeBlobStore()


@pytest.fixture
def services(session_factory, blob_store):
    return build_services(session_factory, blob_store)


@pytest.fixture
def alice(services):
    return services.users.create(
        {"username": "alice", "email": "alice@example.com", "password": "pw-alice", "first_name": "Alice"}
    ).data


@pytest.fixture
def bob(services):
    return services.users.create(
        {"username": "bob", "email": "bob@example.com", "password": "pw-bob"}
    ).data


@pytest.fixture
def vehicle(services, alice):
    return services.vehicles.create(
        {"user_id": alice.id, "name": "Daily", "make": "Subaru", "model": "Outback", "year": 2012, "type": "car"},
        alice.id,
    ).data


@pytest.fixture
def event(services, alice, vehicle):
    return services.events.create(
        {
            "userId": alice.id,
            "vehicleId": vehicle.id,
            "title": "Exhaust Upgrade",
            "detail": "first we pulled off the old one, then we put on the new one",
            "type": "modification",
            "date": "2023-06-12",
            "odometer": 120000,
            "published": True,
        },
        alice.id,
    ).data
