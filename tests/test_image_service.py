"""Tests for event images: parent-event guard and blob handling."""

import pytest

from conftest import png_data_url
from services.blob_service import BadImagePayload, DEFAULT_IMAGE
from services.results import ReferentialIntegrityError


def test_event_owner_can_attach_image(services, event, alice, blob_store):
    result = services.images.create({"eventId": event.id, "image": png_data_url()}, alice.id)
    assert result.is_ok
    assert result.data.event_id == event.id
    assert result.data.image.startswith("event/")
    assert result.data.image in blob_store.saved


def test_image_without_payload_gets_default_reference(services, event, alice, blob_store):
    result = services.images.create({"event_id": event.id}, alice.id)
    assert result.is_ok
    assert result.data.image == DEFAULT_IMAGE
    assert blob_store.saved == {}


def test_other_user_cannot_attach_or_delete(services, event, alice, bob, blob_store):
    assert services.images.create({"event_id": event.id, "image": png_data_url()}, bob.id).is_denied
    assert blob_store.saved == {}

    img = services.images.create({"event_id": event.id, "image": png_data_url()}, alice.id).data
    assert services.images.delete(img.id, bob.id).is_denied
    assert services.images.get(img.id) is not None
    assert blob_store.deleted == []


def test_vehicle_owner_is_not_the_image_owner(services, vehicle, alice, bob):
    # Bob's event on Alice's vehicle: images belong to Bob's event
    ev = services.events.create(
        {"user_id": bob.id, "vehicle_id": vehicle.id, "title": "guest drive", "type": "story", "date": "2024-02-02"},
        bob.id,
    ).data
    assert services.images.create({"event_id": ev.id}, alice.id).is_denied
    assert services.images.create({"event_id": ev.id}, bob.id).is_ok


def test_delete_removes_row_and_blob(services, event, alice, blob_store):
    img = services.images.create({"event_id": event.id, "image": png_data_url()}, alice.id).data
    result = services.images.delete(img.id, alice.id)
    assert result.is_ok
    assert services.images.get(img.id) is None
    assert blob_store.deleted == [img.image]


def test_delete_default_reference_keeps_shared_blob(services, event, alice, blob_store):
    img = services.images.create({"event_id": event.id}, alice.id).data
    assert services.images.delete(img.id, alice.id).is_ok
    assert blob_store.deleted == []


def test_missing_event(services, alice, blob_store):
    with pytest.raises(ReferentialIntegrityError):
        services.images.create({"event_id": 404, "image": png_data_url()}, alice.id)
    assert blob_store.saved == {}
    assert services.images.delete(404, alice.id).is_not_found


def test_undecodable_payload_is_rejected(services, event, alice):
    with pytest.raises(BadImagePayload):
        services.images.create({"event_id": event.id, "image": "not an image"}, alice.id)
    assert services.images.list_by_event(event.id) == []


def test_list_by_event_newest_first(services, event, alice):
    first = services.images.create({"event_id": event.id}, alice.id).data
    second = services.images.create({"event_id": event.id}, alice.id).data
    assert [i.id for i in services.images.list_by_event(event.id)] == [second.id, first.id]
