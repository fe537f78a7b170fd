"""Tests for registration and self-owned profiles."""

import pytest

from auth.utils import verify_password
from services.results import DuplicateUserError


def test_password_is_stored_hashed(services, alice, session_factory):
    assert alice.password_hash != "pw-alice"
    assert verify_password("pw-alice", alice.password_hash)
    assert not verify_password("wrong", alice.password_hash)


def test_email_and_username_are_normalised(services):
    u = services.users.create({"username": "  carol ", "email": "Carol@Example.COM", "password": "x"}).data
    assert u.username == "carol"
    assert u.email == "carol@example.com"
    assert services.users.get_by_username("carol").id == u.id


def test_duplicate_registration(services, alice):
    with pytest.raises(DuplicateUserError) as exc:
        services.users.create({"username": "alice", "email": "other@example.com", "password": "x"})
    assert exc.value.field == "username"
    with pytest.raises(DuplicateUserError) as exc:
        services.users.create({"username": "alice2", "email": "ALICE@example.com", "password": "x"})
    assert exc.value.field == "email"


def test_profile_update_is_self_only(services, alice, bob):
    assert services.users.update(alice.id, {"bio": "hacked"}, bob.id).is_denied
    assert services.users.get(alice.id).bio is None

    result = services.users.update(alice.id, {"bio": "wagons", "lastName": "Liddell"}, alice.id)
    assert result.is_ok
    assert result.data.bio == "wagons"
    assert result.data.last_name == "Liddell"


def test_update_to_taken_username_rolls_back(services, alice, bob):
    with pytest.raises(DuplicateUserError):
        services.users.update(alice.id, {"username": "bob", "bio": "x"}, alice.id)
    row = services.users.get(alice.id)
    assert row.username == "alice"
    assert row.bio is None


def test_keeping_own_username_is_not_a_duplicate(services, alice):
    assert services.users.update(alice.id, {"username": "alice", "email": "alice@example.com"}, alice.id).is_ok


def test_password_change(services, alice):
    result = services.users.update(alice.id, {"password": "new-secret"}, alice.id)
    assert verify_password("new-secret", result.data.password_hash)


def test_delete_is_self_only(services, alice, bob):
    assert services.users.delete(alice.id, bob.id).is_denied
    assert services.users.get(alice.id) is not None
    assert services.users.delete(alice.id, alice.id).is_ok
    assert services.users.get(alice.id) is None
    assert services.users.delete(alice.id, alice.id).is_not_found


def test_include_related_hides_secrets(services, alice, vehicle):
    data = services.users.get_include_related(alice.id)
    assert "password_hash" not in data
    assert "email" not in data
    assert data["username"] == "alice"
    assert [v["id"] for v in data["vehicles"]] == [vehicle.id]
    assert services.users.get_include_related(9999) is None
