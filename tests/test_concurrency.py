"""Racing an update against a delete never leaves a half-applied row."""

import threading

import pytest
from sqlalchemy import event, text

from db import make_engine, make_session_factory
from models import Base
from services.registry import build_services
from conftest import FakeBlobStore


@pytest.fixture
def file_engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'journal.db'}")
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def file_sessions(file_engine):
    return make_session_factory(file_engine)


@pytest.fixture
def file_services(file_sessions):
    return build_services(file_sessions, FakeBlobStore())


def _run_together(*targets):
    barrier = threading.Barrier(len(targets))
    results = [None] * len(targets)
    errors = []

    def wrap(i, fn):
        barrier.wait()
        try:
            results[i] = fn()
        except Exception as exc:  # surfaced below
            errors.append(exc)

    threads = [threading.Thread(target=wrap, args=(i, fn)) for i, fn in enumerate(targets)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)
    assert not errors, errors
    return results


@pytest.mark.parametrize("round_", range(5))
def test_update_racing_delete(file_services, round_):
    s = file_services
    owner = s.users.create({"username": f"u{round_}", "email": f"u{round_}@example.com", "password": "x"}).data
    v = s.vehicles.create({"user_id": owner.id, "type": "car", "name": "before", "make": "before"}, owner.id).data

    updated, deleted = _run_together(
        lambda: s.vehicles.update(v.id, {"name": "after", "make": "after"}, owner.id),
        lambda: s.vehicles.delete(v.id, owner.id),
    )

    assert deleted.is_ok
    row = s.vehicles.get(v.id)
    assert row is None
    # The update either landed in full before the delete or found nothing
    assert updated.is_ok or updated.is_not_found
    if updated.is_ok:
        assert (updated.data.name, updated.data.make) == ("after", "after")


def test_concurrent_likes_collapse_to_one(file_services):
    s = file_services
    owner = s.users.create({"username": "poster", "email": "poster@example.com", "password": "x"}).data
    fan = s.users.create({"username": "fan", "email": "fan@example.com", "password": "x"}).data
    v = s.vehicles.create({"user_id": owner.id, "type": "van"}, owner.id).data
    e = s.events.create(
        {"user_id": owner.id, "vehicle_id": v.id, "title": "t", "type": "story", "date": "2024-03-03"}, owner.id
    ).data

    results = _run_together(*[
        (lambda: s.likes.create({"user_id": fan.id, "event_id": e.id}, fan.id)) for _ in range(4)
    ])

    assert all(r.is_ok for r in results)
    assert len({r.data.id for r in results}) == 1
    assert s.likes.count_for_event(e.id) == 1


def test_update_result_survives_delete_right_after_commit(file_engine, file_sessions, file_services):
    s = file_services
    owner = s.users.create({"username": "quick", "email": "quick@example.com", "password": "x"}).data
    v = s.vehicles.create({"user_id": owner.id, "type": "car", "name": "a"}, owner.id).data

    def delete_elsewhere(session):
        with file_engine.begin() as conn:
            conn.execute(text("DELETE FROM vehicles WHERE id = :i"), {"i": v.id})

    event.listen(file_sessions, "after_commit", delete_elsewhere, once=True)
    result = s.vehicles.update(v.id, {"name": "b"}, owner.id)

    assert result.is_ok
    assert result.data is not None
    assert result.data.name == "b"
    assert s.vehicles.get(v.id) is None
