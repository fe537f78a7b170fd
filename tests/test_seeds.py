from seeds.journal_seeds import DEMO_EVENTS, seed_demo_journal


def test_seed_is_idempotent(services):
    uid = seed_demo_journal(services)
    assert seed_demo_journal(services) == uid

    vehicles = services.vehicles.list_by_user(uid)
    assert len(vehicles) == 1
    events = services.events.list_by_vehicle(vehicles[0].id)
    assert len(events) == len(DEMO_EVENTS)
    assert all(e.user_id == uid for e in events)
