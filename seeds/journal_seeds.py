# seeds/journal_seeds.py
from services.registry import JournalServices

DEMO_USER = dict(username="demo", email="demo@ridejournal.app", password="RideOn2024!", first_name="Demo", last_name="Rider")
DEMO_VEHICLE = dict(name="Project Truck", make="Ford", model="F-100", year=1972, type="truck")
DEMO_EVENTS = [
    dict(title="Bought it", type="story", date="2023-04-01", detail="Found it in a barn two towns over.", published=True),
    dict(title="Brake job", type="repair", date="2023-05-14", odometer=81250, detail="New shoes and wheel cylinders all round."),
    dict(title="Oil change", type="maintenance", date="2023-06-12", odometer=81900),
]


def seed_demo_journal(services: JournalServices) -> int:
    """Create the demo user with one vehicle and a few events. Returns the user id; no-op if present."""
    existing = services.users.get_by_username(DEMO_USER["username"])
    if existing:
        return existing.id

    user = services.users.create(DEMO_USER).data
    vehicle = services.vehicles.create({**DEMO_VEHICLE, "user_id": user.id}, user.id).data
    for ev in DEMO_EVENTS:
        services.events.create({**ev, "user_id": user.id, "vehicle_id": vehicle.id}, user.id)
    return user.id
