import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from busops.models.driver import Driver
from busops.models.household import Household
from busops.models.route import Route, RouteAssignment, RouteStop
from busops.models.school import School
from busops.models.student import Student
from busops.models.vehicle import Vehicle


def _id(name: str) -> str:
    return str(uuid.uuid5(uuid.NAMESPACE_DNS, name))


SEED_VEHICLES = [
    {"id": _id("vehicle-bus-12"), "label": "Bus 12", "plate": "SB-1012", "make_model": "Blue Bird Vision", "capacity": 48},
    {"id": _id("vehicle-bus-14"), "label": "Bus 14", "plate": "SB-1014", "make_model": "Blue Bird Vision", "capacity": 48},
    {"id": _id("vehicle-van-3"), "label": "Van 3", "plate": "SB-2003", "make_model": "Ford Transit", "capacity": 12},
]

SEED_DRIVERS = [
    {"id": _id("driver-morgan"), "full_name": "Morgan Reyes", "license_number": "CDL-448812"},
    {"id": _id("driver-casey"), "full_name": "Casey Obi", "license_number": "CDL-551907"},
]

SEED_SCHOOL = {
    "id": _id("school-lincoln"),
    "name": "Lincoln Elementary",
    "address": "200 School St",
    "phone": "555-0100",
    "start_time": "08:15",
    "end_time": "15:00",
}

SEED_HOUSEHOLD = {"id": _id("household-maple"), "address": "14 Maple Ave"}

SEED_STUDENTS = [
    {"id": _id("student-ava"), "full_name": "Ava Park", "pickup_address": "14 Maple Ave",
     "household_id": SEED_HOUSEHOLD["id"], "primary_guardian_name": "Jin Park", "primary_guardian_phone": "555-0111"},
    {"id": _id("student-leo"), "full_name": "Leo Park", "pickup_address": "14 Maple Ave",
     "household_id": SEED_HOUSEHOLD["id"], "primary_guardian_name": "Jin Park", "primary_guardian_phone": "555-0111"},
    {"id": _id("student-mia"), "full_name": "Mia Stone", "pickup_address": "9 Birch Rd",
     "household_id": None, "primary_guardian_name": "Ana Stone", "primary_guardian_phone": "555-0122"},
]

SEED_ROUTE = {"id": _id("route-lincoln-am"), "name": "Lincoln AM", "direction": "AM"}

SEED_STOPS = [
    {"id": _id("stop-am-1"), "sequence": 1, "stop_type": "pickup_home", "student_id": SEED_STUDENTS[0]["id"]},
    {"id": _id("stop-am-2"), "sequence": 2, "stop_type": "pickup_home", "student_id": SEED_STUDENTS[1]["id"]},
    {"id": _id("stop-am-3"), "sequence": 3, "stop_type": "pickup_home", "student_id": SEED_STUDENTS[2]["id"]},
    {"id": _id("stop-am-4"), "sequence": 4, "stop_type": "dropoff_school", "student_id": SEED_STUDENTS[0]["id"]},
    {"id": _id("stop-am-5"), "sequence": 5, "stop_type": "dropoff_school", "student_id": SEED_STUDENTS[1]["id"]},
    {"id": _id("stop-am-6"), "sequence": 6, "stop_type": "dropoff_school", "student_id": SEED_STUDENTS[2]["id"]},
]


async def seed_data(session: AsyncSession) -> None:
    result = await session.execute(select(Vehicle).limit(1))
    if result.scalars().first() is not None:
        return

    created_at = datetime.now(timezone.utc).isoformat()

    for v in SEED_VEHICLES:
        session.add(Vehicle(**v))
    for d in SEED_DRIVERS:
        session.add(Driver(**d, created_at=created_at))
    session.add(School(**SEED_SCHOOL))
    session.add(Household(**SEED_HOUSEHOLD))
    await session.flush()

    for s in SEED_STUDENTS:
        session.add(Student(**s, school_id=SEED_SCHOOL["id"]))
    session.add(Route(**SEED_ROUTE, school_id=SEED_SCHOOL["id"]))
    await session.flush()

    for stop in SEED_STOPS:
        school_id = SEED_SCHOOL["id"] if stop["stop_type"] == "dropoff_school" else None
        session.add(RouteStop(**stop, route_id=SEED_ROUTE["id"], school_id=school_id))

    # The first driver runs the AM route every day of the week.
    for day in range(7):
        session.add(RouteAssignment(
            id=_id(f"assignment-lincoln-am-{day}"),
            route_id=SEED_ROUTE["id"],
            driver_id=SEED_DRIVERS[0]["id"],
            vehicle_id=SEED_VEHICLES[0]["id"],
            day_of_week=day,
        ))

    await session.commit()
