from busops.models.driver import Driver
from busops.models.vehicle import Vehicle
from busops.models.school import School
from busops.models.household import Household
from busops.models.student import Student
from busops.models.route import Route, RouteStop, RouteAssignment, RouteCompletion
from busops.models.inspection import Inspection
from busops.models.work_session import WorkSession
from busops.models.attendance import AttendanceRecord

__all__ = [
    "Driver",
    "Vehicle",
    "School",
    "Household",
    "Student",
    "Route",
    "RouteStop",
    "RouteAssignment",
    "RouteCompletion",
    "Inspection",
    "WorkSession",
    "AttendanceRecord",
]
