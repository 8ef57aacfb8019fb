from pydantic import BaseModel


class StopInput(BaseModel):
    id: str
    route_id: str
    sequence: int
    stop_type: str | None = None
    student_id: str | None = None
    school_id: str | None = None
    household_id: str | None = None
    address: str | None = None
    planned_time: str | None = None

    model_config = {"from_attributes": True}


class StudentInfo(BaseModel):
    id: str
    full_name: str
    pickup_address: str | None = None
    household_id: str | None = None
    school_id: str | None = None
    primary_guardian_name: str | None = None
    primary_guardian_phone: str | None = None

    model_config = {"from_attributes": True}


class SchoolInfo(BaseModel):
    id: str
    name: str
    address: str | None = None
    phone: str | None = None

    model_config = {"from_attributes": True}


class GroupedStop(BaseModel):
    id: str
    route_id: str
    sequence: int
    address: str
    planned_time: str | None = None
    stop_type: str
    student_name: str | None = None
    student_id: str | None = None
    primary_guardian_name: str | None = None
    primary_guardian_phone: str | None = None
    name: str | None = None
    phone: str | None = None
    household_id: str | None = None
    household_students: list[str] = []
    household_student_ids: list[str] = []


class RouteResponse(BaseModel):
    id: str
    name: str
    direction: str
    school_id: str | None = None
    description: str | None = None
    is_active: bool

    model_config = {"from_attributes": True}


class RouteCounts(BaseModel):
    AM: int = 0
    PM: int = 0


class DriverRoutes(BaseModel):
    routes: list[RouteResponse]
    stops_map: dict[str, list[GroupedStop]]
    attendance: dict[str, str]
    total_route_counts: RouteCounts


class AttendanceCreate(BaseModel):
    student_id: str
    route_id: str
    driver_id: str
    status: str
    route_stop_id: str | None = None
    household_id: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    notes: str | None = None


class AttendanceResponse(BaseModel):
    id: str
    student_id: str
    route_id: str
    route_stop_id: str | None = None
    household_id: str | None = None
    driver_id: str
    record_date: str
    status: str
    recorded_at: str
    latitude: float | None = None
    longitude: float | None = None
    notes: str | None = None

    model_config = {"from_attributes": True}


class RouteCompletionRequest(BaseModel):
    driver_id: str
