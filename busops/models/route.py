from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, UniqueConstraint

from busops.database import Base


class Route(Base):
    __tablename__ = "routes"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    direction = Column(String, nullable=False)  # AM, MIDDAY or PM
    school_id = Column(String, ForeignKey("schools.id"), nullable=True)
    description = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)


class RouteStop(Base):
    __tablename__ = "route_stops"

    id = Column(String, primary_key=True)
    route_id = Column(String, ForeignKey("routes.id"), nullable=False)
    sequence = Column(Integer, nullable=False)
    stop_type = Column(String, nullable=False, default="student")
    student_id = Column(String, ForeignKey("students.id"), nullable=True)
    school_id = Column(String, ForeignKey("schools.id"), nullable=True)
    household_id = Column(String, ForeignKey("households.id"), nullable=True)
    address = Column(String, nullable=True)
    planned_time = Column(String, nullable=True)
    notes = Column(String, nullable=True)


class RouteAssignment(Base):
    __tablename__ = "driver_route_assignments"

    id = Column(String, primary_key=True)
    route_id = Column(String, ForeignKey("routes.id"), nullable=False)
    driver_id = Column(String, ForeignKey("drivers.id"), nullable=False)
    vehicle_id = Column(String, ForeignKey("vehicles.id"), nullable=True)
    day_of_week = Column(Integer, nullable=False)  # 0 = Sunday .. 6 = Saturday
    is_active = Column(Boolean, nullable=False, default=True)
    notes = Column(String, nullable=True)


class RouteCompletion(Base):
    __tablename__ = "driver_route_completions"
    __table_args__ = (UniqueConstraint("driver_id", "route_id", "work_date"),)

    id = Column(String, primary_key=True)
    driver_id = Column(String, ForeignKey("drivers.id"), nullable=False)
    route_id = Column(String, ForeignKey("routes.id"), nullable=False)
    work_date = Column(String, nullable=False)
    completed_at = Column(String, nullable=False)
