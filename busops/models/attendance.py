from sqlalchemy import Column, Float, ForeignKey, String

from busops.database import Base


class AttendanceRecord(Base):
    __tablename__ = "attendance_records"

    id = Column(String, primary_key=True)
    student_id = Column(String, ForeignKey("students.id"), nullable=False)
    route_id = Column(String, ForeignKey("routes.id"), nullable=False)
    route_stop_id = Column(String, ForeignKey("route_stops.id"), nullable=True)
    household_id = Column(String, ForeignKey("households.id"), nullable=True)
    driver_id = Column(String, ForeignKey("drivers.id"), nullable=False)
    record_date = Column(String, nullable=False)
    status = Column(String, nullable=False)
    recorded_at = Column(String, nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    notes = Column(String, nullable=True)
