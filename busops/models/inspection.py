from sqlalchemy import JSON, Column, ForeignKey, Integer, String

from busops.database import Base


class Inspection(Base):
    __tablename__ = "inspections"

    id = Column(String, primary_key=True)
    driver_id = Column(String, ForeignKey("drivers.id"), nullable=False)
    driver_name = Column(String, nullable=True)
    driver_license_number = Column(String, nullable=True)
    vehicle_id = Column(String, ForeignKey("vehicles.id"), nullable=False)
    vehicle_label = Column(String, nullable=True)
    inspection_type = Column(String, nullable=False)  # pre or post
    shift = Column(String, nullable=True)
    answers = Column(JSON, nullable=False, default=dict)
    overall_status = Column(String, nullable=True)
    notes = Column(String, nullable=True)
    signature_name = Column(String, nullable=True)
    odometer_reading = Column(Integer, nullable=True)
    inspection_date = Column(String, nullable=False)
    submitted_at = Column(String, nullable=False)
