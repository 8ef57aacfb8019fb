from sqlalchemy import Boolean, Column, ForeignKey, String

from busops.database import Base


class Student(Base):
    __tablename__ = "students"

    id = Column(String, primary_key=True)
    full_name = Column(String, nullable=False)
    pickup_address = Column(String, nullable=True)
    school_id = Column(String, ForeignKey("schools.id"), nullable=True)
    household_id = Column(String, ForeignKey("households.id"), nullable=True)
    primary_guardian_name = Column(String, nullable=True)
    primary_guardian_phone = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
