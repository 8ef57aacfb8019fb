from sqlalchemy import Boolean, Column, String

from busops.database import Base


class Driver(Base):
    __tablename__ = "drivers"

    id = Column(String, primary_key=True)
    full_name = Column(String, nullable=False)
    license_number = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(String, nullable=False)
