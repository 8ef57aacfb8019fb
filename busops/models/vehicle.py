from sqlalchemy import Boolean, Column, Integer, String

from busops.database import Base


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(String, primary_key=True)
    label = Column(String, nullable=False)
    plate = Column(String, nullable=True, unique=True)
    make_model = Column(String, nullable=True)
    capacity = Column(Integer, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
