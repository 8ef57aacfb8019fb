from sqlalchemy import Column, String

from busops.database import Base


class School(Base):
    __tablename__ = "schools"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    address = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    start_time = Column(String, nullable=True)
    end_time = Column(String, nullable=True)
