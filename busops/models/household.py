from sqlalchemy import Column, String

from busops.database import Base


class Household(Base):
    __tablename__ = "households"

    id = Column(String, primary_key=True)
    address = Column(String, nullable=False)
    notes = Column(String, nullable=True)
