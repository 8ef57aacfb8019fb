from sqlalchemy import Column, ForeignKey, Index, Integer, String, text

from busops.database import Base

OPEN_SESSION_INDEX = "uq_work_sessions_open_driver"


class WorkSession(Base):
    __tablename__ = "work_sessions"
    # At most one open session per driver, enforced by the store itself.
    __table_args__ = (
        Index(
            OPEN_SESSION_INDEX,
            "driver_id",
            unique=True,
            sqlite_where=text("end_time IS NULL"),
            postgresql_where=text("end_time IS NULL"),
        ),
        Index("ix_work_sessions_driver_date", "driver_id", "work_date"),
    )

    id = Column(String, primary_key=True)
    driver_id = Column(String, ForeignKey("drivers.id"), nullable=False)
    work_date = Column(String, nullable=False)
    start_time = Column(String, nullable=False)
    end_time = Column(String, nullable=True)
    duration_seconds = Column(Integer, nullable=True)
