"""
SQLAlchemy ORM models  (maps to PostgreSQL).

Tables
------
* ``users``          -- customers; identified by email or phone number
* ``barbers``        -- providers with a fixed coordinate
* ``queue_entries``  -- one user's slot in one barber's queue

Invariants
----------
* ``queue_entries.user_id`` is **unique**: a user waits at one shop at a
  time.  Whether a user is queued is derived from that row's existence;
  nothing on ``users`` mirrors it.
* Queue order is ``(entered_at, id)`` ascending.

Indexes
-------
* **B-Tree** on ``(lat, long)`` for the bounding-box range query.
* **B-Tree** on ``(barber_id, entered_at, id)`` for ordered queue reads
  and position counting.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    func,
)
from sqlalchemy.orm import relationship

from .database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, nullable=True)
    phone_number = Column(String(32), unique=True, nullable=True)
    password_hash = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    queue_entry = relationship(
        "QueueEntryModel", back_populates="user", uselist=False
    )


class BarberModel(Base):
    __tablename__ = "barbers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    username = Column(String(120), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    lat = Column(Float, nullable=False)
    long = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    queue_entries = relationship("QueueEntryModel", back_populates="barber")

    __table_args__ = (Index("idx_barbers_lat_long", "lat", "long"),)


class QueueEntryModel(Base):
    __tablename__ = "queue_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    barber_id = Column(Integer, ForeignKey("barbers.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)
    service_type = Column(String(32), nullable=True)
    entered_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    user = relationship("UserModel", back_populates="queue_entry")
    barber = relationship("BarberModel", back_populates="queue_entries")

    __table_args__ = (
        Index("idx_queue_barber_order", "barber_id", "entered_at", "id"),
    )
