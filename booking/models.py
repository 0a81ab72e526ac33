# booking/models.py

from typing import Optional, List
from datetime import datetime

from pydantic import NaiveDatetime
from sqlalchemy import DateTime, Index, text
from sqlalchemy.types import JSON
from sqlmodel import SQLModel, Field, Column

DEFAULT_SETTINGS_KEY = "default"

# all timestamps are naive local time


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    email: str = Field(index=True, unique=True)
    phone: Optional[str] = None
    password_hash: str
    role: str = "customer"  # admin or customer
    created_at: NaiveDatetime = Field(default_factory=datetime.now, sa_type=DateTime)


class Service(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True)
    description: str = ""
    duration_minutes: int
    price: float = 0
    is_active: bool = True
    created_by: Optional[int] = Field(default=None, foreign_key="user.id")
    created_at: NaiveDatetime = Field(default_factory=datetime.now, sa_type=DateTime)


class BusinessHours(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    key: str = Field(default=DEFAULT_SETTINGS_KEY, unique=True)

    open_time: str = "09:00"
    close_time: str = "17:00"
    slot_duration_minutes: int = 60
    working_days: List[int] = Field(default_factory=lambda: [1, 2, 3, 4, 5, 6], sa_column=Column(JSON))  # 0=Sun, 1=Mon....
    break_start: Optional[str] = "13:00"
    break_end: Optional[str] = "14:00"

    updated_at: NaiveDatetime = Field(default_factory=datetime.now, sa_type=DateTime)


class Appointment(SQLModel, table=True):
    # one active booking per service/day/start; cancelled rows don't count
    __table_args__ = (
        Index(
            "uq_service_day_start_active",
            "service_id",
            "appointment_date",
            "start_time",
            unique=True,
            sqlite_where=text("status != 'cancelled'"),
            postgresql_where=text("status != 'cancelled'"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    customer_id: int = Field(foreign_key="user.id", index=True)
    service_id: int = Field(foreign_key="service.id", index=True)
    appointment_date: NaiveDatetime = Field(index=True, sa_type=DateTime)  # midnight of the booked day
    start_time: str  # "9:00 AM"
    end_time: str
    status: str = "pending"
    notes: Optional[str] = None

    created_at: NaiveDatetime = Field(default_factory=datetime.now, sa_type=DateTime)
    updated_at: NaiveDatetime = Field(default_factory=datetime.now, sa_type=DateTime)
