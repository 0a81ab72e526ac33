# booking/schemas.py

from pydantic import BaseModel, Field
from enum import Enum
from datetime import datetime, date
from typing import List, Optional


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserRole(str, Enum):
    admin = "admin"
    customer = "customer"


class AppointmentStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rescheduled = "rescheduled"
    cancelled = "cancelled"
    completed = "completed"


class UserPublic(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    role: UserRole


class UserCreate(BaseModel):
    name: str = Field(min_length=1)
    email: str
    password: str = Field(min_length=8, max_length=72)
    phone: Optional[str] = None


class AdminUserCreate(UserCreate):
    role: UserRole = UserRole.admin


class ServiceCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str = ""
    duration_minutes: int = Field(gt=0)
    price: float = Field(default=0, ge=0)
    is_active: bool = True


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    duration_minutes: Optional[int] = Field(default=None, gt=0)
    price: Optional[float] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class ServicePublic(BaseModel):
    id: int
    name: str
    description: str
    duration_minutes: int
    price: float
    is_active: bool


class BusinessHoursUpdate(BaseModel):
    open_time: Optional[str] = None     # "HH:mm"
    close_time: Optional[str] = None
    slot_duration_minutes: Optional[int] = None
    working_days: Optional[List[int]] = None  # 0=Sun, 1=Mon....
    break_start: Optional[str] = None   # "" clears the break
    break_end: Optional[str] = None


class AvailabilityPublic(BaseModel):
    open_time: str
    close_time: str
    slot_duration_minutes: int
    working_days: List[int]
    break_start: Optional[str] = None
    break_end: Optional[str] = None
    slots: List[str]


class DaySlotsResponse(BaseModel):
    service_id: int
    date: date
    slots: List[str]


class AppointmentCreate(BaseModel):
    service_id: Optional[int] = None
    service_name: Optional[str] = None
    appointment_date: datetime
    start_time: str   # "9:00 AM"
    end_time: str
    notes: Optional[str] = None
    customer_id: Optional[int] = None  # admins booking on behalf of a customer


class AppointmentUpdate(BaseModel):
    customer_id: Optional[int] = None
    service_id: Optional[int] = None
    appointment_date: Optional[datetime] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = None


class AppointmentPublic(BaseModel):
    id: int
    customer_id: int
    service_id: int
    appointment_date: datetime
    start_time: str
    end_time: str
    status: AppointmentStatus
    notes: Optional[str] = None


class ReportTotals(BaseModel):
    today: int
    month: int
    all_time: int


class TrendPoint(BaseModel):
    key: str
    label: str
    total: int


class ServicePerformance(BaseModel):
    service_id: int
    service_name: str
    total: int
    completed: int
    cancelled: int


class ReportResponse(BaseModel):
    totals: ReportTotals
    status_breakdown: dict
    daily_trend: List[TrendPoint]
    monthly_trend: List[TrendPoint]
    service_performance: List[ServicePerformance]
