# booking/stores.py

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from booking.models import Appointment, BusinessHours, Service, User, DEFAULT_SETTINGS_KEY
from booking.scheduling import find_conflict, parse_24
from booking.scheduling.timecodec import day_range

logger = logging.getLogger(__name__)

DEFAULT_SERVICES = [
    {
        "name": "General Consultation",
        "description": "Professional consultation with experienced staff",
        "duration_minutes": 30,
        "price": 30,
    },
    {
        "name": "Skin Care Session",
        "description": "Refreshing skin treatment for glowing results",
        "duration_minutes": 45,
        "price": 45,
    },
    {
        "name": "Business Coaching",
        "description": "One on one growth and strategy guidance",
        "duration_minutes": 60,
        "price": 60,
    },
    {
        "name": "Salon Services",
        "description": "Premium hair and beauty services",
        "duration_minutes": 90,
        "price": 75,
    },
]

TIME_FIELDS = ("open_time", "close_time", "break_start", "break_end")


class SlotTakenError(Exception):
    """The storage layer refused a second active booking for the same start."""


# --- business hours -------------------------------------------------------

def _select_settings(session: Session) -> Optional[BusinessHours]:
    return session.exec(
        select(BusinessHours).where(BusinessHours.key == DEFAULT_SETTINGS_KEY)
    ).first()


def get_business_hours(session: Session) -> BusinessHours:
    """Return the settings row, creating the default one on first use."""
    settings = _select_settings(session)
    if settings is not None:
        return settings

    settings = BusinessHours(key=DEFAULT_SETTINGS_KEY)
    session.add(settings)
    try:
        session.commit()
    except IntegrityError:
        # another request created it first
        session.rollback()
        return _select_settings(session)

    session.refresh(settings)
    logger.info("Created default business hours settings")
    return settings


def check_business_hours(current: BusinessHours, changes: dict) -> str:
    """
    Validate a partial settings update against the current row.

    Returns an error message, or "" when the merged settings are valid.
    """
    for field in TIME_FIELDS:
        value = changes.get(field)
        if value is None:
            continue
        if value == "" and field in ("break_start", "break_end"):
            continue
        if parse_24(value) is None:
            return f"{field} must be in HH:mm format."

    duration = changes.get("slot_duration_minutes")
    if duration is not None and (not isinstance(duration, int) or duration < 15):
        return "slot_duration_minutes must be an integer >= 15."

    days = changes.get("working_days")
    if days is not None and not all(isinstance(d, int) and 0 <= d <= 6 for d in days):
        return "working_days must be a list with values between 0 and 6."

    merged = {field: getattr(current, field) for field in TIME_FIELDS}
    merged.update({k: v for k, v in changes.items() if k in TIME_FIELDS and v is not None})

    open_minutes = parse_24(merged["open_time"])
    close_minutes = parse_24(merged["close_time"])
    if open_minutes >= close_minutes:
        return "open_time must be before close_time."

    break_start = merged["break_start"] or None
    break_end = merged["break_end"] or None
    if (break_start is None) != (break_end is None):
        return "break_start and break_end must be set together."
    if break_start is not None:
        start, end = parse_24(break_start), parse_24(break_end)
        if start >= end:
            return "break_start must be before break_end."
        if start < open_minutes or end > close_minutes:
            return "Break hours must fall within working hours."

    return ""


def save_business_hours(session: Session, changes: dict) -> BusinessHours:
    """Apply an already checked partial update and return the fresh row."""
    settings = get_business_hours(session)

    for field, value in changes.items():
        if value is None:
            continue
        if field in ("break_start", "break_end") and value == "":
            value = None
        if field == "working_days":
            value = sorted(set(value))
        setattr(settings, field, value)

    settings.updated_at = datetime.now()
    session.add(settings)
    session.commit()
    session.refresh(settings)

    logger.info("Business hours updated: %s", sorted(k for k, v in changes.items() if v is not None))
    return settings


# --- users ----------------------------------------------------------------

def find_user_by_email(session: Session, email: str) -> Optional[User]:
    return session.exec(select(User).where(User.email == email.strip().lower())).first()


def ensure_admin(session: Session, email: str, password: str, name: str) -> None:
    from booking.auth import hash_password

    if find_user_by_email(session, email) is not None:
        return
    session.add(User(name=name, email=email.strip().lower(), password_hash=hash_password(password), role="admin"))
    session.commit()
    logger.info("Created admin account %s", email)


# --- services -------------------------------------------------------------

def ensure_default_services(session: Session) -> None:
    count = session.exec(select(func.count()).select_from(Service)).one()
    if count:
        return
    for data in DEFAULT_SERVICES:
        session.add(Service(**data))
    session.commit()
    logger.info("Seeded %d default services", len(DEFAULT_SERVICES))


def find_service_by_name(session: Session, name: str, exclude_id: Optional[int] = None) -> Optional[Service]:
    stmt = select(Service).where(func.lower(Service.name) == name.strip().lower())
    if exclude_id is not None:
        stmt = stmt.where(Service.id != exclude_id)
    return session.exec(stmt).first()


# --- appointments ---------------------------------------------------------

def find_same_day_appointments(
    session: Session,
    service_id: int,
    appointment_date: datetime,
    exclude_id: Optional[int] = None,
) -> List[Appointment]:
    day_start, day_end = day_range(appointment_date)

    stmt = (
        select(Appointment)
        .where(Appointment.service_id == service_id)
        .where(Appointment.appointment_date >= day_start)
        .where(Appointment.appointment_date < day_end)
        .where(Appointment.status != "cancelled")
    )
    if exclude_id is not None:
        stmt = stmt.where(Appointment.id != exclude_id)

    return list(session.exec(stmt).all())


def find_conflicting_appointment(
    session: Session,
    service_id: int,
    appointment_date: datetime,
    start_minutes: int,
    end_minutes: int,
    exclude_id: Optional[int] = None,
) -> Optional[Appointment]:
    same_day = find_same_day_appointments(session, service_id, appointment_date, exclude_id)
    return find_conflict(same_day, start_minutes, end_minutes, exclude_id=exclude_id)


def _commit_appointment(session: Session, appointment: Appointment) -> Appointment:
    session.add(appointment)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise SlotTakenError("Selected slot is already booked.")
    session.refresh(appointment)
    return appointment


def create_appointment(session: Session, **fields) -> Appointment:
    return _commit_appointment(session, Appointment(**fields))


def update_appointment(session: Session, appointment: Appointment, changes: dict) -> Appointment:
    for field, value in changes.items():
        setattr(appointment, field, value)
    appointment.updated_at = datetime.now()
    return _commit_appointment(session, appointment)
