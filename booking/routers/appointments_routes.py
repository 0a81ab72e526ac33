# booking/routers/appointments_routes.py

import logging
from datetime import datetime
from typing import Optional, List

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from booking.db import get_session
from booking.models import Appointment, Service, User
from booking.schemas import (
    AppointmentCreate,
    AppointmentPublic,
    AppointmentStatus,
    AppointmentUpdate,
)
from booking.auth import get_current_user
from booking.deps import can_access_appointment, require_role
from booking.scheduling import validate_slot
from booking.scheduling.timecodec import day_range
from booking.stores import (
    SlotTakenError,
    create_appointment as store_create_appointment,
    find_conflicting_appointment,
    find_service_by_name,
    get_business_hours,
    update_appointment as store_update_appointment,
)

logger = logging.getLogger(__name__)

SLOT_TAKEN = "Selected slot is already booked."

CUSTOMER_FIELDS = {"appointment_date", "start_time", "end_time", "notes", "status"}

router = APIRouter(
    tags=["appointments"],
)


def _midnight(value: datetime) -> datetime:
    return day_range(value)[0]


def _check_slot(
    session: Session,
    service_id: int,
    appointment_date: datetime,
    start_time: str,
    end_time: str,
    exclude_id: Optional[int] = None,
):
    """Run availability validation then conflict detection, raising on failure."""
    settings = get_business_hours(session)
    result = validate_slot(settings, appointment_date, start_time, end_time)
    if not result.valid:
        logger.info("Rejected slot %s %s-%s: %s", appointment_date.date(), start_time, end_time, result.message)
        raise HTTPException(status_code=422, detail=result.message)

    conflict = find_conflicting_appointment(
        session,
        service_id,
        appointment_date,
        result.start_minutes,
        result.end_minutes,
        exclude_id=exclude_id,
    )
    if conflict is not None:
        logger.info("Slot %s %s for service %s conflicts with appointment %s",
                    appointment_date.date(), start_time, service_id, conflict.id)
        raise HTTPException(status_code=409, detail=SLOT_TAKEN)


def _get_customer(session: Session, customer_id: int) -> User:
    customer = session.get(User, customer_id)
    if customer is None or customer.role != "customer":
        raise HTTPException(status_code=404, detail="Customer not found.")
    return customer


@router.post("/appointments", response_model=AppointmentPublic, status_code=201)
def create_appointment(
    appt: AppointmentCreate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    # 1) Resolve service, by id or by name (never created from here)
    if appt.service_id is None and not appt.service_name:
        raise HTTPException(status_code=422, detail="service_id or service_name is required.")

    if appt.service_id is not None:
        service = session.get(Service, appt.service_id)
    else:
        service = find_service_by_name(session, appt.service_name)
    if service is None or not service.is_active:
        raise HTTPException(status_code=404, detail="Service not found.")

    # 2) Resolve customer: admins may book on behalf of someone
    customer_id = current_user["id"]
    if appt.customer_id is not None and appt.customer_id != customer_id:
        require_role(current_user, "admin")
        customer_id = _get_customer(session, appt.customer_id).id

    # 3) Validate against business hours and existing bookings
    appointment_date = _midnight(appt.appointment_date)
    start_time, end_time = appt.start_time.strip(), appt.end_time.strip()
    _check_slot(session, service.id, appointment_date, start_time, end_time)

    # 4) Create and save appointment
    try:
        db_appt = store_create_appointment(
            session,
            customer_id=customer_id,
            service_id=service.id,
            appointment_date=appointment_date,
            start_time=start_time,
            end_time=end_time,
            notes=appt.notes,
            status=AppointmentStatus.pending.value,
        )
    except SlotTakenError:
        raise HTTPException(status_code=409, detail=SLOT_TAKEN)

    logger.info("Appointment %s booked for service %s on %s at %s",
                db_appt.id, service.id, appointment_date.date(), db_appt.start_time)
    return db_appt


def _list_appointments(
    session: Session,
    current_user: dict,
    status: Optional[AppointmentStatus],
    service_id: Optional[int],
    customer_id: Optional[int],
    date_from: Optional[datetime],
    date_to: Optional[datetime],
):
    stmt = select(Appointment)

    if current_user["role"] == "customer":
        stmt = stmt.where(Appointment.customer_id == current_user["id"])
    elif customer_id is not None:
        stmt = stmt.where(Appointment.customer_id == customer_id)

    if status is not None:
        stmt = stmt.where(Appointment.status == status.value)
    if service_id is not None:
        stmt = stmt.where(Appointment.service_id == service_id)
    if date_from is not None:
        stmt = stmt.where(Appointment.appointment_date >= date_from)
    if date_to is not None:
        stmt = stmt.where(Appointment.appointment_date <= date_to)

    stmt = stmt.order_by(Appointment.appointment_date, Appointment.start_time)
    return session.exec(stmt).all()


@router.get("/appointments", response_model=List[AppointmentPublic])
def list_appointments(
    status: Optional[AppointmentStatus] = None,
    service_id: Optional[int] = None,
    customer_id: Optional[int] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    return _list_appointments(session, current_user, status, service_id, customer_id, date_from, date_to)


@router.get("/admin/appointments", response_model=List[AppointmentPublic])
def admin_list_appointments(
    status: Optional[AppointmentStatus] = None,
    service_id: Optional[int] = None,
    customer_id: Optional[int] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "admin")
    return _list_appointments(session, current_user, status, service_id, customer_id, date_from, date_to)


def _load_appointment(session: Session, appt_id: int, current_user: dict) -> Appointment:
    target = session.get(Appointment, appt_id)
    if target is None:
        raise HTTPException(status_code=404, detail="Appointment not found.")
    if not can_access_appointment(current_user, target):
        raise HTTPException(status_code=403, detail="Forbidden")
    return target


@router.get("/appointments/{appt_id}", response_model=AppointmentPublic)
def get_appointment(
    appt_id: int,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    return _load_appointment(session, appt_id, current_user)


def _apply_update(session: Session, appt_id: int, changes: AppointmentUpdate, current_user: dict):
    # 1) Find the appointment and check ownership
    target = _load_appointment(session, appt_id, current_user)
    updates = changes.model_dump(exclude_unset=True, exclude_none=True)

    # 2) Customers may reschedule, add notes or cancel, nothing else
    if current_user["role"] != "admin":
        if "customer_id" in updates or "service_id" in updates:
            raise HTTPException(status_code=403, detail="Only admin can change customer or service.")
        if updates.get("status", AppointmentStatus.cancelled) != AppointmentStatus.cancelled:
            raise HTTPException(status_code=403, detail="Customers can only change status to cancelled.")
        updates = {k: v for k, v in updates.items() if k in CUSTOMER_FIELDS}

    if "status" in updates:
        updates["status"] = updates["status"].value

    if "service_id" in updates and session.get(Service, updates["service_id"]) is None:
        raise HTTPException(status_code=404, detail="Service not found.")
    if "customer_id" in updates:
        _get_customer(session, updates["customer_id"])
    if "appointment_date" in updates:
        updates["appointment_date"] = _midnight(updates["appointment_date"])
    for field in ("start_time", "end_time"):
        if field in updates:
            updates[field] = updates[field].strip()

    # 3) Re-check the slot when the booked window moves or a cancelled booking comes back
    next_status = updates.get("status", target.status)
    next_date = updates.get("appointment_date", target.appointment_date)
    next_service = updates.get("service_id", target.service_id)
    next_start = updates.get("start_time", target.start_time)
    next_end = updates.get("end_time", target.end_time)

    window_changed = (
        _midnight(next_date) != _midnight(target.appointment_date)
        or next_service != target.service_id
        or next_start != target.start_time
        or next_end != target.end_time
    )
    reactivated = target.status == AppointmentStatus.cancelled.value

    if next_status != AppointmentStatus.cancelled.value and (window_changed or reactivated):
        _check_slot(session, next_service, next_date, next_start, next_end, exclude_id=target.id)

    # 4) Persist
    previous_status = target.status
    try:
        updated = store_update_appointment(session, target, updates)
    except SlotTakenError:
        raise HTTPException(status_code=409, detail=SLOT_TAKEN)

    if updated.status != previous_status:
        logger.info("Appointment %s status %s -> %s by user %s",
                    updated.id, previous_status, updated.status, current_user["id"])
    return updated


@router.patch("/appointments/{appt_id}", response_model=AppointmentPublic)
def update_appointment(
    appt_id: int,
    changes: AppointmentUpdate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    return _apply_update(session, appt_id, changes, current_user)


@router.patch("/admin/appointments/{appt_id}", response_model=AppointmentPublic)
def admin_update_appointment(
    appt_id: int,
    changes: AppointmentUpdate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "admin")
    return _apply_update(session, appt_id, changes, current_user)
