# booking/routers/availability_routes.py

from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from booking.db import get_session
from booking.models import BusinessHours, Service
from booking.schemas import AvailabilityPublic, BusinessHoursUpdate, DaySlotsResponse
from booking.auth import get_current_user
from booking.deps import require_role
from booking.scheduling import build_slots, find_conflict, parse_12
from booking.scheduling.timecodec import sunday_weekday
from booking.stores import (
    check_business_hours,
    find_same_day_appointments,
    get_business_hours,
    save_business_hours,
)

router = APIRouter(
    tags=["availability"],
)


def _availability_payload(settings: BusinessHours) -> dict:
    return {
        "open_time": settings.open_time,
        "close_time": settings.close_time,
        "slot_duration_minutes": settings.slot_duration_minutes,
        "working_days": settings.working_days,
        "break_start": settings.break_start,
        "break_end": settings.break_end,
        "slots": build_slots(settings),
    }


@router.get("/availability", response_model=AvailabilityPublic)
def public_availability(session: Session = Depends(get_session)):
    return _availability_payload(get_business_hours(session))


@router.get("/admin/availability", response_model=AvailabilityPublic)
def admin_availability(
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "admin")
    return _availability_payload(get_business_hours(session))


@router.patch("/admin/availability", response_model=AvailabilityPublic)
def update_availability(
    changes: BusinessHoursUpdate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "admin")

    updates = changes.model_dump(exclude_unset=True)
    error = check_business_hours(get_business_hours(session), updates)
    if error:
        raise HTTPException(status_code=422, detail=error)

    return _availability_payload(save_business_hours(session, updates))


@router.get("/availability/{service_id}/slots", response_model=DaySlotsResponse)
def day_slots(
    service_id: int,
    date: date,
    session: Session = Depends(get_session),
):
    # 1) Lookup service
    service = session.get(Service, service_id)
    if service is None or not service.is_active:
        raise HTTPException(status_code=404, detail="Service not found.")

    # 2) Check working day
    settings = get_business_hours(session)
    if sunday_weekday(date) not in settings.working_days:
        return {"service_id": service_id, "date": date, "slots": []}

    # 3) Generate slots, subtract the ones already booked for this service
    booked = find_same_day_appointments(session, service_id, date)
    available = []
    for slot in build_slots(settings):
        slot_start = parse_12(slot)
        slot_end = slot_start + settings.slot_duration_minutes
        if find_conflict(booked, slot_start, slot_end) is None:
            available.append(slot)

    return {"service_id": service_id, "date": date, "slots": available}
