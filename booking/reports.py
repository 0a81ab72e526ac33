# booking/reports.py

from collections import Counter
from datetime import datetime, timedelta
from typing import List

from sqlalchemy import func
from sqlmodel import Session, select

from booking.models import Appointment, Service
from booking.schemas import AppointmentStatus


def _month_start(value: datetime, offset: int = 0) -> datetime:
    month_index = value.year * 12 + (value.month - 1) + offset
    return datetime(month_index // 12, month_index % 12 + 1, 1)


def _count(session: Session, start: datetime = None, end: datetime = None) -> int:
    stmt = select(func.count()).select_from(Appointment)
    if start is not None:
        stmt = stmt.where(Appointment.appointment_date >= start)
    if end is not None:
        stmt = stmt.where(Appointment.appointment_date < end)
    return session.exec(stmt).one()


def _dates_between(session: Session, start: datetime, end: datetime) -> List[datetime]:
    return session.exec(
        select(Appointment.appointment_date)
        .where(Appointment.appointment_date >= start)
        .where(Appointment.appointment_date < end)
    ).all()


def daily_trend(session: Session, now: datetime, days: int = 7) -> List[dict]:
    today = datetime.combine(now.date(), datetime.min.time())
    start = today - timedelta(days=days - 1)
    counts = Counter(
        d.strftime("%Y-%m-%d") for d in _dates_between(session, start, today + timedelta(days=1))
    )

    trend = []
    for offset in range(days):
        current = start + timedelta(days=offset)
        key = current.strftime("%Y-%m-%d")
        trend.append({
            "key": key,
            "label": f"{current:%b} {current.day}",
            "total": counts.get(key, 0),
        })
    return trend


def monthly_trend(session: Session, now: datetime, months: int = 6) -> List[dict]:
    start = _month_start(now, -(months - 1))
    counts = Counter(
        d.strftime("%Y-%m") for d in _dates_between(session, start, _month_start(now, 1))
    )

    trend = []
    for offset in range(months):
        current = _month_start(start, offset)
        key = current.strftime("%Y-%m")
        trend.append({
            "key": key,
            "label": current.strftime("%b %Y"),
            "total": counts.get(key, 0),
        })
    return trend


def service_performance(session: Session) -> List[dict]:
    rows = session.exec(
        select(Appointment.service_id, Appointment.status, func.count())
        .group_by(Appointment.service_id, Appointment.status)
    ).all()
    names = {s.id: s.name for s in session.exec(select(Service)).all()}

    perf = {}
    for service_id, status, total in rows:
        entry = perf.setdefault(service_id, {
            "service_id": service_id,
            "service_name": names.get(service_id, "Unknown service"),
            "total": 0,
            "completed": 0,
            "cancelled": 0,
        })
        entry["total"] += total
        if status == AppointmentStatus.completed.value:
            entry["completed"] += total
        elif status == AppointmentStatus.cancelled.value:
            entry["cancelled"] += total

    return sorted(perf.values(), key=lambda e: (-e["total"], e["service_name"]))


def build_report(session: Session, now: datetime = None) -> dict:
    now = now or datetime.now()
    today = datetime.combine(now.date(), datetime.min.time())

    status_breakdown = {status.value: 0 for status in AppointmentStatus}
    rows = session.exec(
        select(Appointment.status, func.count()).group_by(Appointment.status)
    ).all()
    for status, total in rows:
        if status in status_breakdown:
            status_breakdown[status] = total

    return {
        "totals": {
            "today": _count(session, today, today + timedelta(days=1)),
            "month": _count(session, _month_start(now), _month_start(now, 1)),
            "all_time": _count(session),
        },
        "status_breakdown": status_breakdown,
        "daily_trend": daily_trend(session, now),
        "monthly_trend": monthly_trend(session, now),
        "service_performance": service_performance(session),
    }
