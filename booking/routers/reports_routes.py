# booking/routers/reports_routes.py

from fastapi import APIRouter, Depends
from sqlmodel import Session

from booking.db import get_session
from booking.schemas import ReportResponse
from booking.auth import get_current_user
from booking.deps import require_role
from booking.reports import build_report

router = APIRouter(
    prefix="/admin",
    tags=["reports"],
)


@router.get("/reports", response_model=ReportResponse)
def reports(
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "admin")
    return build_report(session)
