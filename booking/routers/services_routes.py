# booking/routers/services_routes.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from booking.db import get_session
from booking.models import Service
from booking.schemas import ServiceCreate, ServicePublic, ServiceUpdate
from booking.auth import get_current_user
from booking.deps import require_role
from booking.stores import ensure_default_services, find_service_by_name

router = APIRouter(
    tags=["services"],
)


@router.get("/services", response_model=List[ServicePublic])
def list_services(session: Session = Depends(get_session)):
    ensure_default_services(session)
    return session.exec(
        select(Service).where(Service.is_active == True).order_by(Service.id)  # noqa: E712
    ).all()


@router.get("/admin/services", response_model=List[ServicePublic])
def list_all_services(
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "admin")
    ensure_default_services(session)
    return session.exec(select(Service).order_by(Service.id)).all()


@router.post("/admin/services", response_model=ServicePublic, status_code=201)
def create_service(
    service: ServiceCreate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "admin")

    if find_service_by_name(session, service.name) is not None:
        raise HTTPException(status_code=409, detail="Service with this name already exists.")

    db_service = Service(
        name=service.name.strip(),
        description=service.description,
        duration_minutes=service.duration_minutes,
        price=service.price,
        is_active=service.is_active,
        created_by=current_user["id"],
    )
    session.add(db_service)
    session.commit()
    session.refresh(db_service)
    return db_service


@router.patch("/admin/services/{service_id}", response_model=ServicePublic)
def update_service(
    service_id: int,
    changes: ServiceUpdate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "admin")

    db_service = session.get(Service, service_id)
    if db_service is None:
        raise HTTPException(status_code=404, detail="Service not found.")

    updates = changes.model_dump(exclude_unset=True, exclude_none=True)
    if "name" in updates:
        if find_service_by_name(session, updates["name"], exclude_id=service_id) is not None:
            raise HTTPException(status_code=409, detail="Service with this name already exists.")
        updates["name"] = updates["name"].strip()

    for field, value in updates.items():
        setattr(db_service, field, value)

    session.add(db_service)
    session.commit()
    session.refresh(db_service)
    return db_service
