# booking/routers/users_routes.py

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from booking.db import get_session
from booking.models import User
from booking.schemas import AdminUserCreate, UserPublic
from booking.auth import get_current_user, hash_password
from booking.deps import require_role
from booking.stores import find_user_by_email

router = APIRouter(
    tags=["users"],
)

@router.get("/me", response_model=UserPublic)
def me(current_user: dict = Depends(get_current_user)):
    return current_user


@router.post("/admin/users", status_code=201, response_model=UserPublic)
def create_user(
    user: AdminUserCreate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "admin")

    if find_user_by_email(session, user.email) is not None:
        raise HTTPException(status_code=409, detail="Email is already registered.")

    db_user = User(
        name=user.name.strip(),
        email=user.email.strip().lower(),
        phone=user.phone,
        password_hash=hash_password(user.password),
        role=user.role.value,
    )

    session.add(db_user)
    session.commit()
    session.refresh(db_user)
    return db_user
