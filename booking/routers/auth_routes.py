# booking/routers/auth_routes.py

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session

from booking.db import get_session
from booking.models import User
from booking.schemas import Token, UserCreate, UserPublic
from booking.auth import verify_password, create_access_token, hash_password
from booking.stores import find_user_by_email

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post("/signup", status_code=201, response_model=UserPublic)
def signup(
    user: UserCreate,
    session: Session = Depends(get_session),
):
    # 1) Check if email already exists
    if find_user_by_email(session, user.email) is not None:
        raise HTTPException(status_code=409, detail="Email is already registered.")

    # 2) Create customer in DB
    db_user = User(
        name=user.name.strip(),
        email=user.email.strip().lower(),
        phone=user.phone,
        password_hash=hash_password(user.password),
        role="customer",
    )

    session.add(db_user)
    session.commit()
    session.refresh(db_user)  # fills db_user.id

    logger.info("Customer %s signed up", db_user.id)
    return db_user


@router.post("/login", response_model=Token)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    session: Session = Depends(get_session),
):
    # Swagger OAuth2 "password" flow uses "username" field
    user = find_user_by_email(session, form_data.username)

    if user is None or not verify_password(form_data.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token({"sub": str(user.id), "role": user.role})
    return {"access_token": token, "token_type": "bearer"}
