# booking/db.py

import logging

from sqlmodel import SQLModel, create_engine, Session

from booking.config import settings

logger = logging.getLogger(__name__)

# SQLite by default (file-based), anything SQLAlchemy understands otherwise
connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}  # required for SQLite + FastAPI

engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.SQL_ECHO,
    connect_args=connect_args,
)


# Dependency: one session per request
def get_session():
    with Session(engine) as session:
        yield session


def init_db(bind=None):
    """Create tables and make sure the default settings (and catalog) exist."""
    from booking import models  # noqa: F401  registers the tables
    from booking.stores import ensure_admin, ensure_default_services, get_business_hours

    bind = bind or engine
    SQLModel.metadata.create_all(bind)

    with Session(bind) as session:
        get_business_hours(session)
        if settings.SEED_DEFAULT_SERVICES:
            ensure_default_services(session)
        if settings.ADMIN_EMAIL and settings.ADMIN_PASSWORD:
            ensure_admin(session, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD, settings.ADMIN_NAME)
    logger.info("Database ready")
