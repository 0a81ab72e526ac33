# booking/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from booking.config import settings
from booking.db import init_db
from booking.routers import (
    appointments_routes,
    auth_routes,
    availability_routes,
    reports_routes,
    services_routes,
    users_routes,
)

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(title="Appointment Booking API", lifespan=lifespan)

app.include_router(auth_routes.router)
app.include_router(users_routes.router)
app.include_router(services_routes.router)
app.include_router(availability_routes.router)
app.include_router(appointments_routes.router)
app.include_router(reports_routes.router)


@app.get("/health")
def health_check():
    return {"status": "ok"}
