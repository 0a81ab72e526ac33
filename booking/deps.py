# booking/deps.py

from fastapi import HTTPException

def require_role(user: dict, role: str):
    if user["role"] != role:
        raise HTTPException(status_code=403, detail="Forbidden")

def can_access_appointment(user: dict, appointment) -> bool:
    return user["role"] == "admin" or appointment.customer_id == user["id"]
