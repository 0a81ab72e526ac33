# tests/test_admin_api.py

from datetime import datetime

from booking.models import Appointment
from booking.reports import build_report

from .conftest import auth_headers


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_signup_login_and_me(client):
    res = client.post("/auth/signup", json={
        "name": "Nina", "email": "Nina@Example.com", "password": "password123", "phone": "555-0100",
    })
    assert res.status_code == 201
    assert res.json()["role"] == "customer"
    assert res.json()["email"] == "nina@example.com"

    dup = client.post("/auth/signup", json={"name": "Nina", "email": "nina@example.com", "password": "password123"})
    assert dup.status_code == 409

    bad = client.post("/auth/login", data={"username": "nina@example.com", "password": "wrong-pass"})
    assert bad.status_code == 401

    login = client.post("/auth/login", data={"username": "nina@example.com", "password": "password123"})
    assert login.status_code == 200
    token = login.json()["access_token"]

    me = client.get("/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["name"] == "Nina"


def test_garbage_token_is_rejected(client):
    res = client.get("/me", headers={"Authorization": "Bearer not-a-token"})
    assert res.status_code == 401


def test_only_admins_create_accounts(client, admin, customer):
    payload = {"name": "Second Admin", "email": "boss@example.com", "password": "password123"}
    assert client.post("/admin/users", json=payload, headers=auth_headers(customer)).status_code == 403

    res = client.post("/admin/users", json=payload, headers=auth_headers(admin))
    assert res.status_code == 201
    assert res.json()["role"] == "admin"


def test_public_availability_uses_defaults(client):
    body = client.get("/availability").json()
    assert body["open_time"] == "09:00"
    assert body["working_days"] == [1, 2, 3, 4, 5, 6]
    assert len(body["slots"]) == 7
    assert "1:00 PM" not in body["slots"]


def test_admin_updates_availability(client, admin, customer):
    headers = auth_headers(admin)

    assert client.patch("/admin/availability", json={"open_time": "08:00"},
                        headers=auth_headers(customer)).status_code == 403

    res = client.patch("/admin/availability", json={"open_time": "8am"}, headers=headers)
    assert res.status_code == 422
    assert res.json()["detail"] == "open_time must be in HH:mm format."

    res = client.patch("/admin/availability", json={"slot_duration_minutes": 5}, headers=headers)
    assert res.status_code == 422

    res = client.patch("/admin/availability", json={"break_start": "", "break_end": ""}, headers=headers)
    assert res.status_code == 200
    assert res.json()["break_start"] is None
    assert len(res.json()["slots"]) == 8

    admin_view = client.get("/admin/availability", headers=headers).json()
    assert admin_view == client.get("/availability").json()


def test_service_catalog_management(client, admin, customer, services):
    headers = auth_headers(admin)
    assert len(client.get("/services").json()) == 4

    res = client.post("/admin/services", json={"name": "Nails", "duration_minutes": 45, "price": 20}, headers=headers)
    assert res.status_code == 201
    new_id = res.json()["id"]

    dup = client.post("/admin/services", json={"name": "nails", "duration_minutes": 30}, headers=headers)
    assert dup.status_code == 409

    res = client.patch(f"/admin/services/{new_id}", json={"is_active": False}, headers=headers)
    assert res.status_code == 200
    assert [s["name"] for s in client.get("/services").json()].count("Nails") == 0
    assert len(client.get("/admin/services", headers=headers).json()) == 5

    clash = client.patch(f"/admin/services/{new_id}", json={"name": "Salon Services"}, headers=headers)
    assert clash.status_code == 409
    assert client.patch("/admin/services/9999", json={"price": 1}, headers=headers).status_code == 404
    assert client.post("/admin/services", json={"name": "X", "duration_minutes": 10},
                       headers=auth_headers(customer)).status_code == 403


def test_inactive_service_cannot_be_booked(client, admin, customer, services):
    client.patch(f"/admin/services/{services[0].id}", json={"is_active": False}, headers=auth_headers(admin))
    res = client.post("/appointments", json={
        "service_id": services[0].id,
        "appointment_date": "2030-01-07T00:00:00",
        "start_time": "9:00 AM",
        "end_time": "10:00 AM",
    }, headers=auth_headers(customer))
    assert res.status_code == 404


def _add(session, customer, service, day, start, status):
    session.add(Appointment(
        customer_id=customer.id, service_id=service.id, appointment_date=day,
        start_time=start, end_time="11:00 PM", status=status,
    ))
    session.commit()


def test_build_report(client, session, customer, services):
    now = datetime(2030, 3, 15, 12, 0)
    _add(session, customer, services[0], datetime(2030, 3, 15), "9:00 AM", "pending")
    _add(session, customer, services[0], datetime(2030, 3, 14), "9:00 AM", "completed")
    _add(session, customer, services[1], datetime(2030, 3, 2), "9:00 AM", "cancelled")
    _add(session, customer, services[1], datetime(2029, 12, 1), "9:00 AM", "approved")

    report = build_report(session, now)

    assert report["totals"] == {"today": 1, "month": 3, "all_time": 4}
    assert report["status_breakdown"] == {
        "pending": 1, "approved": 1, "rescheduled": 0, "cancelled": 1, "completed": 1,
    }

    daily = report["daily_trend"]
    assert [d["key"] for d in daily][-2:] == ["2030-03-14", "2030-03-15"]
    assert [d["total"] for d in daily] == [0, 0, 0, 0, 0, 1, 1]
    assert daily[-1]["label"] == "Mar 15"

    monthly = report["monthly_trend"]
    assert [m["key"] for m in monthly] == ["2029-10", "2029-11", "2029-12", "2030-01", "2030-02", "2030-03"]
    assert [m["total"] for m in monthly] == [0, 0, 1, 0, 0, 3]

    perf = report["service_performance"]
    assert [p["service_id"] for p in perf] == [services[0].id, services[1].id]
    assert perf[0]["completed"] == 1
    assert perf[1]["cancelled"] == 1


def test_reports_endpoint_is_admin_only(client, admin, customer):
    assert client.get("/admin/reports", headers=auth_headers(customer)).status_code == 403

    res = client.get("/admin/reports", headers=auth_headers(admin))
    assert res.status_code == 200
    assert res.json()["totals"]["all_time"] == 0
    assert len(res.json()["daily_trend"]) == 7
