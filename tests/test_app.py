import random

import models
from services.seeding import (
    DEMO_SENSOR_LOCATIONS,
    build_demo_sensors,
    ensure_admin,
    seed_demo_sensors,
)
from utils.security import verify_password


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["message"] == "Crowd Analyzer API"


def test_health_reports_database(client):
    body = client.get("/health").json()

    assert body["status"] == "healthy"
    assert body["database"] == "connected"
    assert body["uploads"] == "writable"


def test_security_headers(client):
    response = client.get("/health")

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert float(response.headers["X-Processing-Time-Ms"]) >= 0


def test_error_responses_also_get_headers(client):
    response = client.get("/api/sensors")

    assert response.status_code == 401
    assert response.headers["X-Frame-Options"] == "DENY"


def test_demo_sensors_per_location():
    sensors = build_demo_sensors(rng=random.Random(7))

    for location in DEMO_SENSOR_LOCATIONS:
        count = sum(1 for s in sensors if s.location == location)
        assert 2 <= count <= 4
    for sensor in sensors:
        assert sensor.type in models.SENSOR_TYPES
        assert sensor.status in models.SENSOR_STATUSES
        assert 40 <= sensor.battery <= 100
        if sensor.type == "motion":
            assert sensor.data is None
        else:
            assert sensor.data["unit"]


def test_seed_demo_sensors_only_once(db):
    created = seed_demo_sensors(db, rng=random.Random(3))

    assert created == db.query(models.Sensor).count()
    assert seed_demo_sensors(db) == 0


def test_ensure_admin(db):
    admin = ensure_admin(db, "root@example.com", "rootpass")

    assert admin.role == "admin"
    assert verify_password("rootpass", admin.hashed_password)
    assert ensure_admin(db, "root@example.com", "other").id == admin.id
    assert ensure_admin(db, None, None) is None


def test_configured_admin_email_is_normalised(client, db):
    admin = ensure_admin(db, " Root@Example.com", "rootpass")
    assert admin.email == "root@example.com"
    assert ensure_admin(db, "ROOT@example.com", "rootpass").id == admin.id

    response = client.post("/api/auth/login", json={"email": "Root@Example.com", "password": "rootpass"})
    assert response.status_code == 200
    assert response.json()["user"]["role"] == "admin"
