import pytest

from models import DEFAULT_LOCATION

ENDPOINTS = [
    "/api/dashboard/overview",
    "/api/dashboard/density",
    "/api/dashboard/trends",
    "/api/dashboard/heatmap",
    "/api/dashboard/anomalies",
    "/api/dashboard/predictions",
    "/api/dashboard/sensor-readings",
    "/api/dashboard/notifications",
]


@pytest.mark.parametrize("path", ENDPOINTS)
def test_dashboard_requires_auth(client, path):
    assert client.get(path).status_code == 401


@pytest.mark.parametrize("path", ENDPOINTS)
def test_dashboard_defaults_to_home_location(client, user_headers, path):
    response = client.get(path, headers=user_headers)

    assert response.status_code == 200
    assert response.json()["location"] == DEFAULT_LOCATION


def test_overview_contains_every_widget(client, user_headers):
    body = client.get("/api/dashboard/overview", params={"location": "Uppal"}, headers=user_headers).json()

    for key in ("density", "trends", "heatmap", "anomalies", "predictions", "sensors", "notifications"):
        assert key in body
    assert body["heatmap"]["location"] == "Uppal"


def test_heatmap_is_stable_per_location(client, user_headers):
    first = client.get("/api/dashboard/heatmap", params={"location": "Miyapur"}, headers=user_headers).json()
    second = client.get("/api/dashboard/heatmap", params={"location": "Miyapur"}, headers=user_headers).json()
    assert first == second


def test_density_anchor(client, user_headers):
    response = client.get("/api/dashboard/density", params={"density": 95}, headers=user_headers)

    body = response.json()
    assert len(body["series"]) == 31
    assert body["status"] == "high"


def test_density_anchor_out_of_range(client, user_headers):
    assert client.get("/api/dashboard/density", params={"density": 150}, headers=user_headers).status_code == 422


def test_anomaly_severity_filter(client, user_headers):
    response = client.get("/api/dashboard/anomalies", params={"severity": "high"}, headers=user_headers)

    assert response.status_code == 200
    assert all(a["severity"] == "high" for a in response.json()["anomalies"])


def test_anomaly_severity_must_be_known(client, user_headers):
    response = client.get("/api/dashboard/anomalies", params={"severity": "critical"}, headers=user_headers)
    assert response.status_code == 422


def test_sensor_readings_after_ticks(client, user_headers):
    body = client.get("/api/dashboard/sensor-readings", params={"ticks": 4}, headers=user_headers).json()

    assert [r["type"] for r in body["readings"]] == ["crowd", "temperature", "humidity", "air-quality"]
    assert all("previous_value" in r for r in body["readings"])


def test_sensor_readings_tick_limit(client, user_headers):
    response = client.get("/api/dashboard/sensor-readings", params={"ticks": 1000}, headers=user_headers)
    assert response.status_code == 422


def test_notifications_unread_count(client, user_headers):
    body = client.get("/api/dashboard/notifications", headers=user_headers).json()
    assert body["unread"] == sum(1 for n in body["notifications"] if not n["read"])


def test_empty_location_rejected(client, user_headers):
    response = client.get("/api/dashboard/heatmap", params={"location": ""}, headers=user_headers)
    assert response.status_code == 422
