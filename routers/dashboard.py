# routers/dashboard.py
from fastapi import APIRouter, Depends, Query
from models import User, DEFAULT_LOCATION
from services import mock_data
from utils.security import get_current_user
from typing import Optional, Literal

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


def location_query():
    return Query(DEFAULT_LOCATION, min_length=1, max_length=100)


@router.get("/overview")
def overview(location: str = location_query(), current_user: User = Depends(get_current_user)):
    """Every dashboard widget for a location in one payload"""
    return mock_data.generate_overview(location)


@router.get("/density")
def current_density(
    location: str = location_query(),
    density: Optional[int] = Query(None, ge=0, le=100),
    current_user: User = Depends(get_current_user)
):
    """Last 30 minutes of crowd density, optionally anchored on a known current value"""
    return mock_data.generate_density_series(location, density=density)


@router.get("/trends")
def density_trends(location: str = location_query(), current_user: User = Depends(get_current_user)):
    return mock_data.generate_trends(location)


@router.get("/heatmap")
def heat_map(location: str = location_query(), current_user: User = Depends(get_current_user)):
    return mock_data.generate_heatmap(location)


@router.get("/anomalies")
def anomalies(
    location: str = location_query(),
    severity: Optional[Literal["high", "medium", "low"]] = None,
    current_user: User = Depends(get_current_user)
):
    return {"location": location, "anomalies": mock_data.generate_anomalies(location, severity=severity)}


@router.get("/predictions")
def predictions(location: str = location_query(), current_user: User = Depends(get_current_user)):
    return mock_data.generate_predictions(location)


@router.get("/sensor-readings")
def sensor_readings(
    location: str = location_query(),
    ticks: int = Query(0, ge=0, le=240),
    current_user: User = Depends(get_current_user)
):
    """Environmental readings after ``ticks`` simulated 15-second refreshes"""
    return mock_data.simulate_sensor_updates(location, ticks)


@router.get("/notifications")
def notifications(location: str = location_query(), current_user: User = Depends(get_current_user)):
    items = mock_data.generate_notifications(location)
    return {
        "location": location,
        "unread": sum(1 for n in items if not n["read"]),
        "notifications": items,
    }
