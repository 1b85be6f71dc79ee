# routers/sensors.py
from fastapi import APIRouter, Depends, HTTPException, status as http_status
from sqlalchemy import func
from sqlalchemy.orm import Session
from database import get_db
from models import Sensor, User
from schemas import (
    SensorCreate, SensorUpdate, SensorListOut, SensorDetailOut, SensorMessageOut,
    SensorType, SensorStatus, StatusResponse,
)
from utils.security import get_current_user, require_admin
from datetime import datetime
from typing import Optional
import logging

router = APIRouter(prefix="/api/sensors", tags=["Sensors"])

logger = logging.getLogger(__name__)


def _get_sensor_or_404(db: Session, sensor_id: int) -> Sensor:
    sensor = db.query(Sensor).filter(Sensor.id == sensor_id).first()
    if not sensor:
        raise HTTPException(status_code=404, detail="Sensor not found")
    return sensor


@router.get("", response_model=SensorListOut)
def list_sensors(
    location: Optional[str] = None,
    type: Optional[SensorType] = None,
    status: Optional[SensorStatus] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List sensors, optionally filtered by location (case-insensitive), type and status"""
    query = db.query(Sensor)

    if location:
        query = query.filter(func.lower(Sensor.location) == location.strip().lower())

    if type:
        query = query.filter(Sensor.type == type)

    if status:
        query = query.filter(Sensor.status == status)

    return {"sensors": query.order_by(Sensor.id).all()}


@router.get("/{sensor_id}", response_model=SensorDetailOut)
def get_sensor(
    sensor_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return {"sensor": _get_sensor_or_404(db, sensor_id)}


@router.post("", response_model=SensorMessageOut, status_code=http_status.HTTP_201_CREATED)
def create_sensor(
    sensor: SensorCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    """Add a sensor; new sensors start online with a full battery"""
    db_sensor = Sensor(
        name=sensor.name.strip(),
        location=sensor.location.strip(),
        type=sensor.type,
        status="online",
        battery=100,
        data_value=sensor.data.value if sensor.data else None,
        data_unit=sensor.data.unit if sensor.data else None,
        last_updated=datetime.utcnow(),
    )

    try:
        db.add(db_sensor)
        db.commit()
        db.refresh(db_sensor)
    except Exception as e:
        db.rollback()
        logger.error(f"Sensor creation error: {str(e)}")
        raise HTTPException(status_code=500, detail="Server error while creating sensor")

    logger.info(f"Sensor {db_sensor.id} created by admin {admin.id}")
    return {"message": "Sensor added successfully", "sensor": db_sensor}


@router.put("/{sensor_id}", response_model=SensorMessageOut)
def update_sensor(
    sensor_id: int,
    updates: SensorUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    """Apply a partial update to a sensor"""
    sensor = _get_sensor_or_404(db, sensor_id)

    changes = updates.model_dump(exclude_unset=True)
    data = changes.pop("data", None)
    for field, value in changes.items():
        if value is None:
            continue
        setattr(sensor, field, value.strip() if isinstance(value, str) else value)

    if data is not None:
        sensor.data_value = data["value"]
        sensor.data_unit = data["unit"]

    sensor.last_updated = datetime.utcnow()

    try:
        db.commit()
        db.refresh(sensor)
    except Exception as e:
        db.rollback()
        logger.error(f"Sensor update error: {str(e)}")
        raise HTTPException(status_code=500, detail="Server error while updating sensor")

    return {"message": "Sensor updated successfully", "sensor": sensor}


@router.delete("/{sensor_id}", response_model=StatusResponse)
def delete_sensor(
    sensor_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    sensor = _get_sensor_or_404(db, sensor_id)

    try:
        db.delete(sensor)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Sensor deletion error: {str(e)}")
        raise HTTPException(status_code=500, detail="Server error while deleting sensor")

    logger.info(f"Sensor {sensor_id} deleted by admin {admin.id}")
    return {"message": "Sensor deleted successfully"}
