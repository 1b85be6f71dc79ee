# routers/admin.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session
from database import get_db
from models import User, Sensor, Location, Analysis
from schemas import AdminUserOut, AdminUserUpdate
from utils.security import require_admin
from config import config
from datetime import datetime
from typing import List
from pydantic import BaseModel
import os
import logging

router = APIRouter(prefix="/api/admin", tags=["Admin"])

logger = logging.getLogger(__name__)


class AdminUserListOut(BaseModel):
    users: List[AdminUserOut]


class AdminUserMessageOut(BaseModel):
    message: str
    user: AdminUserOut


def _directory_size(path: str) -> int:
    total = 0
    if os.path.exists(path):
        for root, dirs, files in os.walk(path):
            total += sum(os.path.getsize(os.path.join(root, name)) for name in files)
    return total


@router.get("/users", response_model=AdminUserListOut)
def list_users(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    """Get all users (password hashes are never returned)"""
    users = db.query(User).order_by(User.id).offset(skip).limit(limit).all()
    return {"users": users}


@router.put("/users/{user_id}", response_model=AdminUserMessageOut)
def update_user(
    user_id: int,
    updates: AdminUserUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    """Change a user's role or enable/disable the account"""
    db_user = db.query(User).filter(User.id == user_id).first()
    if db_user is None:
        raise HTTPException(status_code=404, detail="User not found")

    if updates.role is not None:
        db_user.role = updates.role
    if updates.is_active is not None:
        db_user.is_active = updates.is_active

    try:
        db.commit()
        db.refresh(db_user)
    except Exception as e:
        db.rollback()
        logger.error(f"User update error: {str(e)}")
        raise HTTPException(status_code=500, detail="Server error while updating user")

    logger.info(f"User {user_id} updated by admin {admin.id}: role={db_user.role} active={db_user.is_active}")
    return {"message": "User updated successfully", "user": db_user}


@router.get("/stats")
def get_system_stats(
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    """Record counts and upload storage usage"""
    try:
        sensor_stats = db.query(Sensor.status, func.count(Sensor.id)).group_by(Sensor.status).all()
        analysis_stats = db.query(Analysis.file_type, func.count(Analysis.id)).group_by(Analysis.file_type).all()
        upload_size = _directory_size(config.UPLOAD_DIR)

        return {
            "timestamp": datetime.utcnow().isoformat(),
            "users": {
                "total": db.query(User).count(),
                "admins": db.query(User).filter(User.role == "admin").count(),
                "inactive": db.query(User).filter(User.is_active.is_(False)).count(),
            },
            "sensors": {
                "total": db.query(Sensor).count(),
                "by_status": {sensor_status: count for sensor_status, count in sensor_stats},
            },
            "locations": db.query(Location).count(),
            "analyses": {
                "total": db.query(Analysis).count(),
                "by_type": {file_type: count for file_type, count in analysis_stats},
            },
            "storage": {
                "upload_size_bytes": upload_size,
                "upload_size_mb": round(upload_size / (1024 * 1024), 2),
            },
        }

    except Exception as e:
        logger.error(f"Error retrieving system stats: {str(e)}")
        raise HTTPException(status_code=500, detail="Server error while retrieving stats")
