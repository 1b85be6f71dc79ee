# routers/analysis.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session
from database import get_db
from models import Analysis, User
from schemas import AnalysisListOut, AnalysisDetailOut, FileType, StatusResponse
from utils.security import get_current_user
from datetime import datetime, timezone
from typing import Optional
import os
import logging

router = APIRouter(prefix="/api/analysis", tags=["Analysis"])

logger = logging.getLogger(__name__)


def _as_naive_utc(value: datetime) -> datetime:
    """Stored timestamps are naive UTC"""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _get_owned_analysis(db: Session, analysis_id: int, user: User) -> Analysis:
    analysis = db.query(Analysis).filter(Analysis.id == analysis_id).first()
    if not analysis:
        raise HTTPException(status_code=404, detail="Analysis not found")
    if analysis.user_id != user.id and user.role != "admin":
        raise HTTPException(status_code=403, detail="Not allowed to access this analysis")
    return analysis


@router.get("", response_model=AnalysisListOut)
def list_analyses(
    location: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    type: Optional[FileType] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Current user's analyses, newest first.

    The date range applies only when both ``start_date`` and ``end_date``
    are given; both ends are inclusive.
    """
    query = db.query(Analysis).filter(Analysis.user_id == current_user.id)

    if location:
        query = query.filter(func.lower(Analysis.location) == location.strip().lower())

    if start_date and end_date:
        query = query.filter(
            Analysis.timestamp >= _as_naive_utc(start_date),
            Analysis.timestamp <= _as_naive_utc(end_date),
        )

    if type:
        query = query.filter(Analysis.file_type == type)

    return {"analyses": query.order_by(Analysis.timestamp.desc(), Analysis.id.desc()).all()}


@router.get("/{analysis_id}", response_model=AnalysisDetailOut)
def get_analysis(
    analysis_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return {"analysis": _get_owned_analysis(db, analysis_id, current_user)}


@router.delete("/{analysis_id}", response_model=StatusResponse)
def delete_analysis(
    analysis_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete an analysis together with its stored upload"""
    analysis = _get_owned_analysis(db, analysis_id, current_user)
    file_path = analysis.file_path

    try:
        db.delete(analysis)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Analysis deletion error: {str(e)}")
        raise HTTPException(status_code=500, detail="Server error while deleting analysis")

    if file_path and os.path.exists(file_path):
        os.remove(file_path)
        logger.info(f"Removed stored upload {file_path}")

    return {"message": "Analysis deleted successfully"}
