# routers/locations.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session
from database import get_db
from models import Location, User
from schemas import LocationCreate, LocationListOut, LocationDetailOut, LocationMessageOut, StatusResponse
from services.location_search import search_locations
from utils.security import get_current_user, require_admin
from typing import Optional
import logging

router = APIRouter(prefix="/api/locations", tags=["Locations"])

logger = logging.getLogger(__name__)


@router.get("", response_model=LocationListOut)
def list_locations(
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List locations; ``search`` matches substrings and in-order character subsequences"""
    locations = db.query(Location).order_by(Location.name).all()

    if search and search.strip():
        locations = search_locations(locations, search, key=lambda loc: loc.name)

    return {"locations": locations}


@router.get("/{location_id}", response_model=LocationDetailOut)
def get_location(
    location_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    location = db.query(Location).filter(Location.id == location_id).first()
    if not location:
        raise HTTPException(status_code=404, detail="Location not found")
    return {"location": location}


@router.post("", response_model=LocationMessageOut, status_code=status.HTTP_201_CREATED)
def create_location(
    location: LocationCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    """Add a named location; names are unique regardless of case"""
    name = location.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Location name is required")

    if db.query(Location).filter(func.lower(Location.name) == name.lower()).first():
        raise HTTPException(status_code=400, detail="Location already exists")

    db_location = Location(
        name=name,
        lat=location.coordinates.lat if location.coordinates else None,
        lng=location.coordinates.lng if location.coordinates else None,
    )

    try:
        db.add(db_location)
        db.commit()
        db.refresh(db_location)
    except Exception as e:
        db.rollback()
        logger.error(f"Location creation error: {str(e)}")
        raise HTTPException(status_code=500, detail="Server error while creating location")

    logger.info(f"Location '{name}' created by admin {admin.id}")
    return {"message": "Location added successfully", "location": db_location}


@router.delete("/{location_id}", response_model=StatusResponse)
def delete_location(
    location_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    location = db.query(Location).filter(Location.id == location_id).first()
    if not location:
        raise HTTPException(status_code=404, detail="Location not found")

    try:
        db.delete(location)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Location deletion error: {str(e)}")
        raise HTTPException(status_code=500, detail="Server error while deleting location")

    return {"message": "Location deleted successfully"}
