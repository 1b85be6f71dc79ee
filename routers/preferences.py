# routers/preferences.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from database import get_db
from models import User, UserPreference, DEFAULT_LOCATION
from schemas import PreferenceOut, LocationChoice, BookmarkOut
from services.location_search import push_recent, toggle_bookmark
from utils.security import get_current_user
import logging

router = APIRouter(prefix="/api/preferences", tags=["Preferences"])

logger = logging.getLogger(__name__)


def get_or_create_preference(db: Session, user: User) -> UserPreference:
    preference = db.query(UserPreference).filter(UserPreference.user_id == user.id).first()
    if preference is None:
        preference = UserPreference(
            user_id=user.id,
            current_location=DEFAULT_LOCATION,
            recent_locations=[],
            bookmarked_locations=[],
        )
        db.add(preference)
        db.commit()
        db.refresh(preference)
    return preference


def _chosen_location(choice: LocationChoice) -> str:
    location = choice.location.strip()
    if not location:
        raise HTTPException(status_code=400, detail="Location is required")
    return location


def _save(db: Session, preference: UserPreference):
    try:
        db.commit()
        db.refresh(preference)
    except Exception as e:
        db.rollback()
        logger.error(f"Preference update error: {str(e)}")
        raise HTTPException(status_code=500, detail="Server error while saving preferences")


@router.get("", response_model=PreferenceOut)
def read_preferences(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Current location, recently viewed locations and bookmarks"""
    return get_or_create_preference(db, current_user)


@router.put("/current", response_model=PreferenceOut)
def set_current_location(
    choice: LocationChoice,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Switch the dashboard location; it also moves to the front of the recents list"""
    location = _chosen_location(choice)
    preference = get_or_create_preference(db, current_user)

    preference.current_location = location
    # Reassign so the JSON column registers the change
    preference.recent_locations = push_recent(list(preference.recent_locations or []), location)
    _save(db, preference)
    return preference


@router.post("/bookmarks", response_model=BookmarkOut)
def toggle_location_bookmark(
    choice: LocationChoice,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    location = _chosen_location(choice)
    preference = get_or_create_preference(db, current_user)

    preference.bookmarked_locations = toggle_bookmark(list(preference.bookmarked_locations or []), location)
    _save(db, preference)

    return {
        "location": location,
        "bookmarked": location in preference.bookmarked_locations,
        "bookmarked_locations": preference.bookmarked_locations,
    }
