# routers/upload.py
from fastapi import APIRouter, UploadFile, File, Depends, HTTPException, Form
from sqlalchemy.orm import Session
from database import get_db
from models import Analysis, User
from schemas import UploadResponse, LivestreamRequest, LivestreamOut
from services.analysis_service import analyze_media_file
from services.mock_data import generate_density_series, density_status
from utils.security import get_current_user
from utils.validation import validate_upload_file, sanitize_filename
from config import config
from datetime import datetime
import secrets
import string
import shutil
import os
import uuid
import logging

router = APIRouter(prefix="/api/upload", tags=["Upload"])
livestream_router = APIRouter(prefix="/api/livestream", tags=["Upload"])

logger = logging.getLogger(__name__)

CONNECTION_ID_ALPHABET = string.ascii_lowercase + string.digits


def store_upload(file: UploadFile) -> str:
    """Write the upload to the upload directory under a unique name"""
    os.makedirs(config.UPLOAD_DIR, exist_ok=True)
    unique_filename = f"{uuid.uuid4().hex}-{sanitize_filename(file.filename)}"
    file_path = os.path.join(config.UPLOAD_DIR, unique_filename)

    with open(file_path, "wb") as buffer:
        shutil.copyfileobj(file.file, buffer)
    return file_path


def _analyze_upload(file: UploadFile, location: str, expected_type: str,
                    db: Session, current_user: User) -> Analysis:
    file_type = validate_upload_file(file, expected_type)
    location = location.strip()
    if not location:
        raise HTTPException(status_code=400, detail="Location is required")

    file_path = None
    try:
        file_path = store_upload(file)
        results = analyze_media_file(file_path, file_type)

        analysis = Analysis(
            user_id=current_user.id,
            file_type=file_type,
            file_path=file_path,
            location=location,
            results=results,
            timestamp=datetime.utcnow(),
        )
        db.add(analysis)
        db.commit()
        db.refresh(analysis)

    except Exception as e:
        db.rollback()
        # Clean up file on error
        if file_path and os.path.exists(file_path):
            os.remove(file_path)

        logger.error(f"Error during {file_type} upload: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Server error during {file_type} upload")

    logger.info(f"{file_type.capitalize()} analysis {analysis.id} by user {current_user.id} at {location}")
    return analysis


@router.post("/image", response_model=UploadResponse)
async def upload_image(
    file: UploadFile = File(...),
    location: str = Form(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Upload an image and store a crowd analysis for it"""
    analysis = _analyze_upload(file, location, "image", db, current_user)
    return {"message": "Image uploaded and analyzed successfully", "analysis": analysis}


@router.post("/video", response_model=UploadResponse)
async def upload_video(
    file: UploadFile = File(...),
    location: str = Form(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Upload a video and store a crowd analysis with a per-frame density timeline"""
    analysis = _analyze_upload(file, location, "video", db, current_user)
    return {"message": "Video uploaded and analyzed successfully", "analysis": analysis}


@livestream_router.post("", response_model=LivestreamOut)
def start_livestream(
    request: LivestreamRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Register a live feed for a location.

    No media is streamed; the connection id identifies the simulated feed and
    a "live" analysis records the density snapshot at connection time.
    """
    location = request.location.strip()
    if not location:
        raise HTTPException(status_code=400, detail="Location is required")

    connection_id = "live-" + "".join(secrets.choice(CONNECTION_ID_ALPHABET) for _ in range(8))
    density = generate_density_series(location)["current"]
    now = datetime.utcnow()

    try:
        analysis = Analysis(
            user_id=current_user.id,
            file_type="live",
            file_path=None,
            location=location,
            results={
                "connectionId": connection_id,
                "density": density,
                "status": density_status(density),
                "anomalies": [],
            },
            timestamp=now,
        )
        db.add(analysis)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Livestream error: {str(e)}")
        raise HTTPException(status_code=500, detail="Server error during livestream setup")

    logger.info(f"Live feed {connection_id} opened by user {current_user.id} at {location}")
    return {
        "message": "Live feed connection established",
        "connectionId": connection_id,
        "location": location,
        "timestamp": now,
    }
