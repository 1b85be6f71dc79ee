# routers/auth.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from database import get_db
from models import User
from schemas import UserCreate, UserLogin, AuthResponse, VerifyResponse
from utils.security import hash_password, verify_password, create_user_token, get_current_user
import logging

router = APIRouter(prefix="/api/auth", tags=["Authentication"])

logger = logging.getLogger(__name__)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(user: UserCreate, db: Session = Depends(get_db)):
    """Register a new user"""
    email = user.email.strip().lower()

    # Check if user already exists
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(
            status_code=400,
            detail="User already exists with this email"
        )

    try:
        db_user = User(
            name=user.name.strip(),
            email=email,
            hashed_password=hash_password(user.password),
            role="user"
        )
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
    except Exception as e:
        db.rollback()
        logger.error(f"Registration error: {str(e)}")
        raise HTTPException(status_code=500, detail="Server error during registration")

    logger.info(f"Registered user {db_user.id}")
    return {
        "message": "User registered successfully",
        "token": create_user_token(db_user),
        "user": db_user,
    }


@router.post("/login", response_model=AuthResponse)
def login(user: UserLogin, db: Session = Depends(get_db)):
    """Login user and return access token"""
    db_user = db.query(User).filter(User.email == user.email.strip().lower()).first()

    if not db_user or not verify_password(user.password, db_user.hashed_password):
        raise HTTPException(status_code=400, detail="Invalid email or password")

    if not db_user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is disabled")

    return {
        "message": "Login successful",
        "token": create_user_token(db_user),
        "user": db_user,
    }


@router.get("/verify", response_model=VerifyResponse)
def verify(current_user: User = Depends(get_current_user)):
    """Check a token and return the user it belongs to"""
    return {"user": current_user}
