# models.py
from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Float, DateTime, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from datetime import datetime
from database import Base

SENSOR_TYPES = ("crowd", "temperature", "humidity", "air-quality", "motion")
SENSOR_STATUSES = ("online", "offline", "warning")
ANALYSIS_FILE_TYPES = ("image", "video", "live")
USER_ROLES = ("admin", "user")

DEFAULT_LOCATION = "Hitech City"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=True)  # None for OAuth-only accounts
    google_id = Column(String, unique=True, nullable=True)
    linkedin_id = Column(String, unique=True, nullable=True)
    role = Column(String, default="user", nullable=False)  # admin, user
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    analyses = relationship("Analysis", back_populates="user", cascade="all, delete-orphan")
    preference = relationship(
        "UserPreference", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )


class Sensor(Base):
    __tablename__ = "sensors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    location = Column(String, index=True, nullable=False)
    type = Column(String, nullable=False)  # crowd, temperature, humidity, air-quality, motion
    status = Column(String, default="online", nullable=False)  # online, offline, warning
    battery = Column(Integer, default=100, nullable=False)  # 0-100 %
    data_value = Column(Float, nullable=True)  # Last reading
    data_unit = Column(String, nullable=True)
    last_updated = Column(DateTime, default=datetime.utcnow, nullable=False)

    @property
    def data(self):
        if self.data_value is None:
            return None
        return {"value": self.data_value, "unit": self.data_unit or ""}


class Location(Base):
    __tablename__ = "locations"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, index=True, nullable=False)
    lat = Column(Float, nullable=True)
    lng = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def coordinates(self):
        if self.lat is None or self.lng is None:
            return None
        return {"lat": self.lat, "lng": self.lng}


class Analysis(Base):
    __tablename__ = "analyses"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    file_type = Column(String, nullable=False)  # image, video, live
    file_path = Column(String, nullable=True)
    location = Column(String, index=True, nullable=False)
    results = Column(JSON, nullable=False)
    timestamp = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    # Relationship
    user = relationship("User", back_populates="analyses")


class UserPreference(Base):
    __tablename__ = "user_preferences"

    user_id = Column(Integer, ForeignKey("users.id"), primary_key=True)
    current_location = Column(String, default=DEFAULT_LOCATION, nullable=False)
    recent_locations = Column(JSON, default=list, nullable=False)  # Most recent first, max 5
    bookmarked_locations = Column(JSON, default=list, nullable=False)

    user = relationship("User", back_populates="preference")
