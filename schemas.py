# schemas.py
# Defines request/response Pydantic models for validation
from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime

SensorType = Literal["crowd", "temperature", "humidity", "air-quality", "motion"]
SensorStatus = Literal["online", "offline", "warning"]
FileType = Literal["image", "video", "live"]
Role = Literal["admin", "user"]

# -------------------- USER --------------------
class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6)

class UserLogin(BaseModel):
    email: str
    password: str

class UserOut(BaseModel):
    id: int
    name: str
    email: str
    role: str

    class Config:
        from_attributes = True

class AdminUserOut(UserOut):
    is_active: bool
    created_at: Optional[datetime] = None

class AdminUserUpdate(BaseModel):
    role: Optional[Role] = None
    is_active: Optional[bool] = None

class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserOut

class VerifyResponse(BaseModel):
    user: UserOut

# -------------------- SENSOR --------------------
class SensorReading(BaseModel):
    value: float
    unit: str

class SensorCreate(BaseModel):
    name: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    type: SensorType
    data: Optional[SensorReading] = None

class SensorUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1)
    type: Optional[SensorType] = None
    status: Optional[SensorStatus] = None
    battery: Optional[int] = Field(None, ge=0, le=100)
    data: Optional[SensorReading] = None

class SensorOut(BaseModel):
    id: int
    name: str
    location: str
    type: str
    status: str
    battery: int
    data: Optional[SensorReading] = None
    last_updated: datetime

    class Config:
        from_attributes = True

class SensorListOut(BaseModel):
    sensors: List[SensorOut]

class SensorDetailOut(BaseModel):
    sensor: SensorOut

class SensorMessageOut(BaseModel):
    message: str
    sensor: SensorOut

# -------------------- LOCATION --------------------
class Coordinates(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)

class LocationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    coordinates: Optional[Coordinates] = None

class LocationOut(BaseModel):
    id: int
    name: str
    coordinates: Optional[Coordinates] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class LocationListOut(BaseModel):
    locations: List[LocationOut]

class LocationDetailOut(BaseModel):
    location: LocationOut

class LocationMessageOut(BaseModel):
    message: str
    location: LocationOut

# -------------------- ANALYSIS --------------------
class AnalysisOut(BaseModel):
    id: int
    user_id: int
    file_type: str
    file_path: Optional[str] = None
    location: str
    results: dict
    timestamp: datetime

    class Config:
        from_attributes = True

class AnalysisListOut(BaseModel):
    analyses: List[AnalysisOut]

class AnalysisDetailOut(BaseModel):
    analysis: AnalysisOut

class UploadAnalysisOut(BaseModel):
    """Trimmed analysis returned right after an upload"""
    id: int
    location: str
    results: dict
    timestamp: datetime

    class Config:
        from_attributes = True

class UploadResponse(BaseModel):
    message: str
    analysis: UploadAnalysisOut

class LivestreamRequest(BaseModel):
    location: str = Field(..., min_length=1)

class LivestreamOut(BaseModel):
    message: str
    connectionId: str
    location: str
    timestamp: datetime

# -------------------- PREFERENCES --------------------
class PreferenceOut(BaseModel):
    current_location: str
    recent_locations: List[str]
    bookmarked_locations: List[str]

    class Config:
        from_attributes = True

class LocationChoice(BaseModel):
    location: str = Field(..., min_length=1)

class BookmarkOut(BaseModel):
    location: str
    bookmarked: bool
    bookmarked_locations: List[str]

# -------------------- RESPONSES --------------------
class StatusResponse(BaseModel):
    message: str
    success: bool = True
