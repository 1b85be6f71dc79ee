# services/seeding.py
import random
import logging
from datetime import datetime
from typing import Optional, List

from sqlalchemy.orm import Session

from models import Location, Sensor, User, SENSOR_TYPES
from services.location_search import DEFAULT_LOCATIONS
from utils.security import hash_password

logger = logging.getLogger(__name__)

DEMO_SENSOR_LOCATIONS = ["Hitech City", "Uppal", "Miyapur", "Ameerpet", "Dilsukhnagar", "Secunderabad", "Gachibowli"]

# Weighted towards online
DEMO_SENSOR_STATUSES = ["online", "online", "online", "warning", "offline"]


def demo_reading(sensor_type: str, rng: random.Random):
    """Last reading for a demo sensor; motion sensors carry none"""
    if sensor_type == "crowd":
        return rng.randint(0, 99), "%"
    if sensor_type == "temperature":
        return rng.randint(20, 34), "°C"
    if sensor_type == "humidity":
        return rng.randint(30, 89), "%"
    if sensor_type == "air-quality":
        return rng.randint(20, 119), "AQI"
    return None, None


def build_demo_sensors(locations: Optional[List[str]] = None,
                       rng: Optional[random.Random] = None) -> List[Sensor]:
    """2-4 sensors of random type and state per location"""
    rng = rng or random.Random()
    sensors = []
    for location in locations or DEMO_SENSOR_LOCATIONS:
        for i in range(rng.randint(2, 4)):
            sensor_type = rng.choice(SENSOR_TYPES)
            value, unit = demo_reading(sensor_type, rng)
            sensors.append(Sensor(
                name=f"{location} {sensor_type.capitalize()} Sensor {i + 1}",
                location=location,
                type=sensor_type,
                status=rng.choice(DEMO_SENSOR_STATUSES),
                battery=rng.randint(40, 100),
                data_value=value,
                data_unit=unit,
                last_updated=datetime.utcnow(),
            ))
    return sensors


def seed_locations(db: Session) -> int:
    if db.query(Location).count() > 0:
        return 0
    db.add_all([Location(name=name) for name in DEFAULT_LOCATIONS])
    db.commit()
    logger.info(f"Seeded {len(DEFAULT_LOCATIONS)} default locations")
    return len(DEFAULT_LOCATIONS)


def seed_demo_sensors(db: Session, rng: Optional[random.Random] = None) -> int:
    if db.query(Sensor).count() > 0:
        return 0
    sensors = build_demo_sensors(rng=rng)
    db.add_all(sensors)
    db.commit()
    logger.info(f"Seeded {len(sensors)} demo sensors")
    return len(sensors)


def ensure_admin(db: Session, email: Optional[str], password: Optional[str]) -> Optional[User]:
    """Create the configured admin account if it does not exist yet"""
    if not email or not password:
        return None

    # Stored the way register/login normalise addresses
    email = email.strip().lower()
    user = db.query(User).filter(User.email == email).first()
    if user:
        return user

    user = User(name="Administrator", email=email, hashed_password=hash_password(password), role="admin")
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Created admin account {email}")
    return user
