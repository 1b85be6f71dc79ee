# services/mock_data.py
"""
Simulated dashboard metrics for a named location.

There is no crowd-counting model behind the dashboard. Every widget draws
its numbers from a small pseudo-random sequence seeded by the location
name, so the same location always produces the same picture while
different locations look different.

    seed    = sum of the character codes of the location name
    next()  = frac(sin(seed) * 10000), then seed += 1

Each generator starts its own sequence from the location seed.
"""
import math
from datetime import datetime, timedelta
from typing import Dict, Any, List, Optional
import logging

logger = logging.getLogger(__name__)

WEEKDAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

ANOMALY_TYPES = [
    "Sudden Surge",
    "Unusual Dispersal",
    "Abnormal Pattern",
    "Density Fluctuation",
    "Movement Anomaly",
    "Rapid Influx",
]

ANOMALY_DESCRIPTIONS = [
    "Unexpected increase in crowd density at {location}",
    "Rapid crowd dispersal detected at {location}",
    "Crowd movement pattern deviates from historical data at {location}",
    "Unusual fluctuations in crowd density at {location}",
    "Unexpected movement pattern detected at {location}",
    "Sudden influx of people at {location}",
]

SEVERITIES = ["high", "medium", "low"]

INSIGHT_HOURS = [17, 18, 19]
INSIGHT_PREDICTIONS = [
    "Peak crowd density expected at {location}",
    "Gradual increase in crowd density at {location}",
    "Crowd dispersal expected at {location}",
]
INSIGHT_CONFIDENCES = ["high", "medium", "high"]

HIGH_DENSITY_THRESHOLD = 80

# Heat map canvas
HEATMAP_WIDTH = 600
HEATMAP_HEIGHT = 400


def location_seed(location: str) -> int:
    return sum(ord(char) for char in location)


def _frac(x: float) -> float:
    return x - math.floor(x)


def seeded_noise(seed: int) -> float:
    """Single draw in [0, 1) for a fixed seed"""
    return _frac(math.sin(seed) * 10000)


class SeededRandom:
    """Deterministic [0, 1) sequence keyed by a location"""

    def __init__(self, seed: int):
        self.seed = seed

    @classmethod
    def for_location(cls, location: str) -> "SeededRandom":
        return cls(location_seed(location))

    def random(self) -> float:
        value = seeded_noise(self.seed)
        self.seed += 1
        return value

    def uniform(self, low: float, high: float) -> float:
        return low + self.random() * (high - low)

    def randint_below(self, n: int) -> int:
        return int(math.floor(self.random() * n))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(high, value))


def percentage(value: float) -> int:
    return round_half_up(clamp(value))


def density_status(value: float) -> str:
    if value < 40:
        return "low"
    if value < 70:
        return "medium"
    return "high"


def heat_level(value: float) -> str:
    if value < 0.5:
        return "low"
    if value < 0.8:
        return "medium"
    return "high"


def js_weekday(moment: datetime) -> int:
    """Day index with Sunday as 0"""
    return (moment.weekday() + 1) % 7


def relative_minutes(minutes_ago: int) -> str:
    if minutes_ago <= 0:
        return "Just now"
    if minutes_ago == 1:
        return "1 minute ago"
    if minutes_ago < 60:
        return f"{minutes_ago} minutes ago"
    hours = minutes_ago // 60
    return "1 hour ago" if hours == 1 else f"{hours} hours ago"


# ============ CURRENT DENSITY ============

def generate_sensor_readings(location: str) -> List[Dict[str, Any]]:
    """Environmental readings shown on the sensor widget"""
    rng = SeededRandom.for_location(location)
    return [
        {"id": 1, "name": "Crowd Density", "type": "crowd",
         "value": round_half_up(rng.uniform(50, 80)), "unit": "%"},
        {"id": 2, "name": "Temperature", "type": "temperature",
         "value": round_half_up(rng.uniform(25, 35)), "unit": "°C"},
        {"id": 3, "name": "Humidity", "type": "humidity",
         "value": round_half_up(rng.uniform(50, 80)), "unit": "%"},
        {"id": 4, "name": "Air Quality", "type": "air-quality",
         "value": round_half_up(rng.uniform(30, 80)), "unit": "AQI"},
    ]


def simulate_sensor_updates(location: str, ticks: int = 0) -> Dict[str, Any]:
    """
    Sensor readings after ``ticks`` simulated refreshes.

    Each refresh moves every reading by up to +/-3 (clamped to 0-100) and
    raises a high-density alert whenever crowd density crosses 80%.
    """
    readings = generate_sensor_readings(location)
    # Continue the location sequence past the draws used for the initial readings
    rng = SeededRandom(location_seed(location) + len(readings))
    alerts = []

    for tick in range(1, ticks + 1):
        for reading in readings:
            previous = reading["value"]
            updated = round_half_up(clamp(previous + rng.uniform(-3, 3)))
            reading["previous_value"] = previous
            reading["value"] = updated
            if reading["type"] == "crowd" and previous < HIGH_DENSITY_THRESHOLD <= updated:
                alerts.append({
                    "tick": tick,
                    "title": "High Density Alert",
                    "description": f"Crowd density at {location} has exceeded {HIGH_DENSITY_THRESHOLD}%",
                })

    crowd = next(r for r in readings if r["type"] == "crowd")
    return {
        "location": location,
        "readings": readings,
        "high_density_alert": crowd["value"] >= HIGH_DENSITY_THRESHOLD,
        "alerts": alerts,
    }


def current_density_value(location: str) -> int:
    return generate_sensor_readings(location)[0]["value"]


def generate_density_series(location: str, density: Optional[int] = None,
                            now: Optional[datetime] = None) -> Dict[str, Any]:
    """Per-minute density for the last 30 minutes, ending at ``now``"""
    now = now or datetime.now()
    current = density if density is not None else current_density_value(location)
    rng = SeededRandom.for_location(location)

    series = []
    for i in range(30, -1, -1):
        moment = now - timedelta(minutes=i)
        base = clamp(current - i / 2 + math.sin(i / 5) * 15, 30, 95)
        value = percentage(base + rng.uniform(-3, 3))
        series.append({"time": moment.strftime("%H:%M"), "value": value})

    latest = series[-1]["value"]
    return {
        "location": location,
        "current": latest,
        "status": density_status(latest),
        "series": series,
    }


# ============ TRENDS ============

def _hourly_base(hour: int) -> float:
    if 7 <= hour <= 10:
        return 60 + (hour - 7) * 10      # morning rush
    if 11 <= hour <= 15:
        return 80 - (hour - 11) * 5      # midday
    if 16 <= hour <= 19:
        return 60 + (hour - 16) * 10     # evening rush
    return 30 + math.sin(hour / 3) * 10


def generate_daily_trend(location: str, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    now = now or datetime.now()
    seed = location_seed(location)
    data = []
    for i in range(24):
        hour = (now.hour - 23 + i + 24) % 24
        noise = seeded_noise(seed + i) * 15 - 7.5
        data.append({"hour": f"{hour:02d}:00", "value": percentage(_hourly_base(hour) + noise)})
    return data


def generate_weekly_trend(location: str, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    now = now or datetime.now()
    seed = location_seed(location)
    start = (js_weekday(now) + 1) % 7
    ordered_days = WEEKDAYS[start:] + WEEKDAYS[:start]

    data = []
    for index, day in enumerate(ordered_days):
        base = 50 if day in ("Sat", "Sun") else 70
        noise = seeded_noise(seed + index) * 20 - 10
        data.append({"day": day, "value": percentage(base + noise)})
    return data


def generate_trends(location: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or datetime.now()
    return {
        "location": location,
        "current_hour": f"{now.hour:02d}:00",
        "today": WEEKDAYS[js_weekday(now)],
        "daily": generate_daily_trend(location, now),
        "weekly": generate_weekly_trend(location, now),
    }


# ============ HEAT MAP ============

def generate_heatmap(location: str) -> Dict[str, Any]:
    rng = SeededRandom.for_location(location)
    point_count = rng.randint_below(10) + 5

    points = []
    for _ in range(point_count):
        x = rng.randint_below(500) + 50
        y = rng.randint_below(300) + 50
        value = rng.random() * 0.7 + 0.3
        points.append({"x": x, "y": y, "value": round(value, 4), "level": heat_level(value)})

    return {
        "location": location,
        "width": HEATMAP_WIDTH,
        "height": HEATMAP_HEIGHT,
        "points": points,
    }


# ============ ANOMALIES ============

def generate_anomalies(location: str, now: Optional[datetime] = None,
                       severity: Optional[str] = None) -> List[Dict[str, Any]]:
    """3-6 anomalies from the last two hours, newest first"""
    now = now or datetime.now()
    rng = SeededRandom.for_location(location)
    count = rng.randint_below(4) + 3

    anomalies = []
    for i in range(count):
        type_index = rng.randint_below(len(ANOMALY_TYPES))
        severity_index = rng.randint_below(len(SEVERITIES))
        minutes_ago = rng.randint_below(120)
        anomalies.append({
            "id": i + 1,
            "location": location,
            "type": ANOMALY_TYPES[type_index],
            "description": ANOMALY_DESCRIPTIONS[type_index].format(location=location),
            "severity": SEVERITIES[severity_index],
            "timestamp": now - timedelta(minutes=minutes_ago),
            "time": relative_minutes(minutes_ago),
        })

    anomalies.sort(key=lambda a: a["timestamp"], reverse=True)

    if severity:
        anomalies = [a for a in anomalies if a["severity"] == severity]
    return anomalies


# ============ PREDICTIONS ============

def generate_hourly_predictions(location: str, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    now = now or datetime.now()
    rng = SeededRandom.for_location(location)
    data = []

    # Observed values for the past two hours and the current hour
    for i in range(2, -1, -1):
        hour = (now.hour - i + 24) % 24
        base = 50 + math.sin((hour / 6) * math.pi) * 20
        data.append({"time": f"{hour}:00", "actual": percentage(base + rng.uniform(-5, 5)), "predicted": None})

    for i in range(1, 7):
        hour = (now.hour + i) % 24
        base = 50 + math.sin((hour / 6) * math.pi) * 25
        data.append({"time": f"{hour}:00", "actual": None, "predicted": percentage(base + rng.uniform(-4, 4))})

    return data


def generate_daily_predictions(location: str, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    now = now or datetime.now()
    rng = SeededRandom.for_location(location)
    current_day = js_weekday(now)
    data = []

    for i in range(3, -1, -1):
        day_index = (current_day - i + 7) % 7
        base = 60 if day_index in (0, 6) else 75
        data.append({"day": WEEKDAYS[day_index], "actual": percentage(base + rng.uniform(-7.5, 7.5)),
                     "predicted": None})

    for i in range(1, 5):
        day_index = (current_day + i) % 7
        base = 60 if day_index in (0, 6) else 75
        data.append({"day": WEEKDAYS[day_index], "actual": None,
                     "predicted": percentage(base + rng.uniform(-6, 6))})

    return data


def generate_prediction_insights(location: str) -> List[Dict[str, Any]]:
    rng = SeededRandom.for_location(location)
    return [
        {
            "id": index + 1,
            "location": location,
            "time": f"{hour}:{rng.randint_below(6)}0",
            "prediction": INSIGHT_PREDICTIONS[index].format(location=location),
            "confidence": INSIGHT_CONFIDENCES[index],
        }
        for index, hour in enumerate(INSIGHT_HOURS)
    ]


def generate_predictions(location: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or datetime.now()
    return {
        "location": location,
        "hourly": generate_hourly_predictions(location, now),
        "daily": generate_daily_predictions(location, now),
        "insights": generate_prediction_insights(location),
    }


# ============ NOTIFICATIONS ============

def generate_notifications(location: str, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """Notification feed built from the same seeded anomalies, density and predictions"""
    now = now or datetime.now()
    notifications = []

    density = current_density_value(location)
    if density >= 70:
        notifications.append({
            "type": "alert",
            "title": "High density detected",
            "description": f"Crowd density at {location} is {density}%",
            "timestamp": now,
        })

    for anomaly in generate_anomalies(location, now)[:2]:
        notifications.append({
            "type": "anomaly",
            "title": "Anomaly detected",
            "description": f"{anomaly['type']} at {location}",
            "timestamp": anomaly["timestamp"],
        })

    peak = generate_prediction_insights(location)[0]
    notifications.append({
        "type": "prediction",
        "title": "Prediction",
        "description": f"{peak['prediction']} by {peak['time']}",
        "timestamp": now - timedelta(minutes=30),
    })

    notifications.append({
        "type": "system",
        "title": "Sensor update",
        "description": f"Sensors at {location} reported new readings",
        "timestamp": now - timedelta(hours=1),
    })

    notifications.sort(key=lambda n: n["timestamp"], reverse=True)
    for index, notification in enumerate(notifications):
        minutes_ago = int((now - notification["timestamp"]).total_seconds() // 60)
        notification["id"] = index + 1
        notification["time"] = relative_minutes(minutes_ago)
        notification["read"] = minutes_ago >= 15
    return notifications


def generate_overview(location: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or datetime.now()
    logger.debug(f"Building dashboard overview for {location}")
    return {
        "location": location,
        "generated_at": now,
        "density": generate_density_series(location, now=now),
        "trends": generate_trends(location, now),
        "heatmap": generate_heatmap(location),
        "anomalies": generate_anomalies(location, now),
        "predictions": generate_predictions(location, now),
        "sensors": simulate_sensor_updates(location),
        "notifications": generate_notifications(location, now),
    }
