# services/analysis_service.py
"""
Upload-time crowd analysis.

The uploaded media is opened only to read its basic properties (image size,
video frame count and frame rate). The crowd figures stored with the
analysis are random placeholders until a counting model is plugged in.
"""
import os
import random
import logging
from typing import Dict, Any, List, Optional

import cv2
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

IMAGE_ANOMALIES = ["Unusual gathering", "Rapid movement"]
VIDEO_ANOMALIES = ["Sudden dispersal", "Unusual pattern"]
IMAGE_ANOMALY_CHANCE = 0.3
VIDEO_ANOMALY_CHANCE = 0.5

# Frame timeline used when the video length cannot be read (seconds)
DEFAULT_FRAME_OFFSETS = [30, 60, 90, 105, 120]


def format_offset(seconds: float) -> str:
    seconds = int(round(seconds))
    return f"{seconds // 3600:02d}:{(seconds % 3600) // 60:02d}:{seconds % 60:02d}"


def inspect_image(file_path: str) -> Dict[str, Any]:
    """Width, height and format of an image, empty if unreadable"""
    try:
        with Image.open(file_path) as img:
            return {"width": img.width, "height": img.height, "format": img.format}
    except (UnidentifiedImageError, OSError) as e:
        logger.warning(f"Could not read image {file_path}: {e}")
        return {}


def inspect_video(file_path: str) -> Dict[str, Any]:
    """Frame count, fps and duration of a video, empty if unreadable"""
    cap = cv2.VideoCapture(file_path)
    try:
        if not cap.isOpened():
            logger.warning(f"Could not open video {file_path}")
            return {}

        frame_count = int(cap.get(cv2.CAP_PROP_FRAME_COUNT) or 0)
        fps = float(cap.get(cv2.CAP_PROP_FPS) or 0.0)
        duration = round(frame_count / fps, 2) if fps > 0 else None
        return {
            "frame_count": frame_count,
            "fps": round(fps, 2),
            "duration_seconds": duration,
            "width": int(cap.get(cv2.CAP_PROP_FRAME_WIDTH) or 0),
            "height": int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT) or 0),
        }
    finally:
        cap.release()


def generate_image_results(rng: Optional[random.Random] = None) -> Dict[str, Any]:
    rng = rng or random.Random()
    hotspot_count = rng.randint(3, 5)
    hotspots = [
        {
            "x": rng.randint(50, 550),
            "y": rng.randint(50, 350),
            "value": round(rng.uniform(0.6, 1.0), 2),
        }
        for _ in range(hotspot_count)
    ]
    return {
        "density": rng.randint(50, 79),
        "hotspots": hotspots,
        "anomalies": list(IMAGE_ANOMALIES) if rng.random() < IMAGE_ANOMALY_CHANCE else [],
    }


def _frame_offsets(duration: Optional[float]) -> List[float]:
    if not duration or duration <= 0:
        return list(DEFAULT_FRAME_OFFSETS)
    step = duration / len(DEFAULT_FRAME_OFFSETS)
    return [step * (i + 1) for i in range(len(DEFAULT_FRAME_OFFSETS))]


def generate_video_results(duration: Optional[float] = None,
                           rng: Optional[random.Random] = None) -> Dict[str, Any]:
    """
    Timeline of sampled frame densities.

    The peak frame always carries ``peakDensity`` and every other frame
    stays below it, so ``peakTime`` points at a real sample.
    """
    rng = rng or random.Random()
    average = rng.randint(50, 79)
    peak = rng.randint(75, 89)

    offsets = _frame_offsets(duration)
    peak_index = rng.randrange(len(offsets))
    low = max(30, average - 15)
    high = min(peak - 1, average + 15)

    frames = []
    for index, offset in enumerate(offsets):
        density = peak if index == peak_index else rng.randint(low, high)
        frames.append({"timestamp": format_offset(offset), "density": density})

    return {
        "averageDensity": average,
        "peakDensity": peak,
        "peakTime": frames[peak_index]["timestamp"],
        "frames": frames,
        "anomalies": list(VIDEO_ANOMALIES) if rng.random() < VIDEO_ANOMALY_CHANCE else [],
    }


def analyze_media_file(file_path: str, file_type: str,
                       rng: Optional[random.Random] = None) -> Dict[str, Any]:
    """Build the results object stored on an image or video analysis"""
    if not os.path.exists(file_path):
        raise FileNotFoundError(file_path)

    if file_type == "image":
        media = inspect_image(file_path)
        results = generate_image_results(rng)
    elif file_type == "video":
        media = inspect_video(file_path)
        results = generate_video_results(media.get("duration_seconds"), rng)
    else:
        raise ValueError(f"Unsupported media type: {file_type}")

    results["media"] = media
    logger.info(f"Analyzed {file_type} {os.path.basename(file_path)}: {len(results['anomalies'])} anomalies")
    return results
