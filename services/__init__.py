# services/__init__.py
"""
Services package for the crowd analyzer application
"""

from .analysis_service import analyze_media_file
from .mock_data import SeededRandom, location_seed, generate_overview

__all__ = ['analyze_media_file', 'SeededRandom', 'location_seed', 'generate_overview']
