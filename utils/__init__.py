"""
Utility modules for the crowd analyzer backend.
"""

from utils.validation import sanitize_filename, validate_upload_file

__all__ = [
    "sanitize_filename",
    "validate_upload_file",
]
