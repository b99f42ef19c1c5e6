"""
Shared utilities for the scheduling API.
"""

from .validators import (
    MAX_RECORD_ID_LENGTH,
    ValidationError,
    validate_date,
    validate_record_id,
    validate_time_zone,
)

__all__ = [
    "MAX_RECORD_ID_LENGTH",
    "ValidationError",
    "validate_date",
    "validate_record_id",
    "validate_time_zone",
]
