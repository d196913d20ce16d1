"""Hostel feedback database models."""

from hostel_feedback.models.base import Base, UTCDateTime, utcnow
from hostel_feedback.models.feedback import (
    NAME_MAX_LENGTH,
    ROOM_NUMBER_MAX_LENGTH,
    Feedback,
    generate_edit_token,
)

__all__ = [
    "Base",
    "UTCDateTime",
    "utcnow",
    "Feedback",
    "NAME_MAX_LENGTH",
    "ROOM_NUMBER_MAX_LENGTH",
    "generate_edit_token",
]
