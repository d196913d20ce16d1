"""Feedback model for resident submissions."""

import secrets

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hostel_feedback.models.base import Base

NAME_MAX_LENGTH = 255
ROOM_NUMBER_MAX_LENGTH = 100


def generate_edit_token() -> str:
    """Generate the bearer secret that authorizes edits to one record."""
    return secrets.token_urlsafe(32)


class Feedback(Base):
    """Resident feedback submission."""

    __tablename__ = "feedbacks"

    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    room_number: Mapped[str] = mapped_column(String(ROOM_NUMBER_MAX_LENGTH), nullable=False)
    feedback: Mapped[str] = mapped_column(Text, nullable=False)
    edit_token: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default=generate_edit_token,
    )

    def __repr__(self) -> str:
        return f"<Feedback {self.room_number} ({self.created_at})>"
