"""Password reset token database model.

This module defines the PasswordResetToken database model using SQLAlchemy.
"""

from sqlalchemy import Column, ForeignKey, Integer, String
from .base import Base


class PasswordResetTokenModel(Base):
    """Single-use password reset token."""

    __tablename__ = "password_reset_tokens"

    token = Column(String, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )
    created_at = Column(String, nullable=False)  # ISO format string
    expires_at = Column(String, nullable=False)  # ISO format string
