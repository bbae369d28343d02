"""User database models.

This module defines the User and UserRole database models using SQLAlchemy.
"""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .base import Base


class UserModel(Base):
    """User database model."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(256), nullable=False)
    # Lower-cased email, the case-insensitive uniqueness key
    normalized_email = Column(String(256), unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role_type = Column(String, nullable=False)  # 'Student', 'Instructor' or 'Admin'
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    phone_number = Column(String(20), nullable=True)
    enrollment_date = Column(DateTime(timezone=True), server_default=func.now())

    bio = Column(String(500), nullable=True)
    profile_photo_url = Column(String, nullable=True)
    date_of_birth = Column(Date, nullable=True)
    address = Column(String(200), nullable=True)
    company = Column(String(100), nullable=True)

    roles = relationship(
        "UserRoleModel",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @property
    def role_names(self):
        return {membership.role for membership in self.roles}


class UserRoleModel(Base):
    """Role membership of a user."""

    __tablename__ = "user_roles"
    __table_args__ = (
        UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )
    role = Column(String, nullable=False)

    user = relationship("UserModel", back_populates="roles")
