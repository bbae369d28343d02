"""Database connection and session management.

This module handles the database connection using SQLAlchemy.
"""

import logging
from datetime import date

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from config import (
    DATA_DIR,
    DATABASE_URL,
    DEFAULT_DEPARTMENT_START_DATE,
    DEFAULT_DEPARTMENTS,
)
from models.base import Base
# Import models to ensure they are registered with Base.metadata
import models  # noqa: F401
from models.department import DepartmentModel

logger = logging.getLogger(__name__)

# Ensure data directory exists
DATA_DIR.mkdir(parents=True, exist_ok=True)

# The 'check_same_thread' argument is only needed for SQLite.
engine_args = (
    {"connect_args": {"check_same_thread": False}}
    if DATABASE_URL.startswith("sqlite")
    else {}
)
engine = create_engine(DATABASE_URL, **engine_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind=None) -> None:
    """Create tables that do not exist yet."""
    Base.metadata.create_all(bind=bind or engine)


def seed_default_departments(db: Session) -> int:
    """Insert the default departments when none exist.

    Args:
        db: Database session.

    Returns:
        Number of departments inserted.
    """
    if db.query(DepartmentModel).first() is not None:
        return 0
    start_date = date.fromisoformat(DEFAULT_DEPARTMENT_START_DATE)
    for item in DEFAULT_DEPARTMENTS:
        db.add(
            DepartmentModel(
                name=item["name"], budget=item["budget"], start_date=start_date
            )
        )
    db.commit()
    logger.info("Seeded %d default departments", len(DEFAULT_DEPARTMENTS))
    return len(DEFAULT_DEPARTMENTS)


def get_db():
    """Dependency for getting a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
