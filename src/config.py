"""Configuration module for the E-Learning administration backend.

This module provides centralized configuration management, including directory
paths, API server settings, authentication settings, and application defaults.
All configuration values can be overridden via environment variables.
"""

import os
from pathlib import Path
from typing import Dict, List

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.resolve()

# Data directory name
DATA_DIR_NAME = "data"
DATA_DIR = ROOT_DIR / DATA_DIR_NAME

# Uploaded files are served back under /uploads
UPLOADS_DIR_NAME = "uploads"
UPLOADS_DIR = Path(os.getenv("UPLOADS_DIR", str(ROOT_DIR / UPLOADS_DIR_NAME)))

PROFILE_PHOTO_DIR_NAME = "profiles"
PROFILE_PHOTO_DIR = UPLOADS_DIR / PROFILE_PHOTO_DIR_NAME

# --- Database Configuration ---

DATABASE_URL: str = os.getenv(
    "DATABASE_URL", f"sqlite:///{DATA_DIR}/elearning.db"
)

# Seed a handful of departments when the table is empty
SEED_DEFAULT_DEPARTMENTS: bool = (
    os.getenv("SEED_DEFAULT_DEPARTMENTS", "true").lower() == "true"
)

DEFAULT_DEPARTMENTS: List[Dict[str, object]] = [
    {"name": "Computer Science", "budget": 100000},
    {"name": "Engineering", "budget": 150000},
    {"name": "Business", "budget": 80000},
    {"name": "Arts & Humanities", "budget": 60000},
    {"name": "Science", "budget": 120000},
]
DEFAULT_DEPARTMENT_START_DATE = "2024-01-01"

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8000"))

# CORS allowed origins (comma-separated list)
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://localhost:3000",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Authentication Configuration ---

JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "change-me-in-production")
JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")

# Bearer tokens are valid for two hours, there is no refresh flow
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "120"))

PASSWORD_RESET_TOKEN_EXPIRE_HOURS: int = int(
    os.getenv("PASSWORD_RESET_TOKEN_EXPIRE_HOURS", "24")
)

MIN_PASSWORD_LENGTH: int = 6

# Clients send this in the password field when it should stay unchanged
KEEP_CURRENT_PASSWORD: str = "KEEP_CURRENT_PASSWORD"

# --- Upload Configuration ---

MAX_PROFILE_PHOTO_SIZE: int = 5 * 1024 * 1024  # 5MB

# --- Analysis Configuration ---

# Window used to estimate process CPU usage on GET /api/analysis
CPU_SAMPLE_SECONDS: float = float(os.getenv("CPU_SAMPLE_SECONDS", "0.5"))
