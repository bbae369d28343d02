"""Main FastAPI application module.

This module initializes the FastAPI application, registers the error
handlers and all route handlers, and mounts the uploaded files.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException

from core.logging_config import setup_logging
from config import (
    API_HOST,
    API_PORT,
    CORS_ALLOWED_ORIGINS,
    SEED_DEFAULT_DEPARTMENTS,
    UPLOADS_DIR,
    UPLOADS_DIR_NAME,
)
from core.database import SessionLocal, init_db, seed_default_departments
from core.exceptions import ELearningError
from api.routes import (
    admin,
    analysis,
    auth,
    courses,
    departments,
    enrollments,
    instructors,
    students,
)

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

# Initialize FastAPI application
app = FastAPI(
    title="E-Learning Administration API",
    description="Backend API for departments, courses, instructors, students and enrollments.",
    version="1.0.0",
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_body(message: str, inner=None) -> dict:
    body = {"message": message}
    if inner is not None:
        body["inner"] = inner
    return body


@app.exception_handler(ELearningError)
def handle_elearning_error(request: Request, exc: ELearningError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code, content=_error_body(exc.message, exc.inner)
    )


@app.exception_handler(HTTPException)
def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first['msg']}" if location else first["msg"]
    else:
        message = "Invalid request"
    return JSONResponse(
        status_code=400,
        content=_error_body(message, [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg")} for err in errors
        ]),
    )


# Register route handlers
app.include_router(auth.router)
app.include_router(departments.router)
app.include_router(courses.router)
app.include_router(instructors.router)
app.include_router(students.router)
app.include_router(enrollments.router)
app.include_router(admin.router)
app.include_router(analysis.router)

# Uploaded profile photos are served as static files
UPLOADS_DIR.mkdir(parents=True, exist_ok=True)
app.mount(f"/{UPLOADS_DIR_NAME}", StaticFiles(directory=str(UPLOADS_DIR)), name="uploads")


@app.on_event("startup")
def startup_tasks() -> None:
    """Create missing tables and seed the default departments."""
    init_db()
    if SEED_DEFAULT_DEPARTMENTS:
        db = SessionLocal()
        try:
            seed_default_departments(db)
        finally:
            db.close()


@app.get("/", summary="API root", tags=["Info"])
def root() -> dict:
    """API root, returns API information and documentation links.

    Returns:
        Dictionary with API information and documentation links.
    """
    return {
        "name": "E-Learning Administration API",
        "version": "1.0.0",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
        },
        "health": "/api/health",
    }


@app.get("/api/health", summary="Health check", tags=["Health"])
def health() -> dict:
    """Health check endpoint.

    Returns:
        Dictionary with status "ok".
    """
    return {"status": "ok"}


# --- Startup code for direct execution ---
if __name__ == "__main__":
    import uvicorn

    server_url = f"http://{API_HOST}:{API_PORT}"
    logger.info("Serving on %s (docs at %s/docs)", server_url, server_url)
    uvicorn.run("app:app", host=API_HOST, port=API_PORT, reload=True)
