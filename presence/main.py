"""
Office Presence Backend - Main Application Entry Point
"""
import logging
from urllib.parse import urlparse, urlunparse

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from presence.api.router import api_router
from presence.core.config import settings
from presence.core.errors import (
    generic_exception_handler,
    http_exception_handler,
    policy_exception_handler,
    validation_exception_handler,
)
from presence.core.logging import setup_logging
from presence.core.security import hash_password
from presence.db.session import SessionLocal, create_sqlite_tables
from presence.models.user import Role, User
from presence.services.attendance_policy import PolicyError

setup_logging()
logger = logging.getLogger(__name__)


def _mask_database_url(url: str) -> str:
    """Mask password in DATABASE_URL for safe logging; show full path for sqlite."""
    parsed = urlparse(url)
    if parsed.scheme.startswith("sqlite") or not parsed.password:
        return url
    netloc = f"{parsed.username}:****@{parsed.hostname or ''}"
    if parsed.port:
        netloc += f":{parsed.port}"
    return urlunparse(parsed._replace(netloc=netloc))


app = FastAPI(
    title="Office Presence Backend",
    description="Geofenced check-in/check-out attendance with lateness rules",
    version=settings.VERSION or "1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(PolicyError, policy_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
def startup_log_config() -> None:
    """Log DATABASE_URL and the attendance rules in effect."""
    logger.info("DATABASE_URL (app): %s", _mask_database_url(settings.DATABASE_URL))
    logger.info(
        "Office (%s, %s) radius=%sm tz=%s cutoff=%s check-out opens=%s",
        settings.OFFICE_LATITUDE, settings.OFFICE_LONGITUDE, settings.OFFICE_RADIUS_METERS,
        settings.OFFICE_TZ, settings.CHECK_IN_CUTOFF, settings.CHECK_OUT_OPENS,
    )
    create_sqlite_tables()


@app.on_event("startup")
def bootstrap_initial_admin() -> None:
    """
    Create the initial admin account if no admin exists.
    This ensures the system always has at least one admin user.
    """
    db = SessionLocal()
    try:
        if db.query(User).filter(User.role == Role.ADMIN.value).first():
            logger.info("Admin user already exists, skipping initial bootstrap")
            return

        email = settings.INITIAL_ADMIN_EMAIL.strip().lower()
        if db.query(User).filter(User.email == email).first():
            logger.warning("INITIAL_ADMIN_EMAIL %s belongs to a non-admin user, skipping bootstrap", email)
            return

        db.add(User(
            email=email,
            full_name="System Administrator",
            role=Role.ADMIN.value,
            password_hash=hash_password(settings.INITIAL_ADMIN_PASSWORD),
            active=True,
        ))
        db.commit()
        logger.info("Initial admin user created: %s", email)
        logger.info("Password: [set via INITIAL_ADMIN_PASSWORD environment variable]")
    except OperationalError as e:
        db.rollback()
        if "no such table" in str(e).lower():
            logger.warning("Database tables not ready yet, skipping initial bootstrap")
        else:
            logger.error("Database error during admin bootstrap: %s", e)
    finally:
        db.close()
