"""
Configuration management for the Office Presence backend
"""
import re
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import Optional, List
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

_HHMM = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    DATABASE_URL: str = Field(default="sqlite:///./presence.db", description="SQLAlchemy database URL")
    JWT_SECRET_KEY: str = Field(..., description="JWT secret key for token signing")

    JWT_ALGORITHM: str = Field(default="HS256", description="JWT algorithm")
    JWT_EXPIRE_MINUTES: int = Field(default=120, description="JWT token expiration in minutes")

    APP_ENV: str = Field(default="local", description="Application environment: local, staging, prod")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level: DEBUG, INFO, WARNING, ERROR")

    ALLOWED_ORIGINS: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins. Use '*' for local only."
    )

    # Calendar-day grouping and all cutoffs are evaluated in this zone
    OFFICE_TZ: str = Field(default="Asia/Jakarta", description="IANA timezone for work dates and cutoffs (WIB)")

    # Office geofence
    OFFICE_LATITUDE: float = Field(default=-5.1597320842062295, description="Office latitude (decimal degrees)")
    OFFICE_LONGITUDE: float = Field(default=119.4099062887864, description="Office longitude (decimal degrees)")
    OFFICE_RADIUS_METERS: float = Field(default=100.0, description="Admission radius around the office in meters")

    # Attendance time rules, local time HH:MM
    CHECK_IN_CUTOFF: str = Field(default="07:40", description="Check-ins strictly after this time are late")
    CHECK_OUT_OPENS: str = Field(default="16:00", description="Check-out is allowed from this time on")
    CHECK_OUT_DEADLINE: str = Field(default="16:10", description="Informational check-out deadline (not enforced)")

    # Google Sheets mirroring
    GOOGLE_SHEETS_ENABLED: bool = Field(default=False, description="Append every attendance record to a Google Sheet")
    GOOGLE_SHEETS_SPREADSHEET_ID: Optional[str] = Field(default=None, description="Target spreadsheet ID")
    GOOGLE_SHEETS_CREDENTIALS_FILE: str = Field(
        default="credentials.json",
        description="Service account key file used for the Sheets API"
    )
    GOOGLE_SHEETS_RANGE: str = Field(default="Sheet1!A1", description="Range rows are appended after")

    WEBHOOK_TOKEN: Optional[str] = Field(default=None, description="Shared secret expected in x-webhook-token")

    VERSION: Optional[str] = Field(default=None, description="Application version (git SHA or semver)")

    INITIAL_ADMIN_EMAIL: str = Field(
        default="admin@company.com",
        description="Email for initial admin user (used when no admin exists)"
    )
    INITIAL_ADMIN_PASSWORD: str = Field(
        default="Admin@12345",
        description="Password for initial admin user (used when no admin exists)"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True

    @field_validator("APP_ENV")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        """Validate APP_ENV"""
        allowed = ["local", "staging", "prod"]
        if v not in allowed:
            raise ValueError(f"APP_ENV must be one of {allowed}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate LOG_LEVEL"""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of {allowed}")
        return v.upper()

    @field_validator("OFFICE_TZ")
    @classmethod
    def validate_tz(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"OFFICE_TZ must be a valid IANA timezone, got {v!r}")
        return v

    @field_validator("OFFICE_RADIUS_METERS")
    @classmethod
    def validate_radius(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("OFFICE_RADIUS_METERS must be greater than 0")
        return v

    @field_validator("CHECK_IN_CUTOFF", "CHECK_OUT_OPENS", "CHECK_OUT_DEADLINE")
    @classmethod
    def validate_hhmm(cls, v: str) -> str:
        """Cutoffs are 24h HH:MM strings"""
        if not _HHMM.match(v):
            raise ValueError(f"time must be in HH:MM 24h format, got {v!r}")
        return v

    def validate_production(self) -> None:
        """
        Validate settings for production environment

        Raises:
            ValueError: If production settings are invalid
        """
        if self.APP_ENV == "prod":
            if len(self.JWT_SECRET_KEY) < 32:
                raise ValueError(
                    "JWT_SECRET_KEY must be at least 32 characters in production environment"
                )

            if self.ALLOWED_ORIGINS == "*" or not self.ALLOWED_ORIGINS:
                raise ValueError(
                    "ALLOWED_ORIGINS must be explicitly set (not '*') in production environment"
                )

    def get_allowed_origins_list(self) -> List[str]:
        """
        Get list of allowed CORS origins

        Returns:
            List of allowed origins (or ['*'] for local)
        """
        if self.ALLOWED_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]


settings = Settings()

if settings.APP_ENV == "prod":
    settings.validate_production()
