"""Configuration and constants for the Catering API."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

# Paths
PROJECT_ROOT = Path(__file__).parent.parent.parent
DEFAULT_DATA_DIR = PROJECT_ROOT / "data"
DEFAULT_DB_PATH = DEFAULT_DATA_DIR / "catering.db"

API_NAME = "Catering API"
API_VERSION = "1.0.0"

# Used only when CATERING_JWT_SECRET is unset
DEV_JWT_SECRET = "dev-secret-change-me"

# Filter allow-lists per entity
FACILITY_FILTER_FIELDS = ("facility_name", "city", "tag")
EMPLOYEE_FILTER_FIELDS = (
    "employee_name",
    "email",
    "phone",
    "address",
    "facility_name",
    "city",
)

# Fields searched by a free-text query when no filter is given
FACILITY_DEFAULT_QUERY_FIELDS = ("facility_name",)
EMPLOYEE_DEFAULT_QUERY_FIELDS = ("employee_name", "address", "email")


@dataclass
class Settings:
    """Runtime settings for the API and CLI."""

    db_path: Path = field(default_factory=lambda: DEFAULT_DB_PATH)
    jwt_secret: str = DEV_JWT_SECRET
    jwt_algorithm: str = "HS256"
    default_per_page: int = 10
    max_per_page: int = 100
    app_env: str = "production"
    log_level: str = "INFO"

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() == "development"

    @property
    def uses_dev_secret(self) -> bool:
        return self.jwt_secret == DEV_JWT_SECRET


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def load_settings(db_path: Path | str | None = None) -> Settings:
    """Build settings from the environment. An explicit db_path wins."""
    if db_path is None:
        db_path = os.environ.get("CATERING_DB_PATH") or DEFAULT_DB_PATH

    default_per_page = _int_env("CATERING_DEFAULT_PER_PAGE", 10)
    max_per_page = _int_env("CATERING_MAX_PER_PAGE", 100)
    if default_per_page > max_per_page:
        raise ValueError(
            f"CATERING_DEFAULT_PER_PAGE ({default_per_page}) exceeds "
            f"CATERING_MAX_PER_PAGE ({max_per_page})"
        )

    return Settings(
        db_path=Path(db_path),
        jwt_secret=os.environ.get("CATERING_JWT_SECRET") or DEV_JWT_SECRET,
        jwt_algorithm=os.environ.get("CATERING_JWT_ALGORITHM", "HS256"),
        default_per_page=default_per_page,
        max_per_page=max_per_page,
        app_env=os.environ.get("APP_ENV", "production"),
        log_level=os.environ.get("CATERING_LOG_LEVEL", "INFO").upper(),
    )
