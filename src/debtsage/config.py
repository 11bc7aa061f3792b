"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    """Read a positive integer from the environment."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc
    if parsed <= 0:
        raise ValueError(f"{name} must be positive, got {parsed}")
    return parsed


def _env_decimal(name: str, default: str) -> Decimal:
    """Read a non-negative decimal amount from the environment."""

    value = os.getenv(name, default)
    try:
        parsed = Decimal(value.strip())
    except (InvalidOperation, AttributeError) as exc:
        raise ValueError(f"{name} must be a decimal amount, got {value!r}") from exc
    if not parsed.is_finite() or parsed < 0:
        raise ValueError(f"{name} must be a non-negative amount, got {value!r}")
    return parsed


class BaseConfig:
    """Base configuration shared across environments."""

    DB_FILENAME = "debtsage.db"
    LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

    # Engine policy defaults
    DEFAULT_MONTHLY_BUDGET = "500.00"
    DEFAULT_SCHEDULE_MAX_MONTHS = 360
    DEFAULT_SIMULATION_MAX_MONTHS = 600

    def __init__(self, *, data_dir: Path | str | None = None) -> None:
        self.DEV_MODE = _env_bool("DEBTSAGE_DEV_MODE", default=True)
        self.DATA_DIR = self._resolve_data_dir(data_dir)
        self.DATABASE_URL = os.getenv("DEBTSAGE_DATABASE_URL", self._build_sqlite_url())
        self.LOG_LEVEL = os.getenv("DEBTSAGE_LOG_LEVEL", "INFO").strip().upper()
        self.LOG_TO_FILE = _env_bool("DEBTSAGE_LOG_TO_FILE", default=True)

        self.MONTHLY_EXTRA_BUDGET = _env_decimal(
            "DEBTSAGE_MONTHLY_EXTRA_BUDGET", self.DEFAULT_MONTHLY_BUDGET
        )
        self.SCHEDULE_MAX_MONTHS = _env_int(
            "DEBTSAGE_SCHEDULE_MAX_MONTHS", self.DEFAULT_SCHEDULE_MAX_MONTHS
        )
        self.SIMULATION_MAX_MONTHS = _env_int(
            "DEBTSAGE_SIMULATION_MAX_MONTHS", self.DEFAULT_SIMULATION_MAX_MONTHS
        )
        self.CASCADE_EXTRA_BUDGET = _env_bool("DEBTSAGE_CASCADE_EXTRA_BUDGET", default=False)

        if self.LOG_LEVEL not in self.LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {self.LOG_LEVEL}. Must be one of {sorted(self.LOG_LEVELS)}"
            )

    def _resolve_data_dir(self, data_dir: Path | str | None = None) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = data_dir if data_dir is not None else os.getenv("DEBTSAGE_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside the data directory."""

        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        engine_options: dict[str, Any] = {}
        if self.is_sqlite:
            # Payments run on worker threads; each thread opens its own session.
            engine_options["connect_args"] = {"check_same_thread": False, "timeout": 30}
        else:
            engine_options["pool_pre_ping"] = True
        return engine_options


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Configuration used by the test-suite and throwaway sessions."""

    __test__ = False
    DEBUG = False
    TESTING = True

    def __init__(self, *, data_dir: Path | str | None = None) -> None:
        super().__init__(data_dir=data_dir)
        self.LOG_TO_FILE = False
