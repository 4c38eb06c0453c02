"""
Configuration for SmartFarm Monitor
===================================
Main application runtime settings, read from ``SMARTFARM_*`` environment
variables. Sets up the logging configuration as well.
"""

import os
from contextlib import suppress
from dataclasses import dataclass, field, fields, replace
from typing import Any


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer.") from None


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be a number.") from None


@dataclass
class AppConfig:
    """Runtime configuration loaded from environment variables."""

    environment: str = field(default_factory=lambda: os.getenv("SMARTFARM_ENV", "development"))
    secret_key: str = field(default_factory=lambda: os.getenv("SMARTFARM_SECRET_KEY", "SmartFarmDevSecretKey"))
    host: str = field(default_factory=lambda: os.getenv("SMARTFARM_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: _env_int("SMARTFARM_PORT", 5000))

    # Backend (Supabase PostgREST)
    supabase_url: str = field(default_factory=lambda: os.getenv("SMARTFARM_SUPABASE_URL", ""))
    supabase_key: str = field(default_factory=lambda: os.getenv("SMARTFARM_SUPABASE_KEY", ""))
    backend_timeout_s: float = field(default_factory=lambda: _env_float("SMARTFARM_BACKEND_TIMEOUT", 10.0))

    # The farm owner whose readings, profile and gallery are monitored
    user_id: int = field(default_factory=lambda: _env_int("SMARTFARM_USER_ID", 1))
    # Restrict the Farm table to user_id (unset = newest row of any user)
    filter_readings_by_user: bool = field(default_factory=lambda: _env_bool("SMARTFARM_FILTER_READINGS_BY_USER", False))

    # Monitoring loop
    poll_interval_s: float = field(default_factory=lambda: _env_float("SMARTFARM_POLL_INTERVAL", 10.0))
    autostart_monitoring: bool = field(default_factory=lambda: _env_bool("SMARTFARM_AUTOSTART_MONITORING", True))
    day_start_hour: int = field(default_factory=lambda: _env_int("SMARTFARM_DAY_START_HOUR", 6))
    day_end_hour: int = field(default_factory=lambda: _env_int("SMARTFARM_DAY_END_HOUR", 18))
    notification_inbox_size: int = field(default_factory=lambda: _env_int("SMARTFARM_NOTIFICATION_INBOX_SIZE", 100))

    eventbus_queue_size: int = field(default_factory=lambda: _env_int("SMARTFARM_EVENTBUS_QUEUE_SIZE", 1024))
    eventbus_worker_count: int = field(default_factory=lambda: _env_int("SMARTFARM_EVENTBUS_WORKER_COUNT", 2))

    DEBUG: bool = field(default_factory=lambda: _env_bool("SMARTFARM_DEBUG", False))
    log_level: str = field(default_factory=lambda: os.getenv("SMARTFARM_LOG_LEVEL", "INFO"))
    log_path: str = field(default_factory=lambda: os.getenv("SMARTFARM_LOG_PATH", "logs/smartfarm.log"))

    # Default insecure secret key - used only for detection
    _DEFAULT_SECRET_KEY: str = field(default="SmartFarmDevSecretKey", init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.environment == "production" and self.secret_key == self._DEFAULT_SECRET_KEY:
            raise RuntimeError(
                "SECURITY ERROR: Cannot use default secret key in production!\n"
                "Set SMARTFARM_SECRET_KEY environment variable to a secure random value.\n"
                'Generate one with: python -c "import secrets; print(secrets.token_hex(32))"'
            )
        if self.poll_interval_s <= 0:
            raise ValueError("SMARTFARM_POLL_INTERVAL must be positive.")

    @property
    def readings_user_id(self) -> int | None:
        return self.user_id if self.filter_readings_by_user else None

    def with_overrides(self, overrides: dict[str, Any]) -> "AppConfig":
        """Copy with ``overrides`` applied and validated again.

        Keys match field names case-insensitively (``"debug"`` sets ``DEBUG``).
        Unknown keys raise ``ValueError``.
        """
        names = {f.name.lower(): f.name for f in fields(self) if f.init}
        unknown = sorted(key for key in overrides if key.lower() not in names)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")
        return replace(self, **{names[key.lower()]: value for key, value in overrides.items()})

    def as_flask_config(self) -> dict[str, Any]:
        """Render configuration values for Flask application."""
        return {
            "ENV": self.environment,
            "SECRET_KEY": self.secret_key,
            "DEBUG": self.DEBUG,
            "SUPABASE_URL": self.supabase_url,
            "POLL_INTERVAL_S": self.poll_interval_s,
            "JSON_SORT_KEYS": False,
        }


def setup_logging(debug: bool = False, log_path: str = "logs/smartfarm.log") -> None:
    """Setup logging configuration."""
    import logging
    import sys
    from logging.handlers import RotatingFileHandler

    log_level = logging.DEBUG if debug else logging.INFO

    root = logging.getLogger()
    root.setLevel(log_level)

    # Avoid adding duplicates when create_app is called multiple times
    has_console = any(getattr(h, "name", "") == "smartfarm_console" for h in root.handlers)
    has_file = any(getattr(h, "name", "") == "smartfarm_file" for h in root.handlers)
    added_handler = False

    # Console handler (force UTF-8 so "°C" survives Windows terminals)
    stream = sys.stdout
    with suppress(AttributeError, ValueError):
        stream.reconfigure(encoding="utf-8", errors="replace")
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    if not has_console:
        console_handler = logging.StreamHandler(stream=stream)
        console_handler.name = "smartfarm_console"
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)
        added_handler = True

    if not has_file and log_path:
        log_dir = os.path.dirname(log_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.name = "smartfarm_file"
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
        added_handler = True

    for handler in root.handlers:
        if getattr(handler, "name", "") in {"smartfarm_console", "smartfarm_file"}:
            handler.setLevel(log_level)

    if added_handler:
        root.info("Logging initialized at level: %s", logging.getLevelName(log_level))

    if _env_bool("SMARTFARM_SILENCE_WERKZEUG", True):
        logging.getLogger("werkzeug").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def load_config() -> AppConfig:
    """Helper for callers to load and validate configuration."""
    return AppConfig()
