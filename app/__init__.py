from __future__ import annotations

import atexit
import contextlib
import logging
import signal
import threading
from typing import Any

from flask import Flask, request
from werkzeug.exceptions import HTTPException

from app.blueprints.api.health import health_api
from app.blueprints.api.history import gallery_api, history_api
from app.blueprints.api.monitoring import monitoring_api
from app.blueprints.api.vegetation import vegetation_api
from app.config import load_config, setup_logging


def create_app(config_overrides: dict[str, Any] | None = None, *, bootstrap_runtime: bool = False) -> Flask:
    """Build the Flask app and its service container.

    Args:
        config_overrides: AppConfig attribute overrides (keys are case-insensitive)
        bootstrap_runtime: Start the monitoring thread when
            ``autostart_monitoring`` is enabled
    """
    config = load_config()
    if config_overrides:
        config = config.with_overrides(config_overrides)

    # Configure logging early so container startup is visible in the terminal and smartfarm.log.
    setup_logging(debug=config.DEBUG or config.log_level.upper() == "DEBUG", log_path=config.log_path)

    flask_app = Flask(__name__)
    flask_app.config.update(config.as_flask_config())

    from app.services.container import ServiceContainer

    container = ServiceContainer.build(config, start_monitoring=bootstrap_runtime and config.autostart_monitoring)
    flask_app.config["CONTAINER"] = container

    # ── Graceful shutdown handlers ──────────────────────────────────
    _shutdown_lock = threading.Lock()
    _shutdown_done = False

    def _graceful_shutdown(reason: str = "unknown") -> None:
        nonlocal _shutdown_done
        with _shutdown_lock:
            if _shutdown_done:
                return
            _shutdown_done = True
        logging.info("Graceful shutdown initiated (%s)", reason)
        try:
            container.shutdown()
        except Exception as exc:
            logging.warning("Error during graceful shutdown: %s", exc)

    def _signal_handler(signum: int, _frame: object) -> None:
        sig_name = signal.Signals(signum).name
        logging.info("Received %s, shutting down", sig_name)
        _graceful_shutdown(sig_name)
        raise SystemExit(0)

    atexit.register(_graceful_shutdown, "atexit")

    # Signal handlers can only be installed from the main thread
    if bootstrap_runtime:
        for sig in (signal.SIGINT, signal.SIGTERM):
            with contextlib.suppress(OSError, ValueError):
                signal.signal(sig, _signal_handler)

    # Global JSON error handler: domain exceptions carry their own
    # ``http_status``; anything else becomes a generic 500.
    @flask_app.errorhandler(Exception)
    def _handle_unhandled(exc):
        from app.domain.exceptions import SmartFarmError
        from app.utils.http import error_response, safe_error

        if isinstance(exc, HTTPException):
            status = int(exc.code or 500)
            if status >= 500:
                return safe_error(exc, status, context="http-exception")
            return error_response(exc.description or "Request failed", status)

        if isinstance(exc, SmartFarmError):
            status = exc.http_status
            if status >= 500:
                return safe_error(exc, status, context=type(exc).__name__)
            return error_response(str(exc) or "Request failed", status)

        return safe_error(exc, 500, context=f"unhandled {request.method} {request.path}")

    flask_app.register_blueprint(health_api, url_prefix="/api/health")
    flask_app.register_blueprint(monitoring_api, url_prefix="/api/monitoring")
    flask_app.register_blueprint(vegetation_api, url_prefix="/api/vegetation")
    flask_app.register_blueprint(history_api, url_prefix="/api/history")
    flask_app.register_blueprint(gallery_api, url_prefix="/api/gallery")

    for bp_name in flask_app.blueprints:
        logging.debug("Registered blueprint: %s", bp_name)

    logging.getLogger(__name__).info("SmartFarm application initialized successfully.")
    return flask_app


__all__ = ["create_app"]
