"""
Liveness and monitor health routes.
"""

from __future__ import annotations

import logging
from typing import Any

from flask import Blueprint, Response

from app.blueprints.api._common import (
    get_container as _container,
    get_monitoring_service as _monitoring_service,
    get_vegetation_service as _vegetation_service,
    success as _success,
)
from app.utils.http import safe_route
from app.utils.time import iso_now

logger = logging.getLogger("health_api")


def overall_status(monitor: dict[str, Any], profile_error: str | None = None) -> str:
    """Collapse the loop status into one word for dashboards."""
    if not monitor["is_running"]:
        return "stopped"
    if monitor["failure_streak"] or profile_error:
        return "degraded"
    return "healthy"


def register_system_routes(health_api: Blueprint):
    @health_api.get("/ping")
    @safe_route("Failed to handle ping request")
    def ping() -> Response:
        return _success({"status": "ok", "timestamp": iso_now()})

    @health_api.get("/system")
    @safe_route("Failed to get system health")
    def get_system_health() -> Response:
        monitor = _monitoring_service().get_status()
        profile_error = _vegetation_service().active_profile_error
        return _success(
            {
                "status": overall_status(monitor, profile_error),
                "monitoring": monitor,
                "active_profile_error": profile_error,
                "event_bus": _container().event_bus.get_metrics(),
                "timestamp": iso_now(),
            }
        )
