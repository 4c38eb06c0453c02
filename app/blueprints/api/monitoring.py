"""Farm Monitoring API
======================

Endpoints driving and inspecting the polling loop.

Routes:
    GET  /api/monitoring/status  - Loop status and dedup state
    GET  /api/monitoring/latest  - Last fetched reading with its deviations
    POST /api/monitoring/poll    - Run one tick now
    POST /api/monitoring/start   - Start the polling thread
    POST /api/monitoring/stop    - Stop the polling thread
    GET  /api/monitoring/alerts  - Recent alerts and failure messages
    DELETE /api/monitoring/alerts - Empty the alert inbox
"""

from __future__ import annotations

import logging

from flask import Blueprint, Response, request

from app.blueprints.api._common import (
    get_monitoring_service as _monitoring_service,
    get_notifications_service as _notifications_service,
    get_vegetation_service as _vegetation_service,
    success as _success,
)
from app.utils.http import safe_route

logger = logging.getLogger(__name__)

monitoring_api = Blueprint("monitoring_api", __name__)


@monitoring_api.get("/status")
@safe_route("Failed to get monitoring status")
def get_status() -> Response:
    status = _monitoring_service().get_status()
    status["active_profile_error"] = _vegetation_service().active_profile_error
    return _success(status)


@monitoring_api.get("/latest")
@safe_route("Failed to get latest reading")
def get_latest() -> Response:
    """Last fetched reading, or ``{"reading": null}`` before the first fetch."""
    reading, report = _monitoring_service().latest_snapshot()
    return _success(
        {
            "reading": reading.to_dict() if reading else None,
            "report": report.to_dict(),
        }
    )


@monitoring_api.post("/poll")
@safe_route("Failed to poll the farm backend")
def poll_now() -> Response:
    """Run one tick synchronously. A failed fetch is reported in the outcome, not as an HTTP error."""
    outcome = _monitoring_service().poll_once()
    return _success(outcome.to_dict())


@monitoring_api.post("/start")
@safe_route("Failed to start monitoring")
def start_monitoring() -> Response:
    service = _monitoring_service()
    started = service.start()
    return _success(service.get_status(), message="Monitoring started" if started else "Monitoring already running")


@monitoring_api.post("/stop")
@safe_route("Failed to stop monitoring")
def stop_monitoring() -> Response:
    service = _monitoring_service()
    service.stop()
    return _success(service.get_status(), message="Monitoring stopped")


@monitoring_api.get("/alerts")
@safe_route("Failed to list alerts")
def list_alerts() -> Response:
    """Query parameters:
        limit (int, optional) - max messages (default 50)
        kind  (str, optional) - "alert" or "fetch_failure"
    """
    limit = min(request.args.get("limit", 50, type=int), 500)
    kind = request.args.get("kind")
    messages = _notifications_service().list_messages(limit=limit, kind=kind)
    return _success({"alerts": messages, "total": len(messages)})


@monitoring_api.delete("/alerts")
@safe_route("Failed to clear alerts")
def clear_alerts() -> Response:
    removed = _notifications_service().clear()
    return _success({"removed": removed}, message="Alert inbox cleared")
