"""
Helpers shared by the API blueprints: container lookup, request parsing,
the response envelope and one accessor per service.
"""
from __future__ import annotations

import logging
from typing import TypeVar

from flask import current_app, request
from pydantic import BaseModel

from app.utils.http import error_response, success_response

logger = logging.getLogger("api._common")

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def get_container():
    """The ServiceContainer stored on the app by ``create_app``."""
    container = current_app.config.get("CONTAINER")
    if not container:
        raise RuntimeError("ServiceContainer not found in app config")
    return container


def get_json() -> dict:
    """Request body as a dict; anything else (missing, list, invalid JSON) is ``{}``."""
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def parse_body(schema: type[SchemaT]) -> SchemaT:
    """Validate the JSON body against ``schema``.

    Raises pydantic's ``ValidationError``, which ``safe_route`` turns into a 400.
    """
    return schema.model_validate(get_json())


def success(data: dict | list | None = None, status: int = 200, *, message: str | None = None):
    return success_response(data, status, message=message)


def fail(message: str, status: int = 400, *, details: dict | None = None):
    return error_response(message, status, details=details)


def get_monitoring_service():
    return get_container().monitoring_service


def get_vegetation_service():
    return get_container().vegetation_service


def get_history_service():
    return get_container().history_service


def get_gallery_service():
    return get_container().gallery_service


def get_notifications_service():
    return get_container().notifications_service
