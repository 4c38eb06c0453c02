"""
JSON response envelope and route error handling.

Every API response has the shape ``{"ok": bool, "data": ..., "error": ...}``.
Client errors (4xx) carry the exception message; server errors (5xx) only
carry a generic text, the real exception goes to the log.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable

import pydantic
from flask import Response, jsonify

from app.utils.time import iso_now

_log = logging.getLogger(__name__)

_PUBLIC_MESSAGES: dict[int, str] = {
    400: "Invalid request",
    404: "Resource not found",
    409: "Conflict",
    500: "An internal error occurred",
    502: "Farm backend unavailable",
}


def success_response(
    data: dict | list | None = None,
    status: int = 200,
    *,
    message: str | None = None,
) -> Response:
    body: dict[str, Any] = {"ok": True, "data": data, "error": None}
    if message is not None:
        body["message"] = message
    response = jsonify(body)
    response.status_code = status
    return response


def error_response(
    message: str,
    status: int = 500,
    *,
    details: dict | None = None,
) -> Response:
    error: dict[str, Any] = {"message": message, "timestamp": iso_now(), **(details or {})}
    body: dict[str, Any] = {"ok": False, "data": None, "error": error, "message": message}
    if details:
        body["details"] = details
    response = jsonify(body)
    response.status_code = status
    return response


def safe_error(exc: BaseException, status: int = 500, *, context: str = "") -> Response:
    """Log ``exc`` with its traceback and answer with the public message for ``status``."""
    _log.error("API error [%s] %s: %s", status, context, exc, exc_info=exc)
    return error_response(_PUBLIC_MESSAGES.get(status, _PUBLIC_MESSAGES[500]), status)


def validation_error(exc: pydantic.ValidationError) -> Response:
    """400 listing every field pydantic rejected."""
    return error_response(
        "Invalid request",
        400,
        details={"errors": exc.errors(include_url=False, include_context=False)},
    )


def safe_route(error_message: str = "An internal error occurred", *, error_status: int = 500) -> Callable:
    """Wrap a Flask view so it always answers with the JSON envelope.

    - pydantic ``ValidationError`` from request parsing becomes a 400
    - ``SmartFarmError`` uses its ``http_status`` (and ``detail`` below 500)
    - anything else is logged and becomes ``error_status``

    Usage::

        @monitoring_api.post("/poll")
        @safe_route("Failed to poll the farm backend")
        def poll_now():
            ...
    """
    from app.domain.exceptions import SmartFarmError

    def decorator(view: Callable) -> Callable:
        @functools.wraps(view)
        def wrapper(*args: Any, **kwargs: Any) -> Response:
            try:
                return view(*args, **kwargs)
            except pydantic.ValidationError as exc:
                return validation_error(exc)
            except SmartFarmError as exc:
                if exc.http_status >= 500:
                    return safe_error(exc, exc.http_status, context=error_message)
                return error_response(str(exc) or error_message, exc.http_status, details=exc.detail or None)
            except Exception as exc:
                return safe_error(exc, error_status, context=error_message)

        return wrapper

    return decorator
