"""Errors raised by the farm monitor.

Every error derives from :class:`SmartFarmError` and names the HTTP status
the API answers with. ``safe_route`` reads ``http_status`` so views never map
errors by hand.

::

    SmartFarmError               500
    ├── ValidationError          400  bad profile, reading row or request
    ├── NotFoundError            404  unknown vegetation profile
    ├── ConflictError            409  e.g. saving history before any reading
    ├── ServiceError             500
    │   └── ExternalServiceError 502
    │       └── FetchError       502  backend unreachable or unusable reply
    │           └── MalformedRowError 502  row fetched but invalid
    └── ConfigurationError       500  missing Supabase settings
"""

from __future__ import annotations

from typing import Any


class SmartFarmError(Exception):
    """Base class; ``detail`` holds structured context such as the offending field."""

    http_status: int = 500

    def __init__(self, message: str = "", *, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.detail = detail or {}


class ValidationError(SmartFarmError):
    http_status: int = 400


class NotFoundError(SmartFarmError):
    http_status: int = 404


class ConflictError(SmartFarmError):
    """The request does not fit the monitor's current state."""

    http_status: int = 409


class ServiceError(SmartFarmError):
    http_status: int = 500


class ExternalServiceError(ServiceError):
    http_status: int = 502


class FetchError(ExternalServiceError):
    """The backend could not be reached, refused the request or sent an unusable body.

    The monitoring loop treats it as a failed tick and retries on the next one.
    """


class MalformedRowError(FetchError):
    """A backend row was fetched but does not decode into a valid domain object."""


class ConfigurationError(SmartFarmError):
    http_status: int = 500
