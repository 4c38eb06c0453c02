"""
Health routes mounted at /api/health:

- GET /ping    process is up
- GET /system  polling loop state and event bus counters
"""

from __future__ import annotations

from flask import Blueprint

health_api = Blueprint("health_api", __name__)

from app.blueprints.api.health.system import register_system_routes

register_system_routes(health_api)

__all__ = ["health_api"]
