"""Vegetation Profile API
=========================

Routes:
    GET  /api/vegetation              - List profiles
    POST /api/vegetation              - Create a profile
    GET  /api/vegetation/active       - Active profile (null when none)
    PUT  /api/vegetation/active       - Select the active profile
    POST /api/vegetation/active/reload - Re-read the selection from the backend
    GET  /api/vegetation/<id>         - One profile
    PUT  /api/vegetation/<id>         - Partial update
"""

from __future__ import annotations

import logging

from flask import Blueprint, Response

from app.blueprints.api._common import (
    fail as _fail,
    get_vegetation_service as _vegetation_service,
    parse_body as _parse_body,
    success as _success,
)
from app.schemas.vegetation import (
    CreateVegetationProfileRequest,
    SetActiveProfileRequest,
    UpdateVegetationProfileRequest,
)
from app.utils.http import safe_route

logger = logging.getLogger(__name__)

vegetation_api = Blueprint("vegetation_api", __name__)


@vegetation_api.get("")
@safe_route("Failed to list vegetation profiles")
def list_profiles() -> Response:
    profiles = _vegetation_service().list_profiles()
    return _success({"profiles": [p.to_dict() for p in profiles], "total": len(profiles)})


@vegetation_api.post("")
@safe_route("Failed to create vegetation profile")
def create_profile() -> Response:
    body = _parse_body(CreateVegetationProfileRequest)
    profile = _vegetation_service().create_profile(body.model_dump())
    return _success(profile.to_dict(), 201, message="Vegetation profile created")


@vegetation_api.get("/active")
@safe_route("Failed to get active vegetation profile")
def get_active_profile() -> Response:
    profile = _vegetation_service().get_active_profile()
    return _success(profile.to_dict() if profile else None)


@vegetation_api.put("/active")
@safe_route("Failed to set active vegetation profile")
def set_active_profile() -> Response:
    body = _parse_body(SetActiveProfileRequest)
    profile = _vegetation_service().set_active_profile(body.profile_id)
    return _success(profile.to_dict(), message=f"{profile.name} is now the active profile")


@vegetation_api.post("/active/reload")
@safe_route("Failed to reload active vegetation profile")
def reload_active_profile() -> Response:
    """Use after editing the profile or the selection outside this API."""
    service = _vegetation_service()
    profile = service.reload_active_profile()
    return _success(
        {"profile": profile.to_dict() if profile else None, "error": service.active_profile_error}
    )


@vegetation_api.get("/<int:profile_id>")
@safe_route("Failed to get vegetation profile")
def get_profile(profile_id: int) -> Response:
    return _success(_vegetation_service().get_profile(profile_id).to_dict())


@vegetation_api.put("/<int:profile_id>")
@safe_route("Failed to update vegetation profile")
def update_profile(profile_id: int) -> Response:
    body = _parse_body(UpdateVegetationProfileRequest)

    updates = body.model_dump(exclude_none=True)
    if not updates:
        return _fail("No fields to update", 400)

    profile = _vegetation_service().update_profile(profile_id, updates)
    return _success(profile.to_dict(), message="Vegetation profile updated")
