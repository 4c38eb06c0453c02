"""History & Gallery API
========================

Routes:
    GET  /api/history           - Saved readings, newest first (?farm_id=)
    POST /api/history           - Save the latest reading with notes/picture
    GET  /api/gallery           - The user's pictures and videos (?media=image|video)
"""

from __future__ import annotations

import logging

from flask import Blueprint, Response, request

from app.blueprints.api._common import (
    fail as _fail,
    get_gallery_service as _gallery_service,
    get_history_service as _history_service,
    parse_body as _parse_body,
    success as _success,
)
from app.schemas.history import CreateHistoryEntryRequest
from app.utils.http import safe_route

logger = logging.getLogger(__name__)

history_api = Blueprint("history_api", __name__)
gallery_api = Blueprint("gallery_api", __name__)


@history_api.get("")
@safe_route("Failed to list history")
def list_history() -> Response:
    farm_id = request.args.get("farm_id", type=int)
    entries = _history_service().list_entries(farm_id)
    return _success({"entries": [e.to_dict() for e in entries], "total": len(entries)})


@history_api.post("")
@safe_route("Failed to save history entry")
def save_history() -> Response:
    body = _parse_body(CreateHistoryEntryRequest)
    entry = _history_service().save_current_reading(notes=body.notes, picture_url=body.picture_url)
    return _success(entry.to_dict(), 201, message="Reading saved to history")


@gallery_api.get("")
@safe_route("Failed to list gallery")
def list_gallery() -> Response:
    media = request.args.get("media")
    if media not in (None, "image", "video"):
        return _fail("media must be 'image' or 'video'", 400)
    items = _gallery_service().list_items(media)
    return _success({"items": [i.to_dict() for i in items], "total": len(items)})
