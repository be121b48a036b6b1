"""Shared helpers for route blueprints."""

from __future__ import annotations

from typing import Any

from flask import current_app, request

from services.gemini_service import GeminiSettings

__all__ = ["gemini_settings", "json_object_payload"]


def json_object_payload() -> dict[str, Any] | None:
    """Return the request body when it is a JSON object, otherwise ``None``."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return None
    return payload


def gemini_settings() -> GeminiSettings:
    """Gemini settings for the running application."""
    return GeminiSettings.from_config(current_app.config)
