"""Task prioritization endpoint."""
from __future__ import annotations

import logging

from flask import Blueprint, jsonify

from routes import gemini_settings, json_object_payload
from services.priority_service import classify_task_outcome, default_outcome

prioritize_bp = Blueprint("prioritize", __name__, url_prefix="/functions/v1")


@prioritize_bp.route("/prioritize-task", methods=["POST"])
def prioritize_task():
    """Suggest a priority for a new task.

    Always answers 200 with ``{"priority": ..., "reason": ...}``; failures
    are reflected only in the reason text. Preflight ``OPTIONS`` requests
    are answered by Flask and decorated with CORS headers by Flask-CORS.
    """

    payload = json_object_payload()
    if payload is None:
        logging.warning("Prioritize request body is not a JSON object")
        return jsonify(default_outcome("invalid_request").result.to_dict())

    title = payload.get("title")
    if title is None:
        title = ""
    if not isinstance(title, str):
        logging.warning("Prioritize request title is not a string")
        return jsonify(default_outcome("invalid_request").result.to_dict())

    description = payload.get("description")
    if not isinstance(description, str):
        description = None

    outcome = classify_task_outcome(title, description, settings=gemini_settings())
    logging.info(
        "Task prioritized",
        extra={
            "priority": outcome.result.priority.value,
            "status": outcome.status.value,
            "detail": outcome.detail,
        },
    )
    return jsonify(outcome.result.to_dict())
