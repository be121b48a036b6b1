"""Classify task urgency with Gemini, falling back to a keyword heuristic."""

from __future__ import annotations

import json
import logging
from typing import Optional

from models.priority import (
    ClassificationOutcome,
    ClassificationStatus,
    Priority,
    PriorityResult,
)
from services.gemini_service import GeminiError, GeminiSettings, generate_text

URGENCY_KEYWORDS = ("today", "tonight", "urgent", "ASAP", "deadline")
IMPORTANCE_KEYWORDS = ("meeting", "presentation", "exam", "interview", "project")
# Only the title is scanned, case-insensitively.
FALLBACK_KEYWORDS = ("urgent", "asap", "deadline", "today", "tonight")

NO_DESCRIPTION = "No additional description"
DEFAULT_REASON = (
    "Unable to analyze priority automatically. Assigned Medium priority as default."
)

PROMPT_TEMPLATE = """Analyze this task and determine its priority level (High, Medium, or Low) based on urgency, deadlines, and importance. Provide a brief, friendly explanation.

Task: "{title}"
Description: "{description}"

Consider:
- Deadlines or time-sensitive words ({urgency})
- Important keywords ({importance})
- Personal urgency indicators

Respond in this exact JSON format:
{{
  "priority": "High|Medium|Low",
  "reason": "Brief explanation of why this priority was chosen"
}}"""


def build_prompt(title: str, description: Optional[str] = None) -> str:
    return PROMPT_TEMPLATE.format(
        title=title,
        description=description or NO_DESCRIPTION,
        urgency=", ".join(URGENCY_KEYWORDS),
        importance=", ".join(IMPORTANCE_KEYWORDS),
    )


def keyword_priority(title: str) -> PriorityResult:
    lowered = (title or "").lower()
    if any(keyword in lowered for keyword in FALLBACK_KEYWORDS):
        priority = Priority.HIGH
    else:
        priority = Priority.MEDIUM
    return PriorityResult(
        priority=priority,
        reason=f"Assigned {priority.value} priority based on task content analysis.",
    )


class ModelOutputError(ValueError):
    """Raised when generated text cannot be used as a priority answer."""

    def __init__(self, message: str, detail: str):
        super().__init__(message)
        self.detail = detail


def _strip_code_fence(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith("```"):
        # Gemini often answers with ```json\n{...}\n```
        cleaned = cleaned.strip("`").strip()
        if cleaned.lower().startswith("json"):
            cleaned = cleaned[4:].strip()
    return cleaned


def parse_model_output(text: str) -> PriorityResult:
    """Turn the model's raw answer into a result.

    Raises:
        ValueError: if the text is not JSON. ModelOutputError (a ValueError)
            if it is not an object or names a priority outside Low/Medium/High.
    """
    parsed = json.loads(_strip_code_fence(text))
    if not isinstance(parsed, dict):
        raise ModelOutputError("Model output is not a JSON object.", "unparsable_output")

    raw_priority = parsed.get("priority")
    if raw_priority is None:
        priority = Priority.MEDIUM
    else:
        priority = Priority.from_label(raw_priority)
        if priority is None:
            raise ModelOutputError(
                f"Unsupported priority value: {raw_priority!r}", "invalid_priority"
            )

    reason = parsed.get("reason")
    return PriorityResult(
        priority=priority,
        reason=reason if isinstance(reason, str) else None,
    )


def default_outcome(detail: Optional[str] = None) -> ClassificationOutcome:
    return ClassificationOutcome(
        result=PriorityResult(priority=Priority.MEDIUM, reason=DEFAULT_REASON),
        status=ClassificationStatus.FAILED,
        detail=detail,
    )


def _degraded(title: str, detail: str) -> ClassificationOutcome:
    logging.warning(
        "Falling back to keyword priority",
        extra={"detail": detail, "title_length": len(title or "")},
    )
    return ClassificationOutcome(
        result=keyword_priority(title),
        status=ClassificationStatus.DEGRADED,
        detail=detail,
    )


def classify_task_outcome(
    title: str,
    description: Optional[str] = None,
    *,
    settings: GeminiSettings,
) -> ClassificationOutcome:
    """Classify a task and report which path produced the answer.

    Never raises: transport and parsing problems degrade to the keyword
    heuristic, anything else yields the fixed Medium default.
    """
    try:
        response = generate_text(settings, build_prompt(title, description))
        if not response.ok:
            return _degraded(title, f"http_{response.status}")

        try:
            result = parse_model_output(response.text or "")
        except ValueError as exc:
            return _degraded(title, getattr(exc, "detail", "unparsable_output"))

        return ClassificationOutcome(result=result, status=ClassificationStatus.SUCCESS)
    except GeminiError as exc:
        logging.error("Unable to prioritize task with Gemini: %s", exc)
        return default_outcome(str(exc))
    except Exception as exc:
        logging.exception("Unexpected error while prioritizing task")
        return default_outcome(str(exc) or exc.__class__.__name__)


def classify_task(
    title: str,
    description: Optional[str] = None,
    *,
    settings: GeminiSettings,
) -> PriorityResult:
    return classify_task_outcome(title, description, settings=settings).result
