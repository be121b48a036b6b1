"""Utilities for calling the Gemini generateContent REST API."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from http.client import RemoteDisconnected
from typing import Any, Dict, Mapping, Optional, Tuple
from urllib import request as urllib_request, error as urllib_error
from urllib.parse import quote

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-1.5-flash-latest"
DEFAULT_TEMPERATURE = 0.3
DEFAULT_MAX_OUTPUT_TOKENS = 200
DEFAULT_TIMEOUT = 20.0


class GeminiError(RuntimeError):
    """Raised when a Gemini API call fails before a usable answer arrives."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class GeminiSettings:
    """Connection and generation parameters for a Gemini model."""

    api_key: Optional[str]
    model: str = DEFAULT_MODEL
    api_base: str = GEMINI_API_BASE
    temperature: float = DEFAULT_TEMPERATURE
    max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "GeminiSettings":
        """Build settings from a Flask config mapping (``GEMINI_*`` keys)."""
        return cls(
            api_key=(config.get("GEMINI_API_KEY") or "").strip() or None,
            model=config.get("GEMINI_MODEL") or DEFAULT_MODEL,
            api_base=(config.get("GEMINI_API_BASE") or GEMINI_API_BASE).rstrip("/"),
            temperature=float(config.get("GEMINI_TEMPERATURE", DEFAULT_TEMPERATURE)),
            max_output_tokens=int(
                config.get("GEMINI_MAX_OUTPUT_TOKENS", DEFAULT_MAX_OUTPUT_TOKENS)
            ),
            timeout=float(config.get("GEMINI_TIMEOUT", DEFAULT_TIMEOUT)),
        )

    @property
    def endpoint(self) -> str:
        return f"{self.api_base}/models/{quote(self.model)}:generateContent"


@dataclass(frozen=True)
class GeminiResponse:
    """Outcome of a generateContent call that reached the server."""

    status: int
    text: Optional[str]

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def _headers(api_key: str) -> Dict[str, str]:
    return {
        "x-goog-api-key": api_key,
        "Content-Type": "application/json",
        "User-Agent": "TaskPrioritizer",
    }


def _request(settings: GeminiSettings, payload: dict) -> Tuple[int, str]:
    if not settings.api_key:
        raise GeminiError("GEMINI_API_KEY is not configured.")

    request = urllib_request.Request(
        settings.endpoint,
        data=json.dumps(payload).encode("utf-8"),
        headers=_headers(settings.api_key),
        method="POST",
    )
    try:
        with urllib_request.urlopen(request, timeout=settings.timeout) as response:
            status = response.getcode()
            raw = response.read()
    except urllib_error.HTTPError as error:
        status = error.code
        raw = error.read()
    except RemoteDisconnected as error:
        raise GeminiError("Gemini closed the connection unexpectedly.") from error
    except urllib_error.URLError as error:
        raise GeminiError("Unable to reach Gemini.") from error
    except TimeoutError as error:
        raise GeminiError("Gemini request timed out.") from error

    return status, raw.decode("utf-8") if raw else ""


def _extract_text(body: Any) -> Optional[str]:
    if not isinstance(body, dict):
        return None
    candidates = body.get("candidates") or []
    if not candidates or not isinstance(candidates[0], dict):
        return None
    parts = (candidates[0].get("content") or {}).get("parts") or []
    if not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    return text if isinstance(text, str) else None


def generate_text(settings: GeminiSettings, prompt: str) -> GeminiResponse:
    """Send a single prompt to Gemini and return the first candidate's text.

    A response with a non-2xx status is returned with ``text`` set to
    ``None`` so the caller can decide how to degrade. ``GeminiError`` is
    raised when no response arrives at all or when a successful response
    does not carry any generated text.
    """
    payload = {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": {
            "temperature": settings.temperature,
            "maxOutputTokens": settings.max_output_tokens,
        },
    }
    status, text = _request(settings, payload)

    if not 200 <= status < 300:
        logging.warning(
            "Gemini API call failed",
            extra={"model": settings.model, "status": status, "body": text[:500]},
        )
        return GeminiResponse(status=status, text=None)

    try:
        body = json.loads(text) if text else {}
    except json.JSONDecodeError as error:
        raise GeminiError("Gemini returned a malformed response body.", status) from error

    generated = _extract_text(body)
    if not generated:
        raise GeminiError("No AI response received.", status)
    return GeminiResponse(status=status, text=generated)
