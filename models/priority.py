"""Value types produced by the task priority classifier."""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Optional


class Priority(StrEnum):
    """Urgency level assigned to a task."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        """Sort weight used by the dashboard; higher comes first."""
        return _PRIORITY_RANKS[self]

    @classmethod
    def from_label(cls, value: Any) -> Optional["Priority"]:
        if not isinstance(value, str):
            return None
        normalized = value.strip().lower()
        for member in cls:
            if member.value.lower() == normalized:
                return member
        return None


_PRIORITY_RANKS = {
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


class ClassificationStatus(StrEnum):
    """How a classification result was obtained."""

    SUCCESS = "success"
    DEGRADED = "degraded"
    FAILED = "failed"


@dataclass(frozen=True)
class PriorityResult:
    priority: Priority
    reason: Optional[str]

    def to_dict(self) -> dict:
        return {"priority": self.priority.value, "reason": self.reason}


@dataclass(frozen=True)
class ClassificationOutcome:
    """A result together with the path that produced it.

    Callers outside the service only ever see ``result``; ``status`` and
    ``detail`` exist so degraded and failed classifications can be told
    apart in logs and tests.
    """

    result: PriorityResult
    status: ClassificationStatus
    detail: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status is ClassificationStatus.SUCCESS
