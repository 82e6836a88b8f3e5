"""
Error taxonomy.

Only TransportError, MalformedOutputError and ValidationError are retried by the
RetryPolicy. After the attempt ceiling they are wrapped into MissionFailed, which
is what the orchestrator turns into the ERROR phase.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence


class CollabHunterError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(CollabHunterError):
    """A mission config is missing required input. Raised before dispatch."""

    def __init__(self, field: str, message: str = "") -> None:
        self.field = field
        super().__init__(message or f"Missing required mission input: {field}")


class TransportError(CollabHunterError):
    """The generative service call failed (network, HTTP status, SDK error)."""


class MalformedOutputError(CollabHunterError):
    """The deserializer exhausted its repairs without finding a usable payload."""

    def __init__(self, message: str, raw_text: str = "") -> None:
        self.raw_text = raw_text
        super().__init__(message)


@dataclass(frozen=True)
class ValidationIssue:
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path or '<root>'}: {self.message}"


class ValidationError(CollabHunterError):
    """A deserialized payload does not satisfy the declared output shape."""

    def __init__(self, shape_name: str, issues: Sequence[ValidationIssue]) -> None:
        self.shape_name = shape_name
        self.issues: List[ValidationIssue] = list(issues)
        summary = "; ".join(str(i) for i in self.issues[:5]) or "invalid value"
        super().__init__(f"{shape_name} failed validation: {summary}")

    @property
    def paths(self) -> List[str]:
        return [i.path for i in self.issues]


class MissionFailed(CollabHunterError):
    """A mission gave up after its retries. `cause` is the last underlying error."""

    def __init__(self, cause: BaseException, message: str = "") -> None:
        self.cause = cause
        super().__init__(message or f"Mission failed: {cause}")


class InvalidTransitionError(CollabHunterError):
    """A workflow operation was invoked from a phase that does not allow it."""

    def __init__(self, operation: str, phase: str) -> None:
        self.operation = operation
        self.phase = phase
        super().__init__(f"'{operation}' is not allowed while in phase {phase}")


class CollectionNotFoundError(CollabHunterError):
    def __init__(self, collection_id: str) -> None:
        self.collection_id = collection_id
        super().__init__(f"No collection with id '{collection_id}'")


RETRYABLE_ERRORS = (TransportError, MalformedOutputError, ValidationError)
