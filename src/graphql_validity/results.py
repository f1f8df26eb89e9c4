"""Value types produced by validators, resolvers and the profiler."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass
class ValidationResult:
    """A business-rule violation reported by a validator.

    Only ``message`` ever reaches the client; ``details`` stays server-side.
    """

    message: str
    details: dict[str, Any] | None = None


@dataclass
class DataValidationResult:
    """Resolver return value carrying both the field data and violations.

    The interceptor unwraps it: ``errors`` are collected into the request
    context and ``data`` becomes the field's value.
    """

    data: Any = None
    errors: list[Any] = field(default_factory=list)


@dataclass
class ProfilingRecord:
    """Timing of a single field resolution, in milliseconds."""

    path: list[str | int]
    field_name: str
    validation_duration_ms: float
    execution_duration_ms: float
    total_execution_ms: float

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def as_violations(returned: Any) -> list[Any]:
    """Normalize what a validator returned into a list of violations.

    ``None`` or an empty value means no violations; a single result
    (mapping, :class:`ValidationResult`, exception or string) is one
    violation; any other iterable is taken as a sequence of results.
    """
    if returned is None or (isinstance(returned, (str, Mapping, list, tuple)) and not returned):
        return []
    if isinstance(returned, (str, Mapping, ValidationResult, BaseException)):
        return [returned]
    return list(returned)


def project_result(result: Any) -> dict[str, str]:
    """Reduce any accepted violation shape to the client-visible ``{"message": ...}``."""
    if isinstance(result, ValidationResult):
        message = result.message
    elif isinstance(result, Mapping):
        message = result.get("message", "")
    elif isinstance(result, BaseException):
        message = str(result)
    else:
        message = getattr(result, "message", result)

    return {"message": str(message)}
