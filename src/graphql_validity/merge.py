"""Splicing collected validation results into a GraphQL response payload."""

from typing import Any

from .context import RequestValidationContext
from .results import project_result


def merge_validation_results(
    context: RequestValidationContext, payload: dict[str, Any]
) -> dict[str, Any]:
    """
    Append a request's violations to the payload's ``errors`` list.

    Order: existing errors, then local results, then global results. Each
    result is reduced to ``{"message": ...}``. Nothing is deduplicated or
    reordered. The payload is updated in place and returned.
    """
    collected = [project_result(result) for result in context.local_results]
    collected += [project_result(result) for result in context.global_results or ()]

    if collected:
        payload["errors"] = list(payload.get("errors") or []) + collected
    return payload
