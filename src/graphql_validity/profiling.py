"""
Execution timing for wrapped resolvers
"""

import json
import sys
import time
from collections.abc import Sequence
from typing import Any

from .context import RequestValidationContext
from .logging import get_logger
from .results import ProfilingRecord

logger = get_logger(__name__)


def now_ms() -> float:
    """Monotonic clock in milliseconds."""
    return time.perf_counter() * 1000.0


def default_profiling_result_handler(records: Sequence[ProfilingRecord]) -> None:
    """Pretty-print profiling records to stderr."""
    if records:
        print(json.dumps([record.as_dict() for record in records], indent=2), file=sys.stderr)


def store_profiling_info(
    context: RequestValidationContext,
    info: Any,
    field_name: str,
    started: float,
    validated: float,
    finished: float,
) -> None:
    """
    Append a profiling record for one field resolution.

    Failures (e.g. missing resolve info) are logged and swallowed so timing
    never affects the resolver's result.

    Args:
        context: Request context receiving the record
        info: graphql-core resolve info, source of the response path
        field_name: Name of the resolved field
        started: Timestamp at resolver entry
        validated: Timestamp after local validation
        finished: Timestamp after the original resolver and unwrapping
    """
    try:
        validation = validated - started
        execution = finished - started
        context.profiling_records.append(
            ProfilingRecord(
                path=info.path.as_list(),
                field_name=field_name,
                validation_duration_ms=validation,
                execution_duration_ms=execution,
                total_execution_ms=execution - validation,
            )
        )
    except Exception as e:
        logger.warning("Profiling failed", field_name=field_name, error=str(e), exc_info=True)
