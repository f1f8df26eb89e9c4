"""Shared behaviour for host integrations."""

from collections.abc import Mapping
from typing import Any

from ..config import ValidityConfig
from ..context import RequestValidationContext
from ..logging import get_logger
from ..merge import merge_validation_results
from ..registry import ValidatorRegistry
from ..walker import wrap_resolvers

logger = get_logger(__name__)


class ValidityIntegration:
    """
    Per-request lifecycle shared by every host adapter.

    An adapter must:
    1. call :meth:`begin_request` once per request and make the context
       reachable from resolver arguments (see :meth:`attach`),
    2. call :meth:`finalize` on the response payload before it is sent,
    3. drop the context afterwards; contexts are never reused.
    """

    def __init__(self, config: ValidityConfig | None = None):
        self.config = config or ValidityConfig()

    @property
    def context_key(self) -> str:
        return self.config.context_key

    def wrap(self, entity: Any, registry: ValidatorRegistry) -> int:
        """Wrap a schema, type or field with this integration's config."""
        return wrap_resolvers(entity, registry, self.config)

    def begin_request(self) -> RequestValidationContext:
        return RequestValidationContext()

    def attach(
        self, context_value: Mapping[str, Any] | None, context: RequestValidationContext
    ) -> dict[str, Any]:
        """Return a new execution context mapping carrying ``context``."""
        attached = dict(context_value or {})
        attached[self.context_key] = context
        return attached

    def finalize(
        self, context: RequestValidationContext, payload: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Merge collected violations into an outgoing payload.

        The merge only happens when the payload carries data. Profiling
        records, if any, go to the configured handler.

        Args:
            context: The finished request context
            payload: Formatted GraphQL response (``data``/``errors``)

        Returns:
            The same payload, updated in place
        """
        if payload.get("data") is not None:
            merge_validation_results(context, payload)

        if context.profiling_records:
            try:
                self.config.profiling_result_handler(list(context.profiling_records))
            except Exception as e:
                logger.warning("Profiling result handler failed", error=str(e), exc_info=True)

        return payload
