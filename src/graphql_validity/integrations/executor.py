"""Integration for executing queries directly with graphql-core."""

from collections.abc import Mapping
from typing import Any

import strawberry
from graphql import GraphQLSchema, graphql

from ..logging import get_logger
from .base import ValidityIntegration

logger = get_logger(__name__)


async def execute_validated(
    schema: GraphQLSchema | strawberry.Schema,
    source: str,
    *,
    integration: ValidityIntegration | None = None,
    root_value: Any = None,
    context_value: Mapping[str, Any] | None = None,
    variable_values: dict[str, Any] | None = None,
    operation_name: str | None = None,
) -> dict[str, Any]:
    """
    Execute a query with a fresh validation context and return the payload.

    The schema must already be wrapped. The context is placed in the
    execution context mapping under the integration's context key.

    Returns:
        Formatted response with collected violations merged into ``errors``
    """
    integration = integration or ValidityIntegration()
    if isinstance(schema, strawberry.Schema):
        schema = schema._schema

    context = integration.begin_request()
    result = await graphql(
        schema,
        source,
        root_value=root_value,
        context_value=integration.attach(context_value, context),
        variable_values=variable_values,
        operation_name=operation_name,
    )

    payload = dict(result.formatted)
    logger.debug(
        "GraphQL operation executed",
        operation_name=operation_name,
        errors=len(payload.get("errors") or []),
        violations=len(context.local_results) + len(context.global_results or []),
    )
    return integration.finalize(context, payload)
