"""
FastAPI / Strawberry integration: per-request validation context, response
merging and request logging
"""

import json
import re
from collections.abc import Callable
from inspect import isawaitable
from typing import Any

import strawberry
from fastapi import FastAPI, Request, Response, WebSocket
from starlette.middleware.base import BaseHTTPMiddleware
from strawberry.fastapi import GraphQLRouter

from ..config import Settings, ValidityConfig, settings
from ..logging import clear_request_context, configure_logging, get_logger, set_request_context
from ..registry import ValidatorRegistry
from .base import ValidityIntegration

logger = get_logger(__name__)

# Attribute on request.state holding the request's validation context
STATE_ATTRIBUTE = "graphql_validity"

_OPERATION_RE = re.compile(r"\b(query|mutation|subscription)\s+(\w+)")


def _operation_from_document(query: Any) -> str | None:
    if not isinstance(query, str) or not query:
        return None
    if "__schema" in query or "IntrospectionQuery" in query:
        return "__introspection"

    match = _OPERATION_RE.search(query)
    if match:
        kind = "" if match.group(1) == "query" else f"{match.group(1)}:"
        return f"{kind}{match.group(2)}"
    return "unnamed_operation"


async def extract_graphql_operation_name(request: Request, path: str = "/graphql") -> str | None:
    """Best-effort GraphQL operation name for logging, from GET params or a POST body."""
    if request.url.path != path:
        return None

    if request.method == "GET":
        params = dict(request.query_params)
        operation = params.get("operationName")
        if isinstance(operation, str) and operation:
            return operation
        return _operation_from_document(params.get("query"))

    if request.method == "POST":
        try:
            body = await request.body()
            if not body:
                return None
            data = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None
        if not isinstance(data, dict):
            return None
        operation = data.get("operationName")
        if isinstance(operation, str) and operation:
            return operation
        return _operation_from_document(data.get("query"))

    return None


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware to set logging context for each request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and set logging context."""
        request_id = set_request_context(request.headers.get("x-request-id"))

        try:
            graphql_operation = await extract_graphql_operation_name(request)

            log_data = {
                "method": request.method,
                "path": request.url.path,
                "remote_addr": request.client.host if request.client else None,
            }
            if graphql_operation:
                log_data["graphql_operation"] = graphql_operation

            logger.info("Request started", **log_data)

            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id

            logger.info(
                "Request completed",
                status_code=response.status_code,
                method=request.method,
                path=request.url.path,
                graphql_operation=graphql_operation,
            )
            return response

        except Exception as e:
            logger.error(
                "Request failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
            )
            raise

        finally:
            clear_request_context()


def build_context_getter(
    validity: ValidityIntegration,
    extra_context: Callable[[Request | WebSocket], dict[str, Any]] | None = None,
) -> Callable[..., Any]:
    """
    Build the Strawberry context getter for a router.

    HTTP requests get a fresh validation context, also kept on
    ``request.state`` until :meth:`ValidityGraphQLRouter.process_result`
    releases it. WebSocket connections (subscriptions) get no validation
    context: no response hook runs for them, so nothing could merge or
    release it. Their resolvers run unvalidated.
    """

    async def get_context(
        request: Request = None,  # type: ignore[assignment]
        ws: WebSocket = None,  # type: ignore[assignment]
    ) -> dict[str, Any]:
        """Get the context for GraphQL resolvers."""
        connection = request if request is not None else ws
        base: dict[str, Any] = {"request": connection}
        if extra_context is not None:
            base.update(extra_context(connection))

        if request is None:
            logger.debug("Validation skipped for WebSocket operation")
            return base

        context = validity.begin_request()
        setattr(request.state, STATE_ATTRIBUTE, context)
        return validity.attach(base, context)

    return get_context


class ValidityGraphQLRouter(GraphQLRouter):
    """
    Strawberry router that owns one validation context per HTTP request.

    The context getter creates the context and keeps it on
    ``request.state``; :meth:`process_result` runs before the response is
    sent, merges the collected violations and releases the context.
    Subscriptions over WebSocket are served without validation.
    """

    def __init__(
        self,
        schema: strawberry.Schema,
        *,
        integration: ValidityIntegration | None = None,
        extra_context: Callable[[Request | WebSocket], dict[str, Any]] | None = None,
        **kwargs: Any,
    ):
        self.validity = integration or ValidityIntegration()
        super().__init__(
            schema, context_getter=build_context_getter(self.validity, extra_context), **kwargs
        )

    async def process_result(self, request: Request, result: Any) -> Any:
        payload = super().process_result(request, result)
        if isawaitable(payload):
            payload = await payload

        context = getattr(request.state, STATE_ATTRIBUTE, None)
        if context is None:
            return payload

        try:
            return self.validity.finalize(context, payload)
        finally:
            setattr(request.state, STATE_ATTRIBUTE, None)


def create_graphql_router(
    schema: strawberry.Schema,
    registry: ValidatorRegistry,
    config: ValidityConfig | None = None,
    **router_kwargs: Any,
) -> ValidityGraphQLRouter:
    """Wrap the schema's resolvers and build a router serving it."""
    integration = ValidityIntegration(config)
    integration.wrap(schema, registry)

    router_kwargs.setdefault("path", "/graphql")
    return ValidityGraphQLRouter(schema, integration=integration, **router_kwargs)


def create_app(
    schema: strawberry.Schema,
    registry: ValidatorRegistry,
    config: ValidityConfig | None = None,
    app_settings: Settings | None = None,
) -> FastAPI:
    """Create a FastAPI application serving a validated schema at ``/graphql``."""
    app_settings = app_settings or settings
    configure_logging(debug=app_settings.debug, log_level=app_settings.log_level)

    config = config or ValidityConfig.from_settings(app_settings)
    app = FastAPI(title="GraphQL Validity", debug=app_settings.debug)
    app.add_middleware(RequestContextMiddleware)

    @app.get("/health")
    async def health_check():  # pyright: ignore [reportUnusedFunction]
        """Health check endpoint."""
        return {"status": "healthy"}

    app.include_router(create_graphql_router(schema, registry, config), prefix="")
    logger.info(
        "GraphQL endpoint initialized",
        endpoint="/graphql",
        wrap_errors=config.wrap_errors,
        enable_profiling=config.enable_profiling,
    )
    return app
