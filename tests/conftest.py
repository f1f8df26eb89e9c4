"""
Shared pytest fixtures and configuration for all tests.
"""

from collections.abc import Generator
from typing import Any

import pytest
from graphql import (
    GraphQLArgument,
    GraphQLField,
    GraphQLID,
    GraphQLInt,
    GraphQLList,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLSchema,
    GraphQLString,
)

from graphql_validity.context import RequestValidationContext
from graphql_validity.logging import clear_request_context
from graphql_validity.registry import ValidatorRegistry
from graphql_validity.results import DataValidationResult

USERS = [
    {"id": "1", "name": "Ada", "email": "ada@example.com"},
    {"id": "2", "name": "Grace", "email": "grace@example.com"},
    {"id": "3", "name": "Linus", "email": "linus@example.com"},
]


def build_schema() -> GraphQLSchema:
    """Small graphql-core schema: Query.user/users/answer and a User type."""
    user_type = GraphQLObjectType(
        "User",
        lambda: {
            "id": GraphQLField(GraphQLNonNull(GraphQLID), resolve=lambda user, _info: user["id"]),
            "name": GraphQLField(GraphQLString, resolve=lambda user, _info: user["name"]),
            # No resolver: served by graphql-core's default resolver
            "email": GraphQLField(GraphQLString),
        },
    )

    async def resolve_user(_root: Any, _info: Any, id: str) -> dict[str, str] | None:
        return next((user for user in USERS if user["id"] == id), None)

    query_type = GraphQLObjectType(
        "Query",
        {
            "user": GraphQLField(
                user_type,
                args={"id": GraphQLArgument(GraphQLNonNull(GraphQLID))},
                resolve=resolve_user,
            ),
            "users": GraphQLField(
                GraphQLNonNull(GraphQLList(GraphQLNonNull(user_type))),
                resolve=lambda _root, _info: USERS,
            ),
            "answer": GraphQLField(GraphQLInt, resolve=lambda _root, _info: 42),
        },
    )
    return GraphQLSchema(query=query_type)


@pytest.fixture
def schema() -> GraphQLSchema:
    """A fresh, unwrapped schema for each test."""
    return build_schema()


@pytest.fixture
def failing_schema() -> GraphQLSchema:
    """Schema whose resolvers raise or report their own violations."""

    def resolve_broken(_root: Any, _info: Any) -> int:
        raise RuntimeError("database password rejected")

    async def resolve_partial(_root: Any, _info: Any) -> DataValidationResult:
        return DataValidationResult(data=42, errors=[{"message": "bad"}])

    return GraphQLSchema(
        query=GraphQLObjectType(
            "Query",
            {
                "broken": GraphQLField(GraphQLInt, resolve=resolve_broken),
                "partial": GraphQLField(GraphQLInt, resolve=resolve_partial),
            },
        )
    )


@pytest.fixture
def registry() -> ValidatorRegistry:
    return ValidatorRegistry()


@pytest.fixture
def validation_context() -> RequestValidationContext:
    return RequestValidationContext()


@pytest.fixture(autouse=True)
def reset_request_context() -> Generator[None, None, None]:
    """Make sure no request id leaks between tests."""
    yield
    clear_request_context()


# Test markers
def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")
