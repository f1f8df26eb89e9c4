"""End-to-end tests executing queries through graphql-core."""

import pytest
from graphql import graphql

from graphql_validity.config import ValidityConfig
from graphql_validity.context import RequestValidationContext, find_context_in_root_value
from graphql_validity.integrations import ValidityIntegration, execute_validated
from graphql_validity.registry import ALL_FIELDS, GLOBAL
from graphql_validity.results import ValidationResult
from graphql_validity.walker import wrap_resolvers


def messages(payload):
    return [error["message"] for error in payload.get("errors", [])]


class TestExecuteValidated:
    """Test the graphql-core executor integration."""

    @pytest.mark.asyncio
    async def test_data_and_violations(self, schema, registry):
        async def user_exists(_root, _info, id):
            return [] if id in {"1", "2", "3"} else [ValidationResult(f"No user {id}")]

        async def maintenance_window(*_args, **_kwargs):
            return [{"message": "Read-only mode", "internal": True}]

        registry.register("Query:user", user_exists)
        registry.register(GLOBAL, maintenance_window)
        integration = ValidityIntegration()
        integration.wrap(schema, registry)

        payload = await execute_validated(
            schema, '{ user(id: "9") { id } }', integration=integration
        )

        assert payload["data"] == {"user": None}
        assert payload["errors"] == [{"message": "No user 9"}, {"message": "Read-only mode"}]

    @pytest.mark.asyncio
    async def test_type_validators_run_for_each_item(self, schema, registry):
        async def audit_name(user, _info):
            return [ValidationResult(f"audited {user['id']}")]

        # Only User.name returns String with a resolver of its own
        registry.register("String", audit_name)
        integration = ValidityIntegration()
        integration.wrap(schema, registry)

        payload = await execute_validated(
            schema, "{ users { id name email } }", integration=integration
        )

        assert [user["email"] for user in payload["data"]["users"]] == [
            "ada@example.com",
            "grace@example.com",
            "linus@example.com",
        ]
        # Order across fields follows completion order
        assert sorted(messages(payload)) == ["audited 1", "audited 2", "audited 3"]

    @pytest.mark.asyncio
    async def test_global_validators_once_per_request(self, schema, registry):
        calls = []

        async def count(*_args, **_kwargs):
            calls.append(1)
            return []

        registry.register(GLOBAL, count)
        integration = ValidityIntegration()
        integration.wrap(schema, registry)

        await execute_validated(schema, "{ users { id name } answer }", integration=integration)
        assert calls == [1]

        await execute_validated(schema, "{ answer }", integration=integration)
        assert calls == [1, 1]

    @pytest.mark.asyncio
    async def test_no_violations_no_errors_key(self, schema, registry):
        registry.register(ALL_FIELDS, lambda *_args, **_kwargs: [])
        integration = ValidityIntegration()
        integration.wrap(schema, registry)

        payload = await execute_validated(schema, "{ answer }", integration=integration)

        assert payload == {"data": {"answer": 42}}

    @pytest.mark.asyncio
    async def test_wrapped_errors_hide_details(self, failing_schema, registry):
        integration = ValidityIntegration(ValidityConfig(wrap_errors=True))
        integration.wrap(failing_schema, registry)

        payload = await execute_validated(failing_schema, "{ broken }", integration=integration)

        assert payload["data"] == {"broken": None}
        (message,) = messages(payload)
        assert "database password" not in message
        assert "internal error" in message

    @pytest.mark.asyncio
    async def test_unwrapped_errors_surface_original_message(self, failing_schema, registry):
        integration = ValidityIntegration()
        integration.wrap(failing_schema, registry)

        payload = await execute_validated(failing_schema, "{ broken }", integration=integration)

        assert messages(payload) == ["database password rejected"]

    @pytest.mark.asyncio
    async def test_resolver_data_validation_result(self, failing_schema, registry):
        integration = ValidityIntegration()
        integration.wrap(failing_schema, registry)

        payload = await execute_validated(failing_schema, "{ partial }", integration=integration)

        assert payload == {"data": {"partial": 42}, "errors": [{"message": "bad"}]}

    @pytest.mark.asyncio
    async def test_unwrapped_schema_reports_nothing(self, schema):
        payload = await execute_validated(schema, "{ answer }")

        assert payload == {"data": {"answer": 42}}

    @pytest.mark.asyncio
    async def test_syntax_error_not_merged(self, schema, registry):
        registry.register(GLOBAL, lambda *_args, **_kwargs: [{"message": "global"}])
        integration = ValidityIntegration()
        integration.wrap(schema, registry)

        payload = await execute_validated(schema, "{ answer", integration=integration)

        assert payload["data"] is None
        assert "global" not in messages(payload)


class TestRootValueContext:
    """Test locating the context on the root value instead of the execution context."""

    @pytest.mark.asyncio
    async def test_root_value_finder(self, schema, registry):
        registry.register("Query:answer", lambda *_args: [{"message": "checked"}])
        config = ValidityConfig(find_context=find_context_in_root_value("validity"))
        wrap_resolvers(schema, registry, config)
        context = RequestValidationContext()

        result = await graphql(schema, "{ answer }", root_value={"validity": context})

        assert result.data == {"answer": 42}
        assert context.local_results == [{"message": "checked"}]
        assert context.global_results == []

