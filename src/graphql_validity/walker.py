"""
Schema traversal that installs validated resolvers on every field.
"""

from typing import Any

import strawberry
from graphql import GraphQLField, GraphQLNamedType, GraphQLSchema, get_named_type

from .config import ValidityConfig
from .interceptor import create_validated_resolver, is_wrapped
from .logging import get_logger
from .registry import ValidatorRegistry

logger = get_logger(__name__)


class SchemaWalker:
    """
    Walks schema -> types -> fields and wraps each field resolver once.

    Already processed fields and types are tracked in a side-table keyed by
    object identity; schema objects themselves are never tagged. The table
    holds a reference to each entry so identities cannot be recycled.
    """

    def __init__(self, registry: ValidatorRegistry):
        self.registry = registry
        self._processed: dict[int, Any] = {}

    def is_processed(self, entity: Any) -> bool:
        return id(entity) in self._processed

    def _mark(self, entity: Any) -> None:
        self._processed[id(entity)] = entity

    def wrap(self, entity: Any, config: ValidityConfig | None = None) -> int:
        """
        Wrap every resolver reachable from a schema, type or field.

        Args:
            entity: ``strawberry.Schema``, ``GraphQLSchema``, an object/interface
                type or a ``GraphQLField``
            config: Wrapping options

        Returns:
            Number of resolvers newly wrapped by this call

        Raises:
            TypeError: If the entity is none of the supported kinds
        """
        config = config or ValidityConfig()

        if isinstance(entity, strawberry.Schema):
            count = self.wrap_schema(entity._schema, config)
        elif isinstance(entity, GraphQLSchema):
            count = self.wrap_schema(entity, config)
        elif isinstance(entity, GraphQLField):
            count = int(
                self.wrap_field(
                    entity,
                    config,
                    parent_type_name=config.parent_type_name,
                    field_name=config.field_name,
                )
            )
        elif isinstance(entity, GraphQLNamedType):
            count = self.wrap_type(entity, config)
        else:
            raise TypeError(f"Cannot wrap resolvers of {type(entity).__name__}")

        logger.debug("Resolvers wrapped", entity=type(entity).__name__, wrapped=count)
        return count

    def wrap_schema(self, schema: GraphQLSchema, config: ValidityConfig) -> int:
        count = 0
        for type_name, named_type in schema.type_map.items():
            # Introspection types are shared by all graphql-core schemas
            if type_name.startswith("__"):
                continue
            count += self.wrap_type(named_type, config)
        return count

    def wrap_type(self, named_type: GraphQLNamedType, config: ValidityConfig) -> int:
        if self.is_processed(named_type) or not hasattr(named_type, "fields"):
            return 0

        count = 0
        for field_name, field in named_type.fields.items():
            if self.wrap_field(
                field, config, parent_type_name=named_type.name, field_name=field_name
            ):
                count += 1

        self._mark(named_type)
        return count

    def wrap_field(
        self,
        field: GraphQLField,
        config: ValidityConfig,
        parent_type_name: str | None = None,
        field_name: str | None = None,
    ) -> bool:
        """
        Replace a field's resolver with a validated one.

        Returns:
            True if the resolver was wrapped, False if there was nothing to do
        """
        resolve = getattr(field, "resolve", None)
        if resolve is None or self.is_processed(field) or is_wrapped(resolve):
            return False

        # Marked before the wrapper exists so nothing can wrap it twice
        self._mark(field)
        field.resolve = create_validated_resolver(
            resolve,
            registry=self.registry,
            config=config,
            return_type_name=get_named_type(field.type).name,
            parent_type_name=parent_type_name,
            field_name=field_name,
        )
        return True


def get_walker(registry: ValidatorRegistry) -> SchemaWalker:
    """Return the walker bound to a registry, creating it on first use.

    The registry keeps its walker, so both are released together.
    """
    if registry.walker is None:
        registry.walker = SchemaWalker(registry)
    return registry.walker


def wrap_resolvers(
    entity: Any, registry: ValidatorRegistry, config: ValidityConfig | None = None
) -> int:
    """
    Wrap the resolvers of a schema, type or field with validation.

    Safe to call repeatedly and on overlapping parts of a schema; each
    resolver is wrapped at most once.
    """
    return get_walker(registry).wrap(entity, config)
