"""
graphql-validity
Business-rule validation around GraphQL field resolvers
"""

__version__ = "0.1.0"

from .config import Settings, ValidityConfig, settings
from .context import (
    RequestValidationContext,
    find_context_in_info_context,
    find_context_in_root_value,
)
from .errors import UnhandledResolverError, on_unhandled_error
from .merge import merge_validation_results
from .registry import ALL_FIELDS, GLOBAL, ValidatorRegistry, field_selector
from .results import DataValidationResult, ProfilingRecord, ValidationResult
from .walker import SchemaWalker, wrap_resolvers

__all__ = [
    "ALL_FIELDS",
    "GLOBAL",
    "DataValidationResult",
    "ProfilingRecord",
    "RequestValidationContext",
    "SchemaWalker",
    "Settings",
    "UnhandledResolverError",
    "ValidationResult",
    "ValidatorRegistry",
    "ValidityConfig",
    "__version__",
    "field_selector",
    "find_context_in_info_context",
    "find_context_in_root_value",
    "merge_validation_results",
    "on_unhandled_error",
    "settings",
    "wrap_resolvers",
]
