"""
Configuration management for graphql-validity
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic_settings import BaseSettings

from .context import DEFAULT_CONTEXT_KEY, ContextFinder, find_context_in_info_context
from .errors import on_unhandled_error
from .profiling import default_profiling_result_handler
from .results import ProfilingRecord


class Settings(BaseSettings):
    """Settings loaded from environment variables."""

    # Resolver wrapping
    wrap_errors: bool = False
    enable_profiling: bool = False
    context_key: str = DEFAULT_CONTEXT_KEY

    # Logging
    debug: bool = False
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "GRAPHQL_VALIDITY_"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = Settings()


@dataclass
class ValidityConfig:
    """Options for wrapping resolvers.

    ``parent_type_name`` and ``field_name`` are only used when wrapping a
    bare field outside of a type.
    """

    wrap_errors: bool = False
    enable_profiling: bool = False
    unhandled_error_wrapper: Callable[[BaseException], BaseException] = on_unhandled_error
    profiling_result_handler: Callable[[Sequence[ProfilingRecord]], None] = (
        default_profiling_result_handler
    )
    parent_type_name: str | None = None
    field_name: str | None = None
    context_key: str = DEFAULT_CONTEXT_KEY
    find_context: ContextFinder | None = None

    def __post_init__(self):
        if self.unhandled_error_wrapper is None:
            self.unhandled_error_wrapper = on_unhandled_error
        if self.profiling_result_handler is None:
            self.profiling_result_handler = default_profiling_result_handler
        if self.find_context is None:
            self.find_context = find_context_in_info_context(self.context_key)

    @classmethod
    def from_settings(cls, source: Settings | None = None, **overrides: Any) -> "ValidityConfig":
        """Build a config from environment settings, with keyword overrides."""
        source = source or settings
        values: dict[str, Any] = {
            "wrap_errors": source.wrap_errors,
            "enable_profiling": source.enable_profiling,
            "context_key": source.context_key,
        }
        values.update(overrides)
        return cls(**values)
