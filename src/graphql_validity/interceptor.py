"""
Resolver interception: runs validators around the original resolver and
collects their violations into the request context.
"""

import functools
from collections.abc import Callable
from inspect import isawaitable
from typing import Any

from .config import ValidityConfig
from .context import find_resolve_info
from .logging import get_logger
from .profiling import now_ms, store_profiling_info
from .registry import ALL_FIELDS, GLOBAL, Validator, ValidatorRegistry, field_selector
from .results import DataValidationResult, as_violations

logger = get_logger(__name__)

# Set on every installed wrapper so it is never wrapped again
WRAPPED_MARKER = "__graphql_validity_wrapped__"


def is_wrapped(resolve: Callable[..., Any] | None) -> bool:
    return bool(getattr(resolve, WRAPPED_MARKER, False))


def select_validators(
    registry: ValidatorRegistry,
    return_type_name: str | None,
    parent_type_name: str | None,
    field_name: str | None,
) -> list[Validator]:
    """
    Collect the validators for one field.

    Order is ``*`` first, then the return type, then ``Parent:field``;
    lists are concatenated as-is without deduplication.
    """
    validators = registry.lookup(ALL_FIELDS)
    if return_type_name:
        validators += registry.lookup(return_type_name)
    if parent_type_name and field_name:
        validators += registry.lookup(field_selector(parent_type_name, field_name))
    return validators


async def _call(fn: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
    result = fn(*args, **kwargs)
    if isawaitable(result):
        result = await result
    return result


async def _run_validators(
    validators: list[Validator],
    target: list[Any],
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> None:
    # Sequential on purpose: results keep registration order
    for validator in validators:
        target.extend(as_violations(await _call(validator, args, kwargs)))


def create_validated_resolver(
    resolve: Callable[..., Any],
    *,
    registry: ValidatorRegistry,
    config: ValidityConfig,
    return_type_name: str | None,
    parent_type_name: str | None = None,
    field_name: str | None = None,
) -> Callable[..., Any]:
    """
    Build the replacement for a field resolver.

    The replacement locates the request context through
    ``config.find_context``. Without one it simply calls ``resolve``.
    With one it runs the global validators (once per request), the
    field's validators, the original resolver, unwraps a
    :class:`DataValidationResult` and optionally records timing.

    Args:
        resolve: Original resolver
        registry: Source of validators
        config: Wrapping options
        return_type_name: Named return type of the field
        parent_type_name: Owning type; read from the resolve info when None
        field_name: Field name; read from the resolve info when None

    Returns:
        Async resolver accepting the same arguments as ``resolve``
    """
    find_context = config.find_context

    @functools.wraps(resolve)
    async def validated_resolver(*args: Any, **kwargs: Any) -> Any:
        started = now_ms()
        context = find_context(args, kwargs)

        if context is None:
            output = await _call(resolve, args, kwargs)
            if isinstance(output, DataValidationResult):
                if output.errors:
                    logger.debug(
                        "Dropping resolver errors, no validation context",
                        field_name=field_name,
                        count=len(output.errors),
                    )
                output = output.data
            return output

        info = find_resolve_info(args, kwargs)
        parent = parent_type_name or (info.parent_type.name if info else None)
        name = field_name or (info.field_name if info else None)

        try:
            validators = select_validators(registry, return_type_name, parent, name)

            if context.global_results is None:
                # Must be set before the first await so concurrent fields skip the run
                context.global_results = []
                await _run_validators(
                    registry.lookup(GLOBAL), context.global_results, args, kwargs
                )

            await _run_validators(validators, context.local_results, args, kwargs)
            validated = now_ms()

            output = await _call(resolve, args, kwargs)
            if isinstance(output, DataValidationResult):
                context.local_results.extend(as_violations(output.errors))
                output = output.data

            finished = now_ms()
        except Exception as e:
            if config.wrap_errors:
                raise config.unhandled_error_wrapper(e) from e
            raise

        if config.enable_profiling:
            store_profiling_info(context, info, name or "", started, validated, finished)

        return output

    setattr(validated_resolver, WRAPPED_MARKER, True)
    return validated_resolver
