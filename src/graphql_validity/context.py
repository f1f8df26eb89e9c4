"""Per-request validation state and the functions that locate it."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from graphql import GraphQLResolveInfo

from .results import ProfilingRecord

DEFAULT_CONTEXT_KEY = "validation"


@dataclass
class RequestValidationContext:
    """Aggregation state for one in-flight request.

    ``global_results`` is ``None`` until the first wrapped resolver of the
    request runs the global validators. Never share an instance between
    requests.
    """

    local_results: list[Any] = field(default_factory=list)
    global_results: list[Any] | None = None
    profiling_records: list[ProfilingRecord] = field(default_factory=list)


ContextFinder = Callable[[tuple[Any, ...], dict[str, Any]], RequestValidationContext | None]


_INFO_ATTRIBUTES = ("context", "root_value", "path", "parent_type", "field_name")


def is_resolve_info(value: Any) -> bool:
    """Match graphql-core's resolve info and look-alikes such as Strawberry's.

    Strawberry passes its own ``NamedTuple`` with the same fields, which is
    not a ``GraphQLResolveInfo`` subclass.
    """
    if isinstance(value, GraphQLResolveInfo):
        return True
    return value is not None and all(hasattr(value, name) for name in _INFO_ATTRIBUTES)


def find_resolve_info(args: tuple[Any, ...], kwargs: dict[str, Any]) -> GraphQLResolveInfo | None:
    """Return the resolve info among resolver arguments, if any.

    graphql-core calls ``resolve(source, info, **arguments)``, so the second
    positional argument is checked first.
    """
    candidates = (*args[1:2], *args, kwargs.get("info"))
    for candidate in candidates:
        if is_resolve_info(candidate):
            return candidate
    return None


def _lookup(container: Any, key: str) -> RequestValidationContext | None:
    if container is None:
        return None
    if isinstance(container, Mapping):
        candidate = container.get(key)
    else:
        candidate = getattr(container, key, None)

    if isinstance(candidate, RequestValidationContext):
        return candidate
    return None


def find_context_in_info_context(key: str = DEFAULT_CONTEXT_KEY) -> ContextFinder:
    """Build a finder reading the context from ``info.context``.

    Works for mapping contexts (Strawberry's dict context) and for
    object contexts carrying the context as an attribute.
    """

    def finder(args: tuple[Any, ...], kwargs: dict[str, Any]) -> RequestValidationContext | None:
        info = find_resolve_info(args, kwargs)
        if info is None:
            return None
        return _lookup(info.context, key)

    return finder


def find_context_in_root_value(key: str = DEFAULT_CONTEXT_KEY) -> ContextFinder:
    """Build a finder reading the context from ``info.root_value``."""

    def finder(args: tuple[Any, ...], kwargs: dict[str, Any]) -> RequestValidationContext | None:
        info = find_resolve_info(args, kwargs)
        if info is None:
            return None
        return _lookup(info.root_value, key)

    return finder
