"""
Validator registry keyed by selector.
"""

from collections.abc import Callable
from typing import Any

from .logging import get_logger

logger = get_logger(__name__)

# Applies to every field
ALL_FIELDS = "*"
# Global validators, run once per request
GLOBAL = "$"

Validator = Callable[..., Any]


def field_selector(parent_type_name: str, field_name: str) -> str:
    """Build the selector for one specific field, e.g. ``Query:user``."""
    return f"{parent_type_name}:{field_name}"


class ValidatorRegistry:
    """
    Ordered lists of validators keyed by selector.

    Recognized selectors are ``*`` (every field), a return-type name,
    ``Parent:field`` (one field) and ``$`` (global validators). All
    registration happens at startup; during request processing the
    registry is only read.
    """

    def __init__(self):
        self._validators: dict[str, list[Validator]] = {}
        # SchemaWalker holding the wrap side-table, see walker.get_walker
        self.walker: Any = None

    def register(self, selector: str, validator: Validator) -> None:
        """
        Append a validator to the list for a selector.

        Registering the same function twice makes it run twice.

        Args:
            selector: Selector the validator applies to
            validator: Sync or async callable receiving the resolver arguments

        Raises:
            ValueError: If the selector is empty
            TypeError: If the validator is not callable
        """
        if not selector:
            raise ValueError("Validator selector must be a non-empty string")
        if not callable(validator):
            raise TypeError(f"Validator for '{selector}' must be callable")

        logger.debug(
            "Registering validator",
            selector=selector,
            validator=getattr(validator, "__qualname__", repr(validator)),
        )
        self._validators.setdefault(selector, []).append(validator)

    def validator(self, selector: str) -> Callable[[Validator], Validator]:
        """Decorator form of :meth:`register`."""

        def decorator(fn: Validator) -> Validator:
            self.register(selector, fn)
            return fn

        return decorator

    def lookup(self, selector: str) -> list[Validator]:
        """
        Get the validators registered under a selector.

        Returns:
            A copy of the ordered list, empty if nothing is registered
        """
        return list(self._validators.get(selector, ()))

    def selectors(self) -> list[str]:
        return list(self._validators.keys())

    def clear(self) -> None:
        """Remove all registered validators."""
        self._validators.clear()

    def __len__(self) -> int:
        """Return the number of selectors with registered validators."""
        return len(self._validators)

    def __contains__(self, selector: str) -> bool:
        return selector in self._validators
