"""Host integrations: create a context per request and merge it into the response."""

from .base import ValidityIntegration
from .executor import execute_validated

__all__ = ["ValidityIntegration", "execute_validated"]
