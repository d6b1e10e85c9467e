"""Storefront error taxonomy.

Business-rule violations extend Protean's ``ValidationError`` and lookups of
absent records extend ``ObjectNotFoundError``, so handlers and the HTTP layer
treat them the same way as the framework's own errors.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class ProductNotFound(ValidationError):
    """An order line references a product that is missing or deactivated."""


class InsufficientStock(ValidationError):
    """A requested quantity exceeds the product's current stock."""


class InvalidState(ValidationError):
    """The order is not in a status that permits the requested operation."""


class OrderNotFound(ObjectNotFoundError):
    """No order exists with the requested identifier."""


class PersistenceUnavailable(Exception):
    """The configured database cannot be reached."""


def error_messages(exc: Exception) -> list[str]:
    """Flatten the messages carried by a Protean exception into plain strings."""
    messages = getattr(exc, "messages", None)
    if not isinstance(messages, dict) and exc.args and isinstance(exc.args[0], dict):
        messages = exc.args[0]
    if isinstance(messages, dict):
        flattened = []
        for value in messages.values():
            if isinstance(value, list | tuple):
                flattened.extend(str(item) for item in value)
            else:
                flattened.append(str(value))
        return flattened
    if messages:
        return [str(messages)]
    return [str(exc)]
