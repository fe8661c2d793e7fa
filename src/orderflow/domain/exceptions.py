"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class InvalidRequestError(DomainException):
    """Malformed input or a violated invariant on a value."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InsufficientInventoryError(DomainException):
    """Stock or bundle availability cannot satisfy the requested quantity.

    When raised after the order was already committed, ``order_id`` points
    at the order that was cancelled as compensation.
    """

    def __init__(self, message: str, order_id: int | None = None) -> None:
        super().__init__(message)
        self.order_id = order_id


class InvalidStateError(DomainException):
    """A status-transition precondition was violated."""


class UnprocessableRequestError(DomainException):
    """A downstream collaborator rejected the request for domain reasons."""


# --- Errors reported by gateways ---------------------------------------------


class GatewayError(DomainException):
    """Base class for failures reported by inventory/bundle gateways."""


class InsufficientStockError(GatewayError):
    """Not enough available stock to place a reservation."""


class NotReservedError(GatewayError):
    """No matching reservation exists to release or fulfill."""


class BundleUnavailableError(GatewayError):
    """A bundle is unknown, inactive, malformed or out of stock."""
