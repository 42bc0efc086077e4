"""Domain error taxonomy shared by every bounded context.

Each module defines precise exceptions (``InsufficientStock``,
``OrderNotFound``...) that subclass exactly one of the four kinds below.
Callers may catch the precise rule or the kind; the API layer maps the
kind to an HTTP status code.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for business-rule failures raised by the service layer."""

    code = "domain_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFound(DomainError):
    """A referenced user, product or order does not resolve.

    For products, an existing but inactive row also counts as not
    found.
    """

    code = "not_found"


class InvalidInput(DomainError):
    """The request is structurally wrong (empty items, bad quantity...)."""

    code = "invalid_input"


class InvalidState(DomainError):
    """The request is well-formed but violates a rule given current state."""

    code = "invalid_state"


class Conflict(DomainError):
    """A uniqueness rule would be violated."""

    code = "conflict"
