"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.

Print dispatch failures (contract violations, transport errors, backend
rejections) are *not* exceptions: they are returned as values and recorded
by the print controller.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class MissingPaymentError(DomainException):
    """An invoice was requested for an order that has no payment yet."""


class ConfigurationError(DomainException):
    """Required configuration is missing or invalid."""
