"""Custom domain exceptions for the application."""

from dataclasses import dataclass

# Stable, machine-readable error codes for API consumers.
NOT_FOUND = "NOT_FOUND"
VALIDATION_ERROR = "VALIDATION_ERROR"
INVALID_RECORD = "INVALID_RECORD"
UNAUTHORIZED = "UNAUTHORIZED"

# Field name used for errors that concern the record as a whole.
BASE = "base"


class DomainError(Exception):
    """Base exception for domain/business logic errors."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource does not exist."""

    pass


class DomainValidationError(DomainError):
    """Raised when business rules or domain validation fail (e.g. invalid dates, missing required fields)."""

    pass


class UnauthorizedError(DomainError):
    """Raised when credentials are missing or wrong."""

    pass


@dataclass(frozen=True, slots=True)
class FieldError:
    field: str
    code: str
    message: str


class ModelValidationError(DomainValidationError):
    """Raised when a record fails validation before it is saved or destroyed.

    Carries one FieldError per failed rule. Errors that are not tied to a
    single attribute use the ``base`` field.
    """

    def __init__(self, errors: list[FieldError]):
        self.errors = list(errors)
        super().__init__("; ".join(f"{e.field} {e.message}" for e in self.errors))

    def codes_for(self, field: str) -> list[str]:
        return [e.code for e in self.errors if e.field == field]

    def messages_for(self, field: str) -> list[str]:
        return [e.message for e in self.errors if e.field == field]
