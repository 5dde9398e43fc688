"""Error taxonomy shared by the record store, routers and exception handlers."""

from typing import Any, Optional


class InventoryError(Exception):
    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_body(self) -> dict:
        body: dict[str, Any] = {"message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(InventoryError):
    """Missing or malformed field, or a value outside an enumeration."""

    status_code = 400


class DuplicateError(InventoryError):
    """Unique value (serial number, email) already taken."""

    status_code = 400


class NotFoundError(InventoryError):
    status_code = 404


class AuthenticationError(InventoryError):
    status_code = 401


class UnexpectedError(InventoryError):
    status_code = 500
