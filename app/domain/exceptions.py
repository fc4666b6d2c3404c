"""Domain exceptions for the collection administration engine.

Defines domain-level exceptions that represent rule violations and store
failures. These exceptions are independent of infrastructure concerns. The
presentation layer maps them to HTTP responses in exception handlers; the
mutation coordinator carries them inside rejected results.
"""

from typing import Any


class DocAdminException(Exception):
    """Base exception for all engine errors.

    All custom exceptions inherit from this class so callers can handle
    every engine error kind in one place. The error_code is the stable,
    enumerable kind (e.g. VALIDATION_ERROR, WRITE_ERROR).

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, collection).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the HTTP exception handler."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class SchemaLoadException(DocAdminException):
    """Raised when a collection's schema document is missing or unreadable.

    The engine falls back to an empty field list and the collection is
    read-only until the schema loads.
    """

    def __init__(self, collection: str, reason: str) -> None:
        super().__init__(
            f"Schema for collection '{collection}' could not be loaded: {reason}",
            "SCHEMA_LOAD_ERROR",
            {"collection": collection, "reason": reason},
        )


class ValidationException(DocAdminException):
    """Raised when one or more field rules are violated (never sent to the store)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        errors: list[dict[str, str]] | None = None,
    ) -> None:
        """Initialize with message, optional field name and field-level errors.

        Args:
            message: Description of the validation failure.
            field: Optional field that failed validation (single-field errors).
            errors: Optional list of {"field", "message"} dicts (document errors).
        """
        details: dict[str, Any] = {}
        if field:
            details["field"] = field
        if errors:
            details["errors"] = errors
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(DocAdminException):
    """Raised when the identity provider did not supply a user."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(DocAdminException):
    """Raised when the user's role lacks the capability for an action."""

    def __init__(
        self,
        capability: str | None = None,
        action: str | None = None,
        role: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional capability, action, role and message.

        Args:
            capability: Capability that was required (e.g. 'canEdit').
            action: Action that was attempted (e.g. 'update').
            role: Role the user resolved to.
            message: Human-readable message; default used when capability/action omitted.
        """
        if capability and action:
            message = f"Permission denied: {action} requires {capability}"
        details: dict[str, Any] = {}
        if capability:
            details["capability"] = capability
        if action:
            details["action"] = action
        if role:
            details["role"] = role
        super().__init__(message, "PERMISSION_DENIED", details)


class StoreException(DocAdminException):
    """Raised by store adapters when the remote document store call fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        details: dict[str, Any] = {}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, "STORE_ERROR", details)


class WriteException(DocAdminException):
    """Raised when the store rejects a batched write. Not retried."""

    def __init__(self, collection: str, message: str) -> None:
        super().__init__(
            message,
            "WRITE_ERROR",
            {"collection": collection},
        )


class AuditWriteException(DocAdminException):
    """Raised when an audit append fails after a successful primary write.

    Never rolls back the primary write; reported as a warning on the result.
    """

    def __init__(self, collection: str, document_id: str, message: str) -> None:
        super().__init__(
            f"Audit entry for {collection}/{document_id} was not recorded: {message}",
            "AUDIT_WRITE_ERROR",
            {"collection": collection, "document_id": document_id},
        )


class HeaderMismatchException(DocAdminException):
    """Raised when a CSV header does not equal the expected column sequence."""

    def __init__(self, expected: list[str], actual: list[str]) -> None:
        super().__init__(
            "CSV headers do not match collection fields",
            "HEADER_MISMATCH",
            {"expected": expected, "actual": actual},
        )


class ResourceNotFoundException(DocAdminException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'document', 'role').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class RoleAlreadyExistsException(DocAdminException):
    """Raised when adding a role whose name is already taken."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Role '{name}' already exists",
            "ROLE_ALREADY_EXISTS",
            {"name": name},
        )
