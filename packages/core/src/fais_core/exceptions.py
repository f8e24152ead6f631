"""Custom exceptions for the FAIS affidavit engine.

This module provides a hierarchy of exception classes for consistent error
handling across target resolution, income computation and form assembly.
All exceptions inherit from FaisError, making it easy to catch all
application-specific errors at the request boundary.

Each class carries the HTTP-style ``status_code`` the request layer should
answer with. Missing PDF fields, missing lookup rows and empty line-item
categories are not errors and never raise; they degrade to blank values.

Example:
    try:
        target = await resolver.resolve(principal, query)
    except ForbiddenError as e:
        return e.to_response()
    except FaisError as e:
        logger.error("affidavit_request_failed", error=str(e))
        raise
"""

from typing import Any, Optional


class FaisError(Exception):
    """Base exception for all FAIS errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error is potentially recoverable.
        status_code: Status code surfaced to the caller.

    Example:
        >>> raise FaisError("Something went wrong", details={"code": 500})
        FaisError: Something went wrong
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize FaisError.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context about the error.
            recoverable: Whether the error is potentially recoverable through
                retry or alternative approaches. Defaults to False.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation of the error."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )

    def to_response(self) -> tuple[int, dict[str, str]]:
        """Return the ``(status_code, body)`` pair for a JSON error response."""
        return self.status_code, {"error": self.message or "Failed"}


class ForbiddenError(FaisError):
    """Error raised when a principal crosses an authorization boundary.

    Raised for the wrong role, a case the principal is not a party to, or an
    explicit target user requested by a non-administrator.

    Example:
        >>> raise ForbiddenError("Forbidden", principal_id="u1", role="respondent")
        ForbiddenError: Forbidden
    """

    status_code = 403

    def __init__(
        self,
        message: str = "Forbidden",
        *,
        principal_id: Optional[str] = None,
        role: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details=details, recoverable=False)
        self.principal_id = principal_id
        self.role = role

        if principal_id:
            self.details["principal_id"] = principal_id
        if role:
            self.details["role"] = role


class InvalidInputError(FaisError):
    """Error raised when request input fails validation.

    Covers malformed ids, invalid form keys, invalid query parameters and
    line-item payloads that break the row validation rules.

    Attributes:
        field: The field that failed validation.
        value: The invalid value (if safe to include).
        constraint: The validation constraint that was violated.

    Example:
        >>> raise InvalidInputError(
        ...     "Invalid form",
        ...     field="form",
        ...     value="medium",
        ...     constraint="Must be one of: auto, short, long",
        ... )
        InvalidInputError: Invalid form
    """

    status_code = 400

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """Initialize InvalidInputError.

        Args:
            message: Human-readable error description.
            field: The name of the field that failed validation.
            value: The invalid value (avoid including sensitive data).
            constraint: Description of the validation rule violated.
            details: Optional dictionary with additional context.
        """
        super().__init__(message, details=details, recoverable=False)
        self.field = field
        self.value = value
        self.constraint = constraint

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value
        if constraint:
            self.details["constraint"] = constraint


class NotFoundError(FaisError):
    """Error raised when a referenced user, case or row does not exist.

    Example:
        >>> raise NotFoundError("Case not found", entity="case", entity_id="c9")
        NotFoundError: Case not found
    """

    status_code = 404

    def __init__(
        self,
        message: str = "Not found",
        *,
        entity: Optional[str] = None,
        entity_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details=details, recoverable=False)
        self.entity = entity
        self.entity_id = entity_id

        if entity:
            self.details["entity"] = entity
        if entity_id:
            self.details["entity_id"] = entity_id


class ConfigurationError(FaisError):
    """Error raised when configuration is invalid or missing.

    Configuration errors are fatal and require administrator intervention.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value or format.
        actual: The actual value found (if any).

    Example:
        >>> raise ConfigurationError(
        ...     "Template directory does not exist",
        ...     config_key="FAIS_TEMPLATE_DIRECTORY",
        ...     expected="Existing directory containing the official forms",
        ... )
        ConfigurationError: Template directory does not exist
    """

    status_code = 500

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Human-readable error description.
            config_key: The name of the configuration key that is problematic.
            expected: Description of what value was expected.
            actual: The actual value found (avoid including secrets).
            details: Optional dictionary with additional context.
        """
        super().__init__(message, details=details, recoverable=False)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


class TemplateMissingError(ConfigurationError):
    """Error raised when an official form template file is absent.

    This is the one non-degradable condition of the fill pipeline: there is
    no way to produce a court-form PDF without the template.

    Example:
        >>> raise TemplateMissingError(form="short", path="/forms/short.pdf")
        TemplateMissingError: Missing PDF template file: /forms/short.pdf. ...
    """

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        form: Optional[str] = None,
        path: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message
            or (
                f"Missing PDF template file: {path}. "
                "Place the official form PDFs in the configured template directory."
            ),
            config_key="FAIS_TEMPLATE_DIRECTORY",
            expected="Official affidavit form PDF",
            details=details,
        )
        self.form = form
        self.path = path

        if form:
            self.details["form"] = form
        if path:
            self.details["path"] = path


class UnexpectedError(FaisError):
    """Error raised for failures outside the known taxonomy."""

    status_code = 500


__all__ = [
    "FaisError",
    "ForbiddenError",
    "InvalidInputError",
    "NotFoundError",
    "ConfigurationError",
    "TemplateMissingError",
    "UnexpectedError",
]
