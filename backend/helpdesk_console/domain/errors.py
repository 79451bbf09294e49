"""Domain Errors - Centralized Exception Hierarchy"""
from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error - all errors extend this"""

    error_code: str = "DOMAIN_ERROR"
    http_status: int = 400

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if error_code:
            self.error_code = error_code

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to API response dict"""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details
            }
        }


# Validation Errors
class ValidationError(DomainError):
    """Input validation failed"""
    error_code = "VALIDATION_ERROR"
    http_status = 400


class RuleValidationError(ValidationError):
    """Rule draft failed client-side validation - carries per-field messages"""
    error_code = "RULE_VALIDATION_ERROR"
    http_status = 422

    def __init__(self, field_errors: Dict[str, str], message: str = "Rule is not valid"):
        super().__init__(message, details={"fields": dict(field_errors)})
        self.field_errors = dict(field_errors)


class VocabularySelectionError(ValidationError):
    """Key is not part of the current merged vocabulary"""
    error_code = "VOCABULARY_SELECTION_ERROR"


# Not Found Errors
class NotFoundError(DomainError):
    """Resource not found"""
    error_code = "NOT_FOUND"
    http_status = 404


class RuleNotFoundError(NotFoundError):
    """Automation rule not found"""
    error_code = "RULE_NOT_FOUND"


class FormSessionNotFoundError(NotFoundError):
    """Rule form session not found (closed or never opened)"""
    error_code = "FORM_SESSION_NOT_FOUND"


class RowNotFoundError(NotFoundError):
    """Condition or action row index out of range"""
    error_code = "ROW_NOT_FOUND"


# Conflict Errors
class ConflictError(DomainError):
    """Resource conflict"""
    error_code = "CONFLICT"
    http_status = 409


class InvalidStateError(ConflictError):
    """Action not valid for current form state"""
    error_code = "INVALID_STATE"


class CapacityError(ConflictError):
    """Too many open form sessions"""
    error_code = "FORM_SESSION_LIMIT"
    http_status = 429


# External Service Errors
class ExternalServiceError(DomainError):
    """External service failure"""
    error_code = "EXTERNAL_SERVICE_ERROR"
    http_status = 502


class HelpdeskApiError(ExternalServiceError):
    """Helpdesk API answered with an error status"""
    error_code = "HELPDESK_API_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        merged = dict(details or {})
        if status_code is not None:
            merged["upstream_status"] = status_code
        super().__init__(message, details=merged)
        self.status_code = status_code


class HelpdeskUnavailableError(ExternalServiceError):
    """Helpdesk API could not be reached"""
    error_code = "HELPDESK_UNAVAILABLE"
    http_status = 503
