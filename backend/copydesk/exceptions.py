"""
Copydesk Backend — Custom Exception Hierarchy
===============================================

What:  Defines application-specific exceptions for each failure class.
How:   Each exception class carries a client-safe message, an HTTP status code
       and an optional context dict. Global exception handlers (registered in
       main.py) catch these and return `{"message": ...}` JSON bodies.
Who:   Raised by services; caught by global handlers.

Exception Hierarchy:
    CopydeskError (base)
    ├── ValidationError      → 400 Bad Request (missing/malformed client input)
    ├── AuthError            → 401 Unauthorized (bad credentials, bad/expired token)
    ├── MethodError          → 405 Method Not Allowed
    ├── ConfigError          → 500 (no active content standards configured)
    └── InternalError        → 500 (database, network, unexpected faults)
        └── LLMServiceError  → 500 (generation API call failed)

The `context` dict is logged server-side and never returned to the client.
"""

from typing import Any, Dict, Optional


class CopydeskError(Exception):
    """
    Base exception for all Copydesk application errors.

    Attributes:
        message:      User-facing error description (safe to return in API response)
        context:      Additional debug info (logged but NOT returned to client)
        status_code:  HTTP status the global handler responds with
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Internal server error",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(CopydeskError):
    """
    Raised when client input fails validation.

    When:    Login without username/password, analysis without any text,
             or a request body that is not valid JSON.
    HTTP:    400 Bad Request
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthError(CopydeskError):
    """
    Raised when a caller cannot be authenticated.

    When:    Unknown username, wrong password, missing or malformed
             Authorization header, unknown or expired bearer token.
    HTTP:    401 Unauthorized

    Unknown-user and wrong-password cases raise the same message so the
    response never reveals whether a username exists.
    """

    status_code = 401

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class MethodError(CopydeskError):
    """
    Raised when an endpoint is called with an unsupported HTTP verb.

    HTTP:    405 Method Not Allowed
    """

    status_code = 405

    def __init__(
        self,
        method: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if method:
            ctx["method"] = method
        super().__init__(message="Method not allowed", context=ctx)


class ConfigError(CopydeskError):
    """
    Raised when the deployment is missing data it needs to serve a request.

    When:    No content standard has status 'active'.
    HTTP:    500, since this is a misconfigured deployment, not bad input.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Service is not configured",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InternalError(CopydeskError):
    """
    Raised when a request fails for reasons outside the client's control.

    When:    Database failure, generation API failure, unexpected exception
             inside a handler's fault boundary.
    HTTP:    500 Internal Server Error
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Internal server error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class LLMServiceError(InternalError):
    """
    Raised when the text-generation API call fails.

    The message carries the provider's error text; the analysis fault boundary
    prefixes it before it reaches the client. Nothing is retried.
    """

    def __init__(
        self,
        message: str = "Text generation request failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
