"""Error taxonomy for the autofill pipeline.

Every error carries the HTTP status the route maps it to; the message is
what the caller sees in the ``{"error": ...}`` envelope.
"""
from __future__ import annotations


class AutofillError(Exception):
    status_code: int = 500

    def __init__(self, message: str = "Unknown error"):
        super().__init__(message)
        self.message = message


class InvalidRequestError(AutofillError):
    status_code = 400


class AuthorizationError(InvalidRequestError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class MethodNotAllowedError(InvalidRequestError):
    status_code = 405

    def __init__(self, message: str = "Method not allowed"):
        super().__init__(message)


class ConfigurationError(AutofillError):
    """A deployment is missing credentials; needs an operator, not a retry."""


class FetchError(AutofillError):
    pass


class FetchTimeoutError(FetchError):
    pass


class GenerationError(AutofillError):
    pass


__all__ = [
    "AutofillError",
    "InvalidRequestError",
    "AuthorizationError",
    "MethodNotAllowedError",
    "ConfigurationError",
    "FetchError",
    "FetchTimeoutError",
    "GenerationError",
]
