"""Cronofy API exceptions.

Every failure surfaced by the client is one of the classes below. Server
responses are classified by :func:`map_error`; a missing access token is
reported as :class:`CredentialsMissingError` before any request is made.
"""

from __future__ import annotations

import json
from typing import Any

import httpx


class CronofyError(Exception):
    """Base exception for Cronofy API errors.

    Attributes:
        status: HTTP status code of the failed response, if there was one.
        body: Raw response body, kept for diagnostics.
    """

    def __init__(self, message: str, status: int | None = None, body: str | None = None):
        self.status = status
        self.body = body
        super().__init__(message)


class CredentialsMissingError(CronofyError):
    """Raised when no access token is available for a request."""

    def __init__(self, message: str = "No credentials supplied"):
        super().__init__(message)


class BadRequestError(CronofyError):
    """Raised for a 400 response, e.g. an unknown or revoked OAuth code."""


class AuthenticationFailureError(CronofyError):
    """Raised for a 401 response; usually the access token has expired."""


class AuthorizationFailureError(CronofyError):
    """Raised for a 403 response; the token lacks the required scope."""


class NotFoundError(CronofyError):
    """Raised for a 404 response."""


class InvalidRequestError(CronofyError):
    """Raised for a 422 response; the request parameters failed validation."""

    @property
    def errors(self) -> dict[str, Any]:
        """Validation errors reported by the server, keyed by parameter."""
        try:
            data = json.loads(self.body or "")
        except ValueError:
            return {}
        if not isinstance(data, dict):
            return {}
        errors = data.get("errors")
        return errors if isinstance(errors, dict) else {}


class TooManyRequestsError(CronofyError):
    """Raised for a 429 response; the application exceeded its rate limits."""


class UnknownError(CronofyError):
    """Raised for any other failure, including transport errors."""


ERROR_MAP: dict[int, type[CronofyError]] = {
    400: BadRequestError,
    401: AuthenticationFailureError,
    403: AuthorizationFailureError,
    404: NotFoundError,
    422: InvalidRequestError,
    429: TooManyRequestsError,
}


def map_error(status: int, body: str | None) -> CronofyError:
    """Classify a failed response.

    Args:
        status: HTTP status code.
        body: Raw response body.

    Returns:
        The matching exception instance. Statuses without a dedicated class
        produce an UnknownError carrying the status and body unchanged.
    """
    error_class = ERROR_MAP.get(status, UnknownError)
    return error_class(f"Cronofy API error {status}: {body or ''}".strip(), status=status, body=body)


def raise_if_error(response: httpx.Response) -> None:
    """Raise the mapped exception unless the response status is 2xx."""
    if response.is_success:
        return
    raise map_error(response.status_code, response.text)
