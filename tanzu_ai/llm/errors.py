"""Normalized errors raised by the OpenAI-compatible client."""

from __future__ import annotations


class ProviderError(Exception):
    """Base class for request-time provider failures."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(ProviderError):
    """401/403 from the gateway (expired or invalid token)."""


class RateLimitExceededError(ProviderError):
    """429 from the gateway."""


class ServerError(ProviderError):
    """5xx from the gateway or its upstream model server."""


class RequestFailedError(ProviderError):
    """Any other non-success status."""


class ProviderConnectionError(ProviderError):
    """Transport-level failure (DNS, refused connection, timeout)."""


def _error_message(body: object, fallback: str) -> str:
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict) and isinstance(err.get("message"), str):
            return err["message"]
        if isinstance(err, str):
            return err
    return fallback


def map_status_error(status_code: int, body: object, text: str = "") -> ProviderError:
    """Map an HTTP error status and decoded body to a ProviderError."""
    message = _error_message(body, text or f"HTTP {status_code}")
    if status_code in (401, 403):
        return AuthenticationError(
            f"Authentication failed: {message}", status_code=status_code
        )
    if status_code == 429:
        return RateLimitExceededError(
            f"Rate limit exceeded: {message}", status_code=status_code
        )
    if status_code >= 500:
        return ServerError(f"Server error: {message}", status_code=status_code)
    return RequestFailedError(
        f"Request failed with status {status_code}: {message}",
        status_code=status_code,
    )
