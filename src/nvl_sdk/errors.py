"""SDK error types."""

from __future__ import annotations


class NVLSDKError(RuntimeError):
    """Base SDK error."""


class ClientConfigurationError(NVLSDKError, ValueError):
    """Client could not be built from the issuer settings."""


class AuthorityUnavailableError(NVLSDKError):
    """Authorization service could not be reached."""


class AuthorityRequestError(AuthorityUnavailableError):
    """Authorization service returned an HTTP error response."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        detail: object | None = None,
        body: object | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail
        self.body = body


class DiscoveryRequiredError(NVLSDKError):
    """A resource call was attempted before discovery completed."""


class SchemaValidationError(NVLSDKError):
    """Response payload did not match the expected schema."""


class ProtectedScopeError(NVLSDKError):
    """Operation would rename or remove a protected scope."""


class ScopeResolutionError(NVLSDKError):
    """No scope could be selected for the operation."""
