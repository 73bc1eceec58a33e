"""Exceptions module."""


class KasaCloudError(Exception):
    """Base class for errors that end a kasactl invocation."""


class InvalidArgumentsError(KasaCloudError):
    """Raised when only one of username and password is supplied."""


class ConfigurationError(KasaCloudError):
    """Raised when the credential record cannot be used as requested."""


class MissingConfigurationError(ConfigurationError):
    """Raised when no credentials are available at all."""


class CredentialStorageError(KasaCloudError):
    """Raised when the credential record cannot be read or written."""


class TransportError(KasaCloudError):
    """Raised when the cloud cannot be reached or its reply cannot be decoded."""


class AuthenticationError(KasaCloudError):
    """Raised when the cloud rejects a login."""

    def __init__(self, message: str, response_body: str | None = None):
        """Keep the raw login response for diagnostics."""
        super().__init__(message)
        self.response_body = response_body


class ApiError(KasaCloudError):
    """Raised when the cloud answers an API call with a non-recoverable error."""

    def __init__(
        self,
        message: str,
        error_code: int | None = None,
        response_body: str | None = None,
    ):
        """Keep the cloud error code and raw body for diagnostics."""
        super().__init__(message)
        self.error_code = error_code
        self.response_body = response_body


class ProtocolInvariantViolation(KasaCloudError):
    """Raised when a freshly minted token is reported as expired."""
