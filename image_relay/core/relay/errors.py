"""
Error taxonomy for the relay flow.

Every failure the relay can produce is a RelayError. Only MissingInputError
is the caller's fault; everything else is surfaced to clients as a generic
server error and logged in full for operators.
"""


class RelayError(Exception):
    """Base class for relay failures."""
    pass


class MissingInputError(RelayError):
    """Raised when the request carries no image file."""
    pass


class CredentialError(RelayError):
    """Raised when the service-account config or private key is unusable."""
    pass


class UpstreamAuthError(RelayError):
    """Raised when the token endpoint rejects the signed assertion."""
    pass


class UploadError(RelayError):
    """Raised when the storage upload is rejected or cannot be sent."""
    pass
