"""
Domain models for the image relay.

Everything here is request scoped: a credential is parsed, an assertion is
signed, an artifact is built and uploaded, and all of it is discarded when
the response is written. Nothing depends on HTTP frameworks or clients.
"""

import json
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .errors import CredentialError


# Assertions are valid for one hour; Google rejects anything longer.
ASSERTION_LIFETIME_SECONDS = 3600

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class RelayStage(Enum):
    """Stages a single upload request moves through."""
    RECEIVED = "received"
    AUTHENTICATING = "authenticating"
    ENCODING = "encoding"
    UPLOADING = "uploading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class ServiceAccountCredential:
    """
    The identity the relay signs assertions as.

    Only the two fields we need are kept; other key-file fields such as
    token_uri are ignored in favour of the configured endpoint. The private
    key stays in PEM form and is imported by the signer each time it is used.
    """
    client_email: str
    private_key: str

    def __repr__(self) -> str:
        # Never render the key, even in tracebacks
        return f"ServiceAccountCredential(client_email={self.client_email!r})"

    @classmethod
    def from_json(cls, raw: str) -> "ServiceAccountCredential":
        """
        Parse a service-account key file as downloaded from Google.

        Raises CredentialError for malformed JSON or missing fields.
        """
        try:
            data: Any = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise CredentialError(f"Service account JSON is malformed: {e}") from e

        if not isinstance(data, dict):
            raise CredentialError("Service account JSON must be an object")

        client_email = data.get("client_email")
        private_key = data.get("private_key")

        if not isinstance(client_email, str) or not client_email:
            raise CredentialError("Service account JSON has no client_email")
        if not isinstance(private_key, str) or not private_key:
            raise CredentialError("Service account JSON has no private_key")

        return cls(client_email=client_email, private_key=private_key)


@dataclass(frozen=True)
class AssertionClaims:
    """
    Claims of the JWT bearer assertion.

    Timestamps are whole Unix-epoch seconds.
    """
    issuer: str
    scope: str
    audience: str
    issued_at: int
    expires_at: int

    def __post_init__(self) -> None:
        if self.expires_at <= self.issued_at:
            raise ValueError("Assertion expiry must be after issued-at")

    def to_payload(self) -> dict[str, Any]:
        """Claims under their registered JWT names."""
        return {
            "iss": self.issuer,
            "scope": self.scope,
            "aud": self.audience,
            "iat": self.issued_at,
            "exp": self.expires_at,
        }


@dataclass(frozen=True)
class UploadArtifact:
    """An object ready to be written to the bucket."""
    object_name: str
    content: bytes
    content_type: str = DEFAULT_CONTENT_TYPE

    def __post_init__(self) -> None:
        if not self.object_name:
            raise ValueError("Object name cannot be empty")

    @property
    def size_bytes(self) -> int:
        return len(self.content)

    @classmethod
    def from_upload(
        cls,
        filename: str,
        content: bytes,
        content_type: Optional[str] = None,
        uploaded_at_ms: Optional[int] = None,
    ) -> "UploadArtifact":
        """
        Build an artifact for an uploaded file.

        Object names are images/<unix-ms>-<filename>. Two uploads of the same
        filename within one millisecond map to the same object.
        """
        if uploaded_at_ms is None:
            uploaded_at_ms = time.time_ns() // 1_000_000
        return cls(
            object_name=build_object_name(filename, uploaded_at_ms),
            content=content,
            content_type=content_type or DEFAULT_CONTENT_TYPE,
        )


def build_object_name(filename: str, uploaded_at_ms: int) -> str:
    """Object key for an uploaded image."""
    return f"images/{uploaded_at_ms}-{filename}"
