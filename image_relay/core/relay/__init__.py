"""
Image relay logic.

Contains the domain models, assertion signing, multipart encoding and the
relay service that ties them together.
"""

from .errors import (
    CredentialError,
    MissingInputError,
    RelayError,
    UploadError,
    UpstreamAuthError,
)
from .models import (
    AssertionClaims,
    RelayStage,
    ServiceAccountCredential,
    UploadArtifact,
)
from .multipart import EncodedUpload, encode_upload
from .service import ImageRelay, RelayConfig
from .signing import build_assertion

__all__ = [
    "AssertionClaims",
    "CredentialError",
    "EncodedUpload",
    "ImageRelay",
    "MissingInputError",
    "RelayConfig",
    "RelayError",
    "RelayStage",
    "ServiceAccountCredential",
    "UploadArtifact",
    "UploadError",
    "UpstreamAuthError",
    "build_assertion",
    "encode_upload",
]
