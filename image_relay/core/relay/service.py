"""
The relay service: one uploaded image in, one public object URL out.

This module orchestrates the relay flow. It's framework-agnostic and
doesn't know about HTTP servers or which HTTP client talks to Google.
Each call walks a fixed sequence of stages:

    RECEIVED -> AUTHENTICATING -> ENCODING -> UPLOADING -> SUCCEEDED

and drops to FAILED on the first RelayError. Nothing is retried and
nothing is kept between calls; every request signs its own assertion,
fetches its own token and generates its own multipart boundary.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from .errors import RelayError
from .models import RelayStage, ServiceAccountCredential, UploadArtifact
from .multipart import EncodedUpload, encode_upload
from .signing import GOOGLE_TOKEN_URI, build_assertion

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocols (interfaces)
# ---------------------------------------------------------------------------

class TokenExchanger(Protocol):
    """Trades a signed assertion for a short-lived access token."""

    async def exchange(self, assertion: str) -> str:
        ...


class ObjectUploader(Protocol):
    """Writes an encoded artifact to the bucket and returns its public URL."""

    async def upload_object(
        self,
        artifact: UploadArtifact,
        encoded: EncodedUpload,
        access_token: Optional[str],
    ) -> str:
        ...


# ---------------------------------------------------------------------------
# Relay Service
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RelayConfig:
    """
    Per-request configuration handed to the relay.

    Built from Settings by the API layer so the core never reads
    environment variables itself.
    """
    service_account_json: str
    token_uri: str = GOOGLE_TOKEN_URI

    def __repr__(self) -> str:
        return f"RelayConfig(token_uri={self.token_uri!r})"


class ImageRelay:
    """
    Runs the relay flow for a single upload.

    When no token exchanger is given (mock storage mode) the authentication
    stage is skipped and the uploader receives no access token.
    """

    def __init__(
        self,
        config: RelayConfig,
        uploader: ObjectUploader,
        token_exchanger: Optional[TokenExchanger] = None,
    ) -> None:
        self._config = config
        self._uploader = uploader
        self._token_exchanger = token_exchanger

    async def relay(
        self,
        filename: str,
        content: bytes,
        content_type: Optional[str] = None,
    ) -> str:
        """
        Upload an image and return its public URL.

        Raises:
            CredentialError: service-account config or key is unusable
            UpstreamAuthError: token endpoint rejected the assertion
            UploadError: storage rejected the object
        """
        artifact = UploadArtifact.from_upload(filename, content, content_type)
        stage = RelayStage.RECEIVED

        logger.info(
            "Received image upload",
            extra={
                "object_name": artifact.object_name,
                "content_type": artifact.content_type,
                "size_bytes": artifact.size_bytes,
            }
        )

        try:
            stage = self._advance(RelayStage.AUTHENTICATING, artifact)
            access_token = await self._authenticate()

            stage = self._advance(RelayStage.ENCODING, artifact)
            encoded = encode_upload(artifact)

            stage = self._advance(RelayStage.UPLOADING, artifact)
            public_url = await self._uploader.upload_object(
                artifact=artifact,
                encoded=encoded,
                access_token=access_token,
            )

        except RelayError as e:
            logger.error(
                "Image relay failed",
                extra={
                    "stage": stage.value,
                    "object_name": artifact.object_name,
                    "error_type": type(e).__name__,
                    "error": str(e),
                },
                exc_info=e,
            )
            self._advance(RelayStage.FAILED, artifact)
            raise

        self._advance(RelayStage.SUCCEEDED, artifact)
        logger.info(
            "Image relayed",
            extra={"object_name": artifact.object_name, "public_url": public_url}
        )

        return public_url

    async def _authenticate(self) -> Optional[str]:
        if self._token_exchanger is None:
            logger.debug("No token exchanger configured, skipping authentication")
            return None

        credential = ServiceAccountCredential.from_json(self._config.service_account_json)
        assertion = build_assertion(credential, audience=self._config.token_uri)
        return await self._token_exchanger.exchange(assertion)

    def _advance(self, stage: RelayStage, artifact: UploadArtifact) -> RelayStage:
        logger.debug(
            "Relay stage changed",
            extra={"stage": stage.value, "object_name": artifact.object_name}
        )
        return stage
