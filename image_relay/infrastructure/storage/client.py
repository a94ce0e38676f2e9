"""
Cloud Storage upload client.

Talks to the GCS JSON API directly with httpx instead of the
google-cloud-storage SDK. A single multipart upload carries the object
metadata and bytes, and predefinedAcl=publicRead makes the object
readable at a stable public URL.

Mock mode stores objects in memory, enabling API testing without a
bucket or a service account.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from image_relay.core.relay.errors import UploadError
from image_relay.core.relay.models import UploadArtifact
from image_relay.core.relay.multipart import EncodedUpload
from image_relay.core.relay.service import ObjectUploader

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StorageConfig:
    """Configuration for a Cloud Storage bucket."""
    bucket_name: str
    upload_base_url: str = "https://storage.googleapis.com/upload/storage/v1"
    public_base_url: str = "https://storage.googleapis.com"

    @property
    def upload_url(self) -> str:
        return f"{self.upload_base_url.rstrip('/')}/b/{self.bucket_name}/o"

    def public_url(self, object_name: str) -> str:
        """
        Public URL of an object.

        Derived from bucket and object name alone; upload responses are
        never parsed for it.
        """
        return f"{self.public_base_url.rstrip('/')}/{self.bucket_name}/{object_name}"


class GCSStorageClient:
    """
    Cloud Storage client for multipart uploads.

    The httpx client is injected so tests can swap in a MockTransport and
    the API layer can scope one client to one request.
    """

    def __init__(self, config: StorageConfig, http_client: httpx.AsyncClient) -> None:
        self._config = config
        self._http = http_client

    async def upload_object(
        self,
        artifact: UploadArtifact,
        encoded: EncodedUpload,
        access_token: Optional[str],
    ) -> str:
        """
        Upload an encoded artifact and return its public URL.

        Raises UploadError on a non-2xx status or transport failure.
        """
        if not access_token:
            raise UploadError("An access token is required to upload to Cloud Storage")

        try:
            response = await self._http.post(
                self._config.upload_url,
                params={
                    "uploadType": "multipart",
                    "predefinedAcl": "publicRead",
                },
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Content-Type": encoded.content_type,
                },
                content=encoded.body,
            )
        except httpx.HTTPError as e:
            logger.error(
                "Upload request failed",
                extra={
                    "bucket": self._config.bucket_name,
                    "object_name": artifact.object_name,
                    "error": str(e),
                }
            )
            raise UploadError(f"Upload failed: {e}") from e

        if not response.is_success:
            logger.error(
                "Upload rejected",
                extra={
                    "bucket": self._config.bucket_name,
                    "object_name": artifact.object_name,
                    "status_code": response.status_code,
                    "body": response.text[:500],
                }
            )
            raise UploadError(f"Upload endpoint returned {response.status_code}")

        logger.debug(
            "Uploaded object",
            extra={
                "bucket": self._config.bucket_name,
                "object_name": artifact.object_name,
                "size_bytes": artifact.size_bytes,
            }
        )

        return self._config.public_url(artifact.object_name)


# ---------------------------------------------------------------------------
# Mock Storage for Local Development
# ---------------------------------------------------------------------------

class MockStorageClient:
    """
    In-memory storage for local development.

    Objects are kept in a dictionary keyed by object name and the returned
    URLs have the same shape as real public URLs, though nothing serves them.

    Not suitable for production, but perfect for development and testing.
    """

    def __init__(self, config: StorageConfig) -> None:
        self._config = config
        self.objects: dict[str, bytes] = {}
        logger.info("Initialized mock storage client (in-memory)")

    async def upload_object(
        self,
        artifact: UploadArtifact,
        encoded: EncodedUpload,
        access_token: Optional[str],
    ) -> str:
        """Store object in memory."""
        self.objects[artifact.object_name] = artifact.content

        logger.debug(
            "Stored object in mock storage",
            extra={
                "object_name": artifact.object_name,
                "size_bytes": artifact.size_bytes,
            }
        )

        return self._config.public_url(artifact.object_name)


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_storage_client(
    config: StorageConfig,
    http_client: Optional[httpx.AsyncClient] = None,
    mock_mode: bool = False,
) -> ObjectUploader:
    """
    Create storage client based on configuration.

    Args:
        config: Bucket configuration
        http_client: HTTP client for real uploads (required if not mock_mode)
        mock_mode: If True, return in-memory client for testing

    Returns:
        ObjectUploader implementation (GCS or Mock)
    """
    if mock_mode:
        return MockStorageClient(config)

    if http_client is None:
        raise ValueError("http_client is required when not in mock mode")

    return GCSStorageClient(config, http_client)
