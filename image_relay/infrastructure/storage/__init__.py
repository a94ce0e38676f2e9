"""
Object storage integration for uploaded images.

Writes to Google Cloud Storage through the JSON API.
Includes mock mode for local development without credentials.
"""

from .client import GCSStorageClient, MockStorageClient, StorageConfig, create_storage_client

__all__ = [
    "GCSStorageClient",
    "MockStorageClient",
    "StorageConfig",
    "create_storage_client",
]
