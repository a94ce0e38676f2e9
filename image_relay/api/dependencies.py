"""
FastAPI dependency injection.

Dependencies provide instances of services, clients, and configuration
to route handlers. Using dependency injection means:
- Routes don't instantiate their own dependencies (easier to test)
- Dependencies can be overridden in tests (fake upstreams via MockTransport)
- Configuration is centralized

Nothing here is shared between requests: each request gets its own HTTP
client, token exchanger and storage client.
"""

import logging
from typing import Annotated, AsyncGenerator

import httpx
from fastapi import Depends

from ..config.settings import Settings, get_settings
from ..core.relay.service import ImageRelay, RelayConfig
from ..infrastructure.google.token import GoogleTokenExchanger
from ..infrastructure.storage.client import StorageConfig, create_storage_client

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------

async def get_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    Provide an HTTP client scoped to one request.

    This is a generator dependency so FastAPI closes the client after the
    response is sent. No pooling across requests.
    """
    async with httpx.AsyncClient() as client:
        yield client


# ---------------------------------------------------------------------------
# Service Dependencies
# ---------------------------------------------------------------------------

def get_relay_config(
    settings: Annotated[Settings, Depends(get_settings)],
) -> RelayConfig:
    """Turn process settings into the explicit config the relay core takes."""
    return RelayConfig(
        service_account_json=settings.gcs_service_account_json,
        token_uri=settings.gcs_token_uri,
    )


def get_image_relay(
    settings: Annotated[Settings, Depends(get_settings)],
    config: Annotated[RelayConfig, Depends(get_relay_config)],
    http_client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> ImageRelay:
    """
    Provide an ImageRelay wired to Google or to in-memory storage.

    The relay is stateless, so we create a new instance per request.
    In mock mode no token exchanger is configured and uploads never leave
    the process.
    """
    storage_config = StorageConfig(
        bucket_name=settings.gcs_bucket_name,
        upload_base_url=settings.gcs_upload_base_url,
        public_base_url=settings.gcs_public_base_url,
    )

    if settings.gcs_mock_mode:
        uploader = create_storage_client(storage_config, mock_mode=True)
        logger.debug("Created ImageRelay with mock storage")
        return ImageRelay(config=config, uploader=uploader)

    uploader = create_storage_client(storage_config, http_client=http_client)
    token_exchanger = GoogleTokenExchanger(http_client, token_uri=config.token_uri)

    logger.debug("Created ImageRelay instance")

    return ImageRelay(
        config=config,
        uploader=uploader,
        token_exchanger=token_exchanger,
    )


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

# These type aliases make route signatures cleaner
ImageRelayDep = Annotated[ImageRelay, Depends(get_image_relay)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
