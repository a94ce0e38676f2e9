"""
OAuth token exchange for service accounts.

Implements the JWT bearer grant: the signed assertion is posted
form-urlencoded to the token endpoint and the access token is read from
the JSON response. The token is handed straight back to the caller and
never cached; every request pays for its own exchange.
"""

import logging

import httpx

from image_relay.core.relay.errors import UpstreamAuthError
from image_relay.core.relay.signing import GOOGLE_TOKEN_URI

logger = logging.getLogger(__name__)


JWT_BEARER_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"


class GoogleTokenExchanger:
    """
    Client for Google's OAuth token endpoint.

    The httpx client is owned by the caller, so connection lifetime is
    decided by whoever builds this object (one client per request here).
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        token_uri: str = GOOGLE_TOKEN_URI,
    ) -> None:
        self._http = http_client
        self._token_uri = token_uri

    async def exchange(self, assertion: str) -> str:
        """
        Trade a signed assertion for an access token.

        Any failure is terminal for the current request; there is no retry.
        """
        try:
            response = await self._http.post(
                self._token_uri,
                data={
                    "grant_type": JWT_BEARER_GRANT_TYPE,
                    "assertion": assertion,
                },
            )
        except httpx.HTTPError as e:
            logger.error(
                "Token request failed",
                extra={"token_uri": self._token_uri, "error": str(e)}
            )
            raise UpstreamAuthError(f"Token request failed: {e}") from e

        if not response.is_success:
            logger.error(
                "Token exchange rejected",
                extra={
                    "token_uri": self._token_uri,
                    "status_code": response.status_code,
                    "body": response.text[:500],
                }
            )
            raise UpstreamAuthError(
                f"Token endpoint returned {response.status_code}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamAuthError(f"Token response is not JSON: {e}") from e

        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not isinstance(access_token, str) or not access_token:
            raise UpstreamAuthError("Token response has no access_token")

        logger.debug(
            "Obtained access token",
            extra={"expires_in": payload.get("expires_in")}
        )

        return access_token
