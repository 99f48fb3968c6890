"""Google Indexing API v3 client for Reindexer."""

import asyncio
from typing import Any

import httpx
from google.auth import exceptions as google_exceptions
from google.auth.credentials import Credentials
from google.auth.transport import requests as google_requests

from reindexer.models import IndexingApiError, NotificationAck, NotificationError
from reindexer.utils.credentials import CredentialError
from reindexer.utils.logging import get_logger

logger = get_logger(__name__)

INDEXING_API_BASE = "https://indexing.googleapis.com/v3"


def parse_error_response(response: httpx.Response) -> NotificationError:
    """Build a NotificationError from a Google API error envelope.

    Google errors look like ``{"error": {"code": 403, "message": ..., "status": ...}}``.
    Bodies that are not in that shape fall back to the HTTP reason phrase.
    """
    try:
        body = response.json()
    except ValueError:
        body = None

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        status = error.get("status") or f"HTTP_{response.status_code}"
        message = error.get("message") or response.reason_phrase
        return NotificationError(status=status, message=message, code=response.status_code)

    return NotificationError(
        status=f"HTTP_{response.status_code}",
        message=response.reason_phrase or response.text[:200],
        code=response.status_code,
    )


class IndexingClient:
    """Client for the Google Indexing API urlNotifications resource."""

    def __init__(
        self,
        credentials: Credentials,
        notification_type: str = "URL_UPDATED",
        timeout: float = 30.0,
    ) -> None:
        self._credentials = credentials
        self._notification_type = notification_type
        self._client = httpx.AsyncClient(base_url=INDEXING_API_BASE, timeout=timeout)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "IndexingClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def authenticate(self) -> None:
        """Obtain an access token for the service account.

        Raises:
            CredentialError: If Google rejects the credential or cannot be reached.
        """
        logger.info("Authenticating with Google")
        try:
            await asyncio.to_thread(self._credentials.refresh, google_requests.Request())
        except (google_exceptions.RefreshError, google_exceptions.TransportError) as e:
            raise CredentialError(f"Authentication with Google failed: {e}") from e
        logger.info("Authentication successful")

    async def _auth_headers(self) -> dict[str, str]:
        if not self._credentials.valid:
            await self.authenticate()
        return {"Authorization": f"Bearer {self._credentials.token}"}

    async def notify(
        self, url: str, notification_type: str | None = None
    ) -> NotificationAck | NotificationError:
        """Notify Google that a URL was updated or deleted.

        Args:
            url: The URL to notify about.
            notification_type: URL_UPDATED or URL_DELETED. Defaults to the
                client's configured type.

        Returns:
            NotificationAck on success, NotificationError otherwise.
        """
        body = {"url": url, "type": notification_type or self._notification_type}
        try:
            headers = await self._auth_headers()
            response = await self._client.post(
                "/urlNotifications:publish", json=body, headers=headers
            )
        except CredentialError as e:
            return NotificationError(status="UNAUTHENTICATED", message=str(e))
        except httpx.HTTPError as e:
            logger.warning("Request failed", url=url, error=str(e))
            return NotificationError(status="NETWORK_ERROR", message=str(e) or type(e).__name__)

        if response.is_success:
            try:
                data = response.json()
            except ValueError:
                data = {}
            if "urlNotificationMetadata" not in data:
                logger.warning("Publish response without notification metadata", url=url)
            return NotificationAck.from_api_response(url, data)

        error = parse_error_response(response)
        logger.warning(
            "Notification rejected",
            url=url,
            code=error.code,
            status=error.status,
            message=error.message,
        )
        return error

    async def get_metadata(self, url: str) -> dict[str, Any]:
        """Get the latest notifications Google has recorded for a URL.

        Args:
            url: The URL to look up.

        Returns:
            The raw UrlNotificationMetadata dict.

        Raises:
            IndexingApiError: If the request fails or the API returns an error.
        """
        logger.info("Fetching notification metadata", url=url)
        headers = await self._auth_headers()
        try:
            response = await self._client.get(
                "/urlNotifications/metadata", params={"url": url}, headers=headers
            )
        except httpx.HTTPError as e:
            logger.warning("Metadata request failed", url=url, error=str(e))
            raise IndexingApiError(None, "NETWORK_ERROR", str(e) or type(e).__name__) from e

        if not response.is_success:
            error = parse_error_response(response)
            raise IndexingApiError(error.code, error.status, error.message)

        try:
            return response.json()
        except ValueError as e:
            raise IndexingApiError(
                response.status_code, "INVALID_RESPONSE", "Response body is not JSON"
            ) from e
