"""Read-only client for the two external directories.

- Listing directory (Hospitable): candidate properties
- Messaging directory (Evolution API): candidate WhatsApp groups

Calls are passed straight through: no retries, no caching, and the timeouts
are whatever the underlying ``httpx.AsyncClient`` uses.
"""

from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from ...config import Settings
from ...core.exceptions import UpstreamError
from ...core.logging import get_logger
from .schemas import ListingPropertiesResponse, MessagingGroup

logger = get_logger("directory.client")

LISTING_SERVICE = "hospitable"
MESSAGING_SERVICE = "evolution"


class DirectoryClient:
    """Gateway to the listing and messaging directories."""

    def __init__(
        self,
        hospitable_api_url: str | None = None,
        hospitable_api_token: str | None = None,
        evolution_api_url: str | None = None,
        evolution_api_key: str | None = None,
        evolution_instance: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._hospitable_api_url = (hospitable_api_url or "").rstrip("/")
        self._hospitable_api_token = hospitable_api_token
        self._evolution_api_url = (evolution_api_url or "").rstrip("/")
        self._evolution_api_key = evolution_api_key
        self._evolution_instance = evolution_instance
        self._client = http_client
        self._owns_client = http_client is None

    @classmethod
    def from_settings(
        cls, settings: Settings, http_client: httpx.AsyncClient | None = None
    ) -> "DirectoryClient":
        return cls(
            hospitable_api_url=settings.hospitable_api_url,
            hospitable_api_token=settings.hospitable_api_token,
            evolution_api_url=settings.evolution_api_url,
            evolution_api_key=settings.evolution_api_key,
            evolution_instance=settings.evolution_instance,
            http_client=http_client,
        )

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient()
        return self._client

    async def _get_json(
        self,
        service: str,
        operation: str,
        url: str,
        headers: dict[str, str],
        params: dict[str, str] | None = None,
    ) -> Any:
        try:
            response = await self._get_client().get(url, headers=headers, params=params)
        except httpx.HTTPError as exc:
            logger.error(
                f"{service} request failed: {exc}",
                extra={"operation": operation, "service": service},
            )
            raise UpstreamError(service, operation, reason=str(exc)) from exc

        if response.is_error:
            logger.error(
                f"{service} returned {response.status_code}",
                extra={
                    "operation": operation,
                    "service": service,
                    "upstream_status": response.status_code,
                },
            )
            raise UpstreamError(
                service,
                operation,
                upstream_status=response.status_code,
                reason=response.text[:500] or None,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(
                service,
                operation,
                upstream_status=response.status_code,
                reason="response body is not JSON",
            ) from exc

    async def list_listing_properties(self) -> ListingPropertiesResponse:
        """Candidate properties from the listing directory."""
        operation = "list_properties"
        if not self._hospitable_api_url or not self._hospitable_api_token:
            raise UpstreamError(
                LISTING_SERVICE, operation, reason="listing directory is not configured"
            )

        payload = await self._get_json(
            LISTING_SERVICE,
            operation,
            f"{self._hospitable_api_url}/properties",
            headers={
                "Authorization": f"Bearer {self._hospitable_api_token}",
                "Accept": "application/json",
            },
        )
        try:
            return ListingPropertiesResponse.model_validate(payload)
        except PydanticValidationError as exc:
            raise UpstreamError(
                LISTING_SERVICE, operation, reason="unexpected response shape"
            ) from exc

    async def list_messaging_groups(self) -> list[MessagingGroup]:
        """Candidate groups from the messaging directory."""
        operation = "fetch_all_groups"
        if not (
            self._evolution_api_url
            and self._evolution_api_key
            and self._evolution_instance
        ):
            raise UpstreamError(
                MESSAGING_SERVICE,
                operation,
                reason="messaging directory is not configured",
            )

        payload = await self._get_json(
            MESSAGING_SERVICE,
            operation,
            f"{self._evolution_api_url}/group/fetchAllGroups/{self._evolution_instance}",
            headers={"apikey": self._evolution_api_key},
            params={"getParticipants": "false"},
        )
        if not isinstance(payload, list):
            raise UpstreamError(
                MESSAGING_SERVICE, operation, reason="expected a list of groups"
            )
        try:
            return [MessagingGroup.model_validate(item) for item in payload]
        except PydanticValidationError as exc:
            raise UpstreamError(
                MESSAGING_SERVICE, operation, reason="unexpected response shape"
            ) from exc

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None
