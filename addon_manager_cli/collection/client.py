"""Client for the remote addon collection API.

Two JSON-over-POST exchanges: fetch the full collection, replace the full
collection. Failures are translated into NetworkError / ProtocolError /
RemoteRejectedError and surfaced to the caller. Nothing is retried: a
replace that failed ambiguously may already have been applied server-side.
"""

import logging
from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import ValidationError

from ..exceptions import NetworkError
from ..exceptions import ProtocolError
from ..exceptions import RemoteRejectedError
from ..models import AddonEntry
from ..models import ApiSettings

logger = logging.getLogger(__name__)

GET_METHOD = "addonCollectionGet"
SET_METHOD = "addonCollectionSet"


def _server_error_message(body: dict[str, Any]) -> str | None:
    """Extract the message from a top-level ``error`` envelope, if any."""
    error = body.get("error")
    if isinstance(error, dict):
        return str(error.get("message") or error)
    if error:
        return str(error)
    return None


class RemoteCollectionClient:
    """Fetches and replaces the addon collection held by the remote API."""

    def __init__(
        self,
        settings: ApiSettings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize collection client.

        Args:
            settings: API base URL and timeout. Defaults to the public Stremio API.
            http_client: Pre-built client (tests pass one with ``httpx.MockTransport``).
                If None, a short-lived client is created per request.
        """
        self.settings = settings or ApiSettings()
        self._http_client = http_client

    async def _post(self, method: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST ``payload`` to ``method`` and return the decoded JSON object."""
        url = self.settings.endpoint(method)
        logger.debug(f"POST {url} ({payload['type']})")

        try:
            if self._http_client is not None:
                response = await self._http_client.post(url, json=payload, timeout=self.settings.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.settings.timeout) as client:
                    response = await client.post(url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NetworkError(
                f"Collection API returned HTTP {e.response.status_code} for {method}",
                context={"url": url, "status": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            # Timeouts are transport errors like any other
            raise NetworkError(
                f"Could not reach collection API ({type(e).__name__}): {e}",
                context={"url": url},
            ) from e

        try:
            body = response.json()
        except ValueError as e:
            raise ProtocolError(f"Collection API returned a non-JSON body for {method}", context={"url": url}) from e

        if not isinstance(body, dict):
            raise ProtocolError(f"Collection API returned an unexpected body for {method}", context={"url": url})
        return body

    async def fetch_collection(self, auth_key: str) -> list[AddonEntry]:
        """Fetch the full ordered collection.

        Returns:
            Entries exactly as the server ordered them

        Raises:
            NetworkError: Transport failure, timeout or non-2xx status
            ProtocolError: Missing ``result.addons`` or malformed entries
        """
        body = await self._post(
            GET_METHOD,
            {"type": "AddonCollectionGet", "authKey": auth_key, "update": True},
        )

        result = body.get("result")
        addons = result.get("addons") if isinstance(result, dict) else None
        if not isinstance(addons, list):
            server_message = _server_error_message(body)
            if server_message:
                raise ProtocolError(f"Failed to fetch addons: {server_message}")
            raise ProtocolError("Failed to fetch addons: response has no result.addons. Your session might be invalid.")

        try:
            entries = [AddonEntry.from_wire(item) for item in addons]
        except ValidationError as e:
            raise ProtocolError(f"Collection API returned malformed addon entries: {e.error_count()} errors") from e

        logger.info(f"Fetched {len(entries)} addons")
        return entries

    async def replace_collection(self, auth_key: str, entries: Sequence[AddonEntry]) -> None:
        """Replace the remote collection with ``entries`` in full.

        Raises:
            NetworkError: Transport failure, timeout or non-2xx status
            RemoteRejectedError: Server reported failure; carries its message
            ProtocolError: Response envelope is structurally unexpected
        """
        body = await self._post(
            SET_METHOD,
            {
                "type": "AddonCollectionSet",
                "authKey": auth_key,
                "addons": [entry.to_wire() for entry in entries],
            },
        )

        result = body.get("result")
        if not isinstance(result, dict):
            server_message = _server_error_message(body)
            if server_message:
                raise RemoteRejectedError(server_message)
            raise ProtocolError("Sync failed: response has no result envelope")

        if not result.get("success"):
            raise RemoteRejectedError(str(result.get("error") or "Unknown error"))

        logger.info(f"Replaced remote collection with {len(entries)} addons")
