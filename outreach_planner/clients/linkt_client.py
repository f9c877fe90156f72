"""
Async client for the Linkt signal and entity API.

Linkt webhooks only carry IDs. This client retrieves:
- the signal record (summary, type, strength, entity IDs, references)
- each entity record (company or person data)

Errors are raised as LinktAPIError; callers decide whether a failure is
fatal for what they are fetching.
"""

from typing import Any, Dict, Optional

import httpx
from loguru import logger

from .. import config


class LinktAPIError(RuntimeError):
    """Raised when a Linkt request fails or returns a non-2xx status"""


class LinktClient:
    """Reusable async client for retrieving Linkt signals and entities."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else config.LINKT_API_KEY
        self.base_url = (base_url or config.LINKT_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else config.LINKT_TIMEOUT_SECONDS
        self._transport = transport
        self._headers = {"Accept": "application/json"}
        if self.api_key:
            self._headers["Authorization"] = f"Bearer {self.api_key}"

    async def retrieve_signal(self, signal_id: str) -> Dict[str, Any]:
        """Fetch one signal record by ID"""
        return await self._get(f"/v1/signal/{signal_id}")

    async def retrieve_entity(self, entity_id: str) -> Dict[str, Any]:
        """Fetch one entity record by ID"""
        return await self._get(f"/v1/entity/{entity_id}")

    async def _get(self, path: str) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                logger.debug(f"GET {url}")
                response = await client.get(url, headers=self._headers)
                response.raise_for_status()
                data = response.json()

        except httpx.HTTPStatusError as e:
            raise LinktAPIError(
                f"Linkt returned {e.response.status_code} for {path}"
            ) from e
        except httpx.HTTPError as e:
            raise LinktAPIError(f"HTTP error calling Linkt {path}: {e}") from e
        except ValueError as e:
            raise LinktAPIError(f"Invalid JSON from Linkt {path}: {e}") from e

        if not isinstance(data, dict):
            raise LinktAPIError(f"Unexpected response shape from Linkt {path}")

        return data
