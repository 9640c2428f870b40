"""Mount Helper Client - registers attached devices with mount.php."""

import logging
from typing import Dict, Optional

import httpx

from automount.core.exceptions import HelperServiceError


class MountHelperClient:
    """
    Calls the mount-registration endpoint inside the guest environment.

    Every call opens a fresh connection and returns the full response body.
    The body format is owned by the helper; it is only logged and passed on.
    """

    def __init__(
        self,
        base_url: str,
        path: str = "/mount.php",
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url
        self._path = path
        self._timeout = timeout
        self._transport = transport

    async def mount_file(self, name: str) -> str:
        """Register a primary mount by file name or serial."""
        return await self.request({"file": name})

    async def mount_extra(self, name: str, mount_point: str) -> str:
        """Register an auxiliary mount at a guest-visible location."""
        return await self.request({"nonzip": name, "nzloc": mount_point})

    async def request(self, params: Dict[str, str]) -> str:
        url = f"{self._base_url}{self._path}"
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.get(url, params=params)
        except httpx.HTTPError as e:
            raise HelperServiceError(f"Mount helper request to {url} failed: {e}") from e

        if response.status_code >= 400:
            raise HelperServiceError(
                f"Mount helper returned HTTP {response.status_code}: {response.text.strip()}",
                status_code=response.status_code,
            )

        logging.info(f"mount.php returns: {response.text}")
        return response.text
