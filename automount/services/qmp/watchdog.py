"""QMP Watchdog - nudges a stalled monitor through a second connection."""

import logging
from typing import Callable

from automount.services.qmp.client import QMPClient
from automount.services.qmp.commands import QueryBlockJobs

ClientFactory = Callable[..., QMPClient]


class Watchdog:
    """
    Sends a no-op command on the secondary monitor port.

    QEMU sometimes stops answering the primary monitor until another monitor
    sees traffic. The nudge never touches the primary connection itself.
    """

    def __init__(
        self,
        host: str,
        port: int,
        timeout: float,
        client_factory: ClientFactory = QMPClient,
    ):
        self._host = host
        self._port = port
        self._timeout = timeout
        self._client_factory = client_factory

    async def nudge(self) -> None:
        """Raises ProtocolError if the secondary monitor cannot be reached."""
        logging.debug(f"Nudging QMP via {self._host}:{self._port}")
        async with self._client_factory(self._host, self._port, timeout=self._timeout) as qmp:
            await qmp.execute(QueryBlockJobs())
