"""QMP Client - one persistent JSON command/response connection."""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

from automount.core.exceptions import ProtocolError
from automount.services.qmp.commands import QMPCommand, QmpCapabilities


class QMPClient:
    """
    Single-use connection to a QEMU machine protocol monitor.

    Lifecycle: connect() reads the greeting and negotiates capabilities,
    execute() sends one command at a time and waits for its reply, close()
    ends the session. There is no reconnect; a failed client is discarded.

    Usage:
        async with QMPClient("127.0.0.1", 4444) as qmp:
            await qmp.execute(QueryBlockJobs())
    """

    def __init__(self, host: str, port: int, *, timeout: Optional[float] = None):
        self.host = host
        self.port = port
        self._timeout = timeout
        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None

    @property
    def endpoint(self) -> str:
        return f"{self.host}:{self.port}"

    @property
    def is_connected(self) -> bool:
        return self._writer is not None and not self._writer.is_closing()

    async def __aenter__(self) -> "QMPClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def connect(self) -> "QMPClient":
        try:
            self._reader, self._writer = await asyncio.wait_for(
                asyncio.open_connection(self.host, self.port), timeout=self._timeout
            )
        except (OSError, asyncio.TimeoutError) as e:
            raise ProtocolError(f"Could not connect to QMP at {self.endpoint}: {e}") from e

        try:
            greeting = await self._read_message()
            if "QMP" not in greeting:
                raise ProtocolError(f"Unexpected QMP greeting from {self.endpoint}: {greeting}")
            logging.debug(f"QMP greeting from {self.endpoint}: {greeting['QMP']}")
            await self.execute(QmpCapabilities())
        except ProtocolError:
            await self.close()
            raise
        return self

    async def execute(self, command: QMPCommand) -> Any:
        """Send a command and return its `return` payload."""
        if self._writer is None:
            raise ProtocolError(f"QMP connection to {self.endpoint} is not open")

        message = command.to_wire()
        logging.debug(f"QMP {self.endpoint} -> {message}")

        try:
            self._writer.write(json.dumps(message).encode("utf-8") + b"\n")
            await asyncio.wait_for(self._writer.drain(), timeout=self._timeout)
        except (OSError, asyncio.TimeoutError) as e:
            raise ProtocolError(f"Failed to send {command.name} to {self.endpoint}: {e}") from e

        while True:
            reply = await self._read_message()
            if "event" in reply:
                logging.debug(f"QMP {self.endpoint} event: {reply['event']}")
                continue
            if "error" in reply:
                error = reply["error"]
                raise ProtocolError(
                    f"{command.name} failed on {self.endpoint}: "
                    f"{error.get('desc', 'unknown error')}",
                    error_class=error.get("class"),
                )
            if "return" in reply:
                return reply["return"]
            logging.warning(f"Ignoring unexpected QMP message from {self.endpoint}: {reply}")

    async def close(self) -> None:
        writer, self._writer, self._reader = self._writer, None, None
        if writer is None:
            return
        writer.close()
        try:
            await writer.wait_closed()
        except OSError as e:
            logging.debug(f"Error while closing QMP connection {self.endpoint}: {e}")

    async def _read_message(self) -> Dict[str, Any]:
        if self._reader is None:
            raise ProtocolError(f"QMP connection to {self.endpoint} is not open")
        try:
            line = await asyncio.wait_for(self._reader.readline(), timeout=self._timeout)
        except (OSError, asyncio.TimeoutError) as e:
            raise ProtocolError(f"Failed reading from QMP at {self.endpoint}: {e}") from e

        if not line:
            raise ProtocolError(f"QMP connection to {self.endpoint} closed unexpectedly")

        try:
            message = json.loads(line.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ProtocolError(f"Malformed QMP message from {self.endpoint}: {e}") from e

        if not isinstance(message, dict):
            raise ProtocolError(f"Malformed QMP message from {self.endpoint}: {message!r}")
        return message
