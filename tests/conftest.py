"""
Pytest configuration og shared fixtures.
"""

import asyncio
import json
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio

from automount.config import Settings
from automount.dependencies import reset_singletons


@pytest.fixture(autouse=True)
def clean_singletons():
    """Automatically reset singletons before hver test."""
    reset_singletons()
    yield
    reset_singletons()


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings with fast watchdog timing and paths inside tmp_path."""
    return Settings(
        _env_file=None,
        watchdog_poll_interval_seconds=0.001,
        watchdog_nudge_threshold=3,
        watchdog_timeout_seconds=1.0,
        data_packs_path=str(tmp_path / "Games"),
        services_file_path=str(tmp_path / "services.json"),
        log_file_path=str(tmp_path / "logs" / "automount.log"),
    )


class FakeQMPServer:
    """
    Minimal QMP monitor on an ephemeral port.

    Sends the greeting, records every command and answers from `replies`
    (command name -> reply dict), defaulting to an empty `return`.
    """

    def __init__(self, greeting: Optional[Dict[str, Any]] = None):
        self.greeting = greeting if greeting is not None else {
            "QMP": {"version": {"qemu": {"major": 8, "minor": 2, "micro": 0}}, "capabilities": []}
        }
        self.replies: Dict[str, Dict[str, Any]] = {}
        self.events_before_reply: List[Dict[str, Any]] = []
        self.received: List[Dict[str, Any]] = []
        self.connections = 0
        self.port: int = 0
        self._server: Optional[asyncio.AbstractServer] = None

    @property
    def commands(self) -> List[str]:
        return [message["execute"] for message in self.received]

    async def start(self) -> "FakeQMPServer":
        self._server = await asyncio.start_server(self._handle, "127.0.0.1", 0)
        self.port = self._server.sockets[0].getsockname()[1]
        return self

    async def stop(self) -> None:
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()

    async def _handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self.connections += 1
        try:
            writer.write(json.dumps(self.greeting).encode() + b"\n")
            await writer.drain()
            while True:
                line = await reader.readline()
                if not line:
                    break
                message = json.loads(line)
                self.received.append(message)
                for event in self.events_before_reply:
                    writer.write(json.dumps(event).encode() + b"\n")
                reply = self.replies.get(message["execute"], {"return": {}})
                writer.write(json.dumps(reply).encode() + b"\n")
                await writer.drain()
        except ConnectionError:
            pass
        finally:
            writer.close()


@pytest_asyncio.fixture
async def qmp_server():
    server = await FakeQMPServer().start()
    yield server
    await server.stop()
