"""Service Mode Detector - docker or VM, read from the services descriptor."""

import json
import logging
from typing import Any, Optional

import aiofiles
import aiofiles.os

from automount.config import Settings


class ServiceModeDetector:
    """
    Decides whether game data is served from a docker container or a VM.

    The services descriptor lists the server the launcher starts. If any
    server entry mentions docker in its name or path we are in docker mode,
    otherwise the data is attached to the VM through QMP.
    """

    def __init__(self, settings: Settings):
        self._settings = settings
        self._cached: Optional[bool] = None

    async def is_docker(self) -> bool:
        if self._settings.docker_mode is not None:
            return self._settings.docker_mode
        if self._cached is None:
            self._cached = await self._detect()
            logging.info(f"Service mode detected: {'docker' if self._cached else 'qemu'}")
        return self._cached

    async def _detect(self) -> bool:
        path = self._settings.services_file_path
        if not await aiofiles.os.path.exists(path):
            logging.warning(f"Services file not found: {path}, assuming VM mode")
            return False

        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                descriptor = json.loads(await f.read())
        except (OSError, json.JSONDecodeError) as e:
            logging.warning(f"Could not read services file {path}: {e}, assuming VM mode")
            return False

        return self._mentions_docker(descriptor)

    @staticmethod
    def _mentions_docker(descriptor: Any) -> bool:
        if not isinstance(descriptor, dict):
            return False
        servers = descriptor.get("server", [])
        if isinstance(servers, dict):
            servers = [servers]
        for server in servers:
            if not isinstance(server, dict):
                continue
            for key in ("name", "path"):
                value = server.get(key)
                if isinstance(value, str) and "docker" in value.lower():
                    return True
        return False
