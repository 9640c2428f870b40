import asyncio
import logging
import os
from typing import Awaitable, Callable, Optional

from automount.config import Settings
from automount.core.events.event_bus import DomainEventBus
from automount.core.events.mount_events import (
    ControlPlaneUnresponsiveEvent,
    MountStatusChangedEvent,
)
from automount.core.exceptions import AutoMountError, MountTimeoutError, ProtocolError
from automount.models import MountOutcome, MountStatus
from automount.services.mount.device_tags import (
    random_device_tag,
    serial_for_identifier,
    serial_for_path,
)
from automount.services.mount.mounted_set import MountedSet
from automount.services.mount_helper_client import MountHelperClient
from automount.services.qmp.client import QMPClient
from automount.services.qmp.commands import BlockdevAdd, DeviceAdd
from automount.services.qmp.watchdog import ClientFactory, Watchdog


class MountOrchestrator:
    """
    Runs the attach sequence for primary and auxiliary mounts.

    Docker mode only talks to the mount helper. VM mode hot-plugs the image
    through QMP and then registers the device serial with the helper, while
    a watchdog loop nudges the control plane if the attach stalls. Only the
    attach task produces a result; the watchdog never does.

    Every key is claimed in the MountedSet before any I/O and stays claimed
    even if the attempt fails.
    """

    def __init__(
        self,
        settings: Settings,
        mounted: MountedSet,
        helper: MountHelperClient,
        event_bus: DomainEventBus,
        client_factory: ClientFactory = QMPClient,
        watchdog: Optional[Watchdog] = None,
        tag_factory: Callable[[int], str] = random_device_tag,
    ):
        self._settings = settings
        self._mounted = mounted
        self._helper = helper
        self._event_bus = event_bus
        self._client_factory = client_factory
        self._watchdog = watchdog or Watchdog(
            settings.qmp_host,
            settings.qmp_watchdog_port,
            settings.watchdog_timeout_seconds,
            client_factory=client_factory,
        )
        self._tag_factory = tag_factory

    @property
    def mounted(self) -> MountedSet:
        return self._mounted

    async def mount(self, identifier: str, file_path: str, *, is_docker: bool) -> MountOutcome:
        """Mount a game's data pack. Raises ProtocolError or HelperServiceError on failure."""
        if not self._mounted.claim(identifier):
            logging.info(f"{identifier} already mounted, skipping")
            return MountOutcome(
                identifier=identifier, status=MountStatus.ALREADY_MOUNTED, file_path=file_path
            )

        logging.info(
            f"Mounting {file_path}",
            extra={"operation": "mount", "identifier": identifier, "docker": is_docker},
        )
        await self._publish_status(identifier, MountStatus.ATTEMPTING, file_path)

        try:
            if is_docker:
                payload = await self._helper.mount_file(os.path.basename(file_path))
            else:
                serial = serial_for_identifier(identifier)
                payload = await self._attach_with_watchdog(
                    identifier, file_path, serial, lambda: self._helper.mount_file(serial)
                )
        except AutoMountError as e:
            logging.error(f"Mount of {file_path} failed: {e}")
            await self._publish_status(identifier, MountStatus.FAILED, file_path, str(e))
            raise

        await self._publish_status(identifier, MountStatus.MOUNTED, file_path, payload)
        return MountOutcome(
            identifier=identifier, status=MountStatus.MOUNTED, file_path=file_path, payload=payload
        )

    async def mount_auxiliary(
        self,
        file_path: str,
        mount_point: str,
        *,
        mounted: Optional[MountedSet] = None,
        is_docker: bool,
    ) -> bool:
        """
        Mount an extra file at `mount_point` inside the guest.

        Deduplicated on the file path; the serial is derived from the path's
        MD5 so the same file always gets the same serial.
        """
        if mounted is None:
            mounted = self._mounted
        if not mounted.claim(file_path):
            logging.debug(f"Extra {file_path} already mounted")
            return True

        logging.info(f"Mounting {file_path}", extra={"operation": "mount_extra"})
        await self._publish_status(file_path, MountStatus.ATTEMPTING, file_path)

        try:
            if is_docker:
                await self._helper.mount_extra(os.path.basename(file_path), mount_point)
            else:
                serial = serial_for_path(file_path)
                await self._attach_with_watchdog(
                    file_path,
                    file_path,
                    serial,
                    lambda: self._helper.mount_extra(serial, mount_point),
                )
        except AutoMountError as e:
            logging.error(f"Mount of extra {file_path} failed: {e}")
            await self._publish_status(file_path, MountStatus.FAILED, file_path, str(e))
            raise

        await self._publish_status(file_path, MountStatus.MOUNTED, file_path)
        return True

    async def _attach_with_watchdog(
        self,
        identifier: str,
        file_path: str,
        serial: str,
        register: Callable[[], Awaitable[str]],
    ) -> str:
        main_task = asyncio.create_task(self._attach(file_path, serial, register))
        watchdog_task = asyncio.create_task(self._watch(identifier, main_task))
        deadline = self._settings.mount_deadline_seconds
        try:
            return await asyncio.wait_for(main_task, timeout=deadline)
        except asyncio.TimeoutError as e:
            raise MountTimeoutError(
                f"Attaching {file_path} did not finish within {deadline} seconds"
            ) from e
        finally:
            watchdog_task.cancel()
            await asyncio.gather(watchdog_task, return_exceptions=True)

    async def _attach(
        self, file_path: str, serial: str, register: Callable[[], Awaitable[str]]
    ) -> str:
        tag = self._tag_factory(self._settings.device_tag_length)
        async with self._client_factory(self._settings.qmp_host, self._settings.qmp_port) as qmp:
            await qmp.execute(BlockdevAdd(node_name=tag, filename=file_path))
            await qmp.execute(
                DeviceAdd(
                    drive=tag,
                    device_id=tag,
                    serial=serial,
                    driver=self._settings.device_driver,
                )
            )
        logging.debug(f"Attached {file_path} as {tag} (serial {serial!r})")
        return await register()

    async def _watch(self, identifier: str, main_task: asyncio.Task) -> None:
        """Poll until the attach finishes, nudging once per threshold crossing."""
        interval = self._settings.watchdog_poll_interval_seconds
        threshold = self._settings.watchdog_nudge_threshold
        polls = 0
        warned = False

        while not main_task.done():
            await asyncio.sleep(interval)
            polls += 1
            if polls <= threshold or main_task.done():
                continue

            polls = 0
            try:
                await self._watchdog.nudge()
            except ProtocolError as e:
                if warned:
                    logging.debug(f"QMP nudge failed again: {e}")
                    continue
                warned = True
                logging.warning(
                    f"QMP appears to be unresponsive, the mount may hang: {e}",
                    extra={"operation": "qmp_nudge", "identifier": identifier},
                )
                await self._event_bus.publish(
                    ControlPlaneUnresponsiveEvent(identifier=identifier, reason=str(e))
                )

    async def _publish_status(
        self,
        identifier: str,
        status: MountStatus,
        file_path: str,
        detail: Optional[str] = None,
    ) -> None:
        await self._event_bus.publish(
            MountStatusChangedEvent(
                identifier=identifier, status=status, file_path=file_path, detail=detail
            )
        )
