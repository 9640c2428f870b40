import logging
from collections import deque
from typing import Deque, List

from automount.core.events.event_bus import DomainEventBus
from automount.core.events.mount_events import (
    ControlPlaneUnresponsiveEvent,
    MountStatusChangedEvent,
)
from automount.models import ControlPlaneWarning, MountStatus


class NotificationHandler:
    """Collects user-facing warnings and logs mount status changes."""

    def __init__(self, event_bus: DomainEventBus, max_warnings: int = 50):
        self._event_bus = event_bus
        self._warnings: Deque[ControlPlaneWarning] = deque(maxlen=max_warnings)

    async def subscribe(self) -> None:
        await self._event_bus.subscribe(ControlPlaneUnresponsiveEvent, self.handle_unresponsive)
        await self._event_bus.subscribe(MountStatusChangedEvent, self.handle_mount_status)

    async def handle_unresponsive(self, event: ControlPlaneUnresponsiveEvent) -> None:
        self._warnings.append(
            ControlPlaneWarning(
                identifier=event.identifier, reason=event.reason, timestamp=event.timestamp
            )
        )
        logging.warning(
            f"[bold yellow]QMP appears to be unresponsive[/] while mounting {event.identifier}. "
            "Check that the VM is running."
        )

    async def handle_mount_status(self, event: MountStatusChangedEvent) -> None:
        log = logging.error if event.status is MountStatus.FAILED else logging.info
        log(
            f"Mount status update: {event.identifier} -> {event.status.value}",
            extra={
                "operation": "mount_status_update",
                "identifier": event.identifier,
                "mount_status": event.status.value,
                "file_path": event.file_path,
            },
        )

    def recent_warnings(self) -> List[ControlPlaneWarning]:
        return list(self._warnings)
