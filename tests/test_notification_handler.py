import pytest

from automount.core.events.event_bus import DomainEventBus
from automount.core.events.mount_events import (
    ControlPlaneUnresponsiveEvent,
    MountStatusChangedEvent,
)
from automount.models import MountStatus
from automount.services.notification_handler import NotificationHandler


@pytest.mark.asyncio
async def test_unresponsive_events_become_warnings():
    bus = DomainEventBus()
    handler = NotificationHandler(bus, max_warnings=2)
    await handler.subscribe()

    for i in range(3):
        await bus.publish(ControlPlaneUnresponsiveEvent(identifier=f"game-{i}", reason="refused"))

    warnings = handler.recent_warnings()
    assert [w.identifier for w in warnings] == ["game-1", "game-2"]
    assert warnings[0].reason == "refused"


@pytest.mark.asyncio
async def test_status_events_are_only_logged():
    bus = DomainEventBus()
    handler = NotificationHandler(bus)
    await handler.subscribe()

    await bus.publish(
        MountStatusChangedEvent(identifier="game-1", status=MountStatus.FAILED, file_path="/a.zip")
    )

    assert handler.recent_warnings() == []
