from dataclasses import dataclass
from typing import Optional

from automount.core.events.domain_event import DomainEvent
from automount.models import MountStatus


@dataclass(frozen=True)
class MountStatusChangedEvent(DomainEvent):
    """Event published when a primary or auxiliary mount changes status."""
    identifier: str
    status: MountStatus
    file_path: str
    detail: Optional[str] = None


@dataclass(frozen=True)
class ControlPlaneUnresponsiveEvent(DomainEvent):
    """Event published when the watchdog could not reach the control plane."""
    identifier: str
    reason: str
