"""
Control-plane commands understood by the mount subsystem.

Each command is a frozen dataclass with a class-level wire name and typed
fields. `to_wire()` produces the JSON object sent on the QMP socket, so a
command with a missing or misspelled field fails at construction time rather
than on the hypervisor side.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Dict


@dataclass(frozen=True)
class QMPCommand:
    name: ClassVar[str] = ""

    def arguments(self) -> Dict[str, Any]:
        return {}

    def to_wire(self) -> Dict[str, Any]:
        message: Dict[str, Any] = {"execute": self.name}
        arguments = self.arguments()
        if arguments:
            message["arguments"] = arguments
        return message


@dataclass(frozen=True)
class QmpCapabilities(QMPCommand):
    """Leaves capabilities negotiation mode. Sent once per connection."""

    name: ClassVar[str] = "qmp_capabilities"


@dataclass(frozen=True)
class QueryBlockJobs(QMPCommand):
    """No-op status query, used to nudge a stalled monitor."""

    name: ClassVar[str] = "query-block-jobs"


@dataclass(frozen=True)
class BlockdevAdd(QMPCommand):
    """Adds a block backend bound to a host-side image file."""

    name: ClassVar[str] = "blockdev-add"

    node_name: str
    filename: str
    read_only: bool = True
    driver: str = "raw"

    def arguments(self) -> Dict[str, Any]:
        return {
            "node-name": self.node_name,
            "driver": self.driver,
            "read-only": self.read_only,
            "file": {"driver": "file", "filename": self.filename},
        }


@dataclass(frozen=True)
class DeviceAdd(QMPCommand):
    """Wires a block backend to a guest-visible front-end device."""

    name: ClassVar[str] = "device_add"

    drive: str
    device_id: str
    serial: str
    driver: str = "virtio-blk-pci"

    def arguments(self) -> Dict[str, Any]:
        return {
            "driver": self.driver,
            "drive": self.drive,
            "id": self.device_id,
            "serial": self.serial,
        }
