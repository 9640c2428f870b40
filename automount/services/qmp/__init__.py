"""
QMP control-plane access.

Components:
- QMPClient: one connection, one consumer, typed commands
- Watchdog: nudges a stalled monitor through the secondary port
- commands: tagged command variants sent over the wire
"""

from .client import QMPClient
from .commands import BlockdevAdd, DeviceAdd, QMPCommand, QmpCapabilities, QueryBlockJobs
from .watchdog import Watchdog

__all__ = [
    "QMPClient",
    "QMPCommand",
    "QmpCapabilities",
    "QueryBlockJobs",
    "BlockdevAdd",
    "DeviceAdd",
    "Watchdog",
]
