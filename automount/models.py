from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MountStatus(str, Enum):
    """
    Status for a mount request through the attach pipeline.

    Normal workflow: Attempting -> Mounted
    Alternatives: AlreadyMounted (identifier seen before), Skipped (extract
    directive), Failed (protocol or helper error)
    """

    ATTEMPTING = "Attempting"  # Attach sequence in progress
    MOUNTED = "Mounted"  # Device attached and registered with the helper
    ALREADY_MOUNTED = "AlreadyMounted"  # Identifier already claimed, no-op
    SKIPPED = "Skipped"  # Auto-mount suppressed by a directive
    FAILED = "Failed"  # Attach or registration failed


class MountRequest(BaseModel):
    """A single primary mount: which identifier, which disk image."""

    model_config = ConfigDict(frozen=True)

    identifier: str = Field(..., min_length=1, description="Stable path-safe handle, typically a UUID")
    file_path: str = Field(..., min_length=1, description="Absolute path to the disk image")


class MountOutcome(BaseModel):
    """Terminal result of a mount attempt. Failures are raised, not returned."""

    identifier: str
    status: MountStatus
    file_path: Optional[str] = None
    payload: Optional[str] = Field(
        default=None, description="Body returned by the mount-helper service"
    )


class DirectiveModel(BaseModel):
    """API representation of a parsed directive."""

    keyword: str
    args: List[str] = Field(default_factory=list)
    phase: str


class PipelineResult(BaseModel):
    """Result of running directives and the primary mount for one request."""

    identifier: str
    directives: List[DirectiveModel] = Field(default_factory=list)
    outcome: Optional[MountOutcome] = None
    auto_mount_skipped: bool = False


class GameData(BaseModel):
    """
    Game data metadata as handed over by the launcher.

    Only the fields needed to locate the data pack and read its mount
    parameters are modelled.
    """

    game_id: str
    date_added: datetime
    present_on_disk: bool = False
    parameters: Optional[str] = None
    path: Optional[str] = Field(
        default=None, description="Relative data pack path, overrides the derived file name"
    )

    def data_pack_filename(self) -> str:
        """Return `<gameId>-<dateAdded in epoch milliseconds>.zip`."""
        date_added = self.date_added
        if date_added.tzinfo is None:
            date_added = date_added.replace(tzinfo=timezone.utc)
        return f"{self.game_id}-{int(date_added.timestamp() * 1000)}.zip"


class GameLaunchRequest(BaseModel):
    game_id: str
    active_data: Optional[GameData] = None


class AddAppLaunchRequest(BaseModel):
    add_app_id: str
    parent_game_id: Optional[str] = None
    active_data: Optional[GameData] = None


class MountApiRequest(BaseModel):
    identifier: str = Field(..., min_length=1)
    file_path: str = Field(..., min_length=1)
    parameters: str = ""


class ParseRequest(BaseModel):
    parameters: str = ""


class MountedEntries(BaseModel):
    entries: List[str] = Field(default_factory=list)
    count: int = 0


class ControlPlaneWarning(BaseModel):
    identifier: str
    reason: str
    timestamp: datetime
