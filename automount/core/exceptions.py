# automount/core/exceptions.py

from typing import Optional


class AutoMountError(Exception):
    """Base class for all errors raised by the mount subsystem."""


class GrammarError(AutoMountError):
    """Raised when a mount parameter string cannot be parsed."""

    def __init__(self, message: str, position: Optional[int] = None):
        self.position = position
        if position is not None:
            message = f"{message} (at character {position})"
        super().__init__(message)


class ArityError(GrammarError):
    """Raised when a directive carries the wrong number of arguments."""

    def __init__(self, keyword: str, expected: int, received: int):
        self.keyword = keyword
        self.expected = expected
        self.received = received
        super().__init__(
            f"Directive '{keyword}' takes {expected} argument(s), got {received}"
        )


class ProtocolError(AutoMountError):
    """Raised when the control-plane connection or a command fails."""

    def __init__(self, message: str, error_class: Optional[str] = None):
        self.error_class = error_class
        super().__init__(message)


class MountTimeoutError(ProtocolError):
    """Raised when the attach sequence exceeds the configured deadline."""


class HelperServiceError(AutoMountError):
    """Raised when the mount-helper service call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class UnresolvedDataError(AutoMountError):
    """Raised when game data is registered but not present on disk."""

    def __init__(self, game_id: str, file_path: Optional[str] = None):
        self.game_id = game_id
        self.file_path = file_path
        detail = f" ({file_path})" if file_path else ""
        super().__init__(
            f"GameData for {game_id} found but not downloaded, cannot mount{detail}"
        )
