from .game_launch_service import GameLaunchService
from .service_mode import ServiceModeDetector

__all__ = ["GameLaunchService", "ServiceModeDetector"]
