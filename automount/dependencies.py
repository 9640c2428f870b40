from functools import lru_cache
from typing import Any, Dict

from .config import Settings
from .core.events.event_bus import DomainEventBus
from .services.launch import GameLaunchService, ServiceModeDetector
from .services.mount.mounted_set import MountedSet
from .services.mount.orchestrator import MountOrchestrator
from .services.mount.pipeline import MountPipeline
from .services.mount_helper_client import MountHelperClient
from .services.mount_params import DirectiveRegistry, MountParamParser
from .services.notification_handler import NotificationHandler

# Process-lifetime singletons
_singletons: Dict[str, Any] = {}


@lru_cache
def get_settings() -> Settings:
    """Hent Settings singleton instance."""
    return Settings()


def get_event_bus() -> DomainEventBus:
    if "event_bus" not in _singletons:
        _singletons["event_bus"] = DomainEventBus()
    return _singletons["event_bus"]


def get_mounted_set() -> MountedSet:
    if "mounted_set" not in _singletons:
        _singletons["mounted_set"] = MountedSet()
    return _singletons["mounted_set"]


def get_mount_helper_client() -> MountHelperClient:
    if "mount_helper_client" not in _singletons:
        settings = get_settings()
        _singletons["mount_helper_client"] = MountHelperClient(
            base_url=settings.mount_helper_base_url,
            path=settings.mount_helper_path,
            timeout=settings.mount_helper_timeout_seconds,
        )
    return _singletons["mount_helper_client"]


def get_mount_orchestrator() -> MountOrchestrator:
    if "mount_orchestrator" not in _singletons:
        _singletons["mount_orchestrator"] = MountOrchestrator(
            settings=get_settings(),
            mounted=get_mounted_set(),
            helper=get_mount_helper_client(),
            event_bus=get_event_bus(),
        )
    return _singletons["mount_orchestrator"]


def get_directive_registry() -> DirectiveRegistry:
    if "directive_registry" not in _singletons:
        _singletons["directive_registry"] = DirectiveRegistry.default(get_mount_orchestrator())
    return _singletons["directive_registry"]


def get_mount_param_parser() -> MountParamParser:
    if "mount_param_parser" not in _singletons:
        _singletons["mount_param_parser"] = MountParamParser(get_directive_registry().specs)
    return _singletons["mount_param_parser"]


def get_mount_pipeline() -> MountPipeline:
    if "mount_pipeline" not in _singletons:
        _singletons["mount_pipeline"] = MountPipeline(
            orchestrator=get_mount_orchestrator(),
            registry=get_directive_registry(),
            parser=get_mount_param_parser(),
        )
    return _singletons["mount_pipeline"]


def get_service_mode_detector() -> ServiceModeDetector:
    if "service_mode_detector" not in _singletons:
        _singletons["service_mode_detector"] = ServiceModeDetector(get_settings())
    return _singletons["service_mode_detector"]


def get_game_launch_service() -> GameLaunchService:
    if "game_launch_service" not in _singletons:
        _singletons["game_launch_service"] = GameLaunchService(
            settings=get_settings(),
            pipeline=get_mount_pipeline(),
            mode_detector=get_service_mode_detector(),
        )
    return _singletons["game_launch_service"]


def get_notification_handler() -> NotificationHandler:
    if "notification_handler" not in _singletons:
        _singletons["notification_handler"] = NotificationHandler(get_event_bus())
    return _singletons["notification_handler"]


def reset_singletons() -> None:
    _singletons.clear()
    get_settings.cache_clear()
