from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Control plane (QMP)
    qmp_host: str = "127.0.0.1"
    qmp_port: int = 4444
    qmp_watchdog_port: int = 4445  # Separate monitor used only for nudges

    # Watchdog timing
    watchdog_poll_interval_seconds: float = 0.02
    watchdog_nudge_threshold: int = 10  # Polls before the first nudge (~0.2 s)
    watchdog_timeout_seconds: float = 5.0
    # None = no deadline on the attach sequence
    mount_deadline_seconds: Optional[float] = None

    # Virtual device
    device_tag_length: int = 16
    device_driver: str = "virtio-blk-pci"

    # Mount helper (mount.php)
    mount_helper_host: str = "127.0.0.1"
    mount_helper_port: int = 22500
    mount_helper_path: str = "/mount.php"
    mount_helper_timeout_seconds: Optional[float] = None

    # Launcher data
    data_packs_path: str = "Data/Games"
    services_file_path: str = "Data/services.json"
    docker_mode: Optional[bool] = None  # Overrides services file detection

    # Logging konfiguration
    log_level: str = "INFO"
    log_file_path: str = "logs/automount.log"
    log_retention_days: int = 14

    # HTTP API
    api_host: str = "127.0.0.1"
    api_port: int = 22502

    model_config = SettingsConfigDict(env_file="settings.env", extra="ignore")

    @property
    def log_directory(self) -> Path:
        """Returnerer log directory som Path objekt"""
        return Path(self.log_file_path).parent

    @property
    def mount_helper_base_url(self) -> str:
        return f"http://{self.mount_helper_host}:{self.mount_helper_port}"
