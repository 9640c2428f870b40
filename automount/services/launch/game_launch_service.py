import logging
import os
from typing import Optional

import aiofiles.os

from automount.config import Settings
from automount.core.exceptions import UnresolvedDataError
from automount.models import (
    AddAppLaunchRequest,
    GameData,
    GameLaunchRequest,
    MountRequest,
    PipelineResult,
)
from automount.services.launch.service_mode import ServiceModeDetector
from automount.services.mount.pipeline import MountPipeline


class GameLaunchService:
    """
    Turns launcher game/add-app launches into mount requests.

    Games without game data are legacy games and are left alone. Game data
    that is registered but not on disk is an error the launcher must show.
    """

    def __init__(
        self,
        settings: Settings,
        pipeline: MountPipeline,
        mode_detector: ServiceModeDetector,
    ):
        self._settings = settings
        self._pipeline = pipeline
        self._mode_detector = mode_detector

    async def on_game_launch(self, launch: GameLaunchRequest) -> Optional[PipelineResult]:
        if launch.active_data is None:
            logging.debug("AutoMount skipping, no GameData registered for Game. Assuming Legacy game.")
            return None
        return await self._mount_game_data(launch.game_id, launch.active_data)

    async def on_add_app_launch(self, launch: AddAppLaunchRequest) -> Optional[PipelineResult]:
        if launch.parent_game_id is None:
            logging.error(f"Unable to determine parent game for add-app {launch.add_app_id}!")
            return None
        if launch.active_data is None:
            logging.debug(
                "AutoMount skipping, no GameData registered for AddApp's Game. Assuming Legacy game."
            )
            return None
        return await self._mount_game_data(launch.parent_game_id, launch.active_data)

    def resolve_path(self, data: GameData) -> str:
        filename = data.path or data.data_pack_filename()
        return os.path.abspath(os.path.join(self._settings.data_packs_path, filename))

    async def _mount_game_data(self, game_id: str, data: GameData) -> PipelineResult:
        file_path = self.resolve_path(data)
        if not data.present_on_disk:
            raise UnresolvedDataError(game_id)
        if not await aiofiles.os.path.exists(file_path):
            raise UnresolvedDataError(game_id, file_path)

        logging.debug("GameData present on disk, mounting...")
        is_docker = await self._mode_detector.is_docker()
        return await self._pipeline.run(
            MountRequest(identifier=game_id, file_path=file_path),
            data.parameters or "",
            is_docker=is_docker,
        )
