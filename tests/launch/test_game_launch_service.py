"""
Tests for GameLaunchService - launcher hook to mount pipeline.
"""

import os
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from automount.core.exceptions import UnresolvedDataError
from automount.models import (
    AddAppLaunchRequest,
    GameData,
    GameLaunchRequest,
    MountRequest,
    PipelineResult,
)
from automount.services.launch import GameLaunchService, ServiceModeDetector
from automount.services.mount.pipeline import MountPipeline

GAME_ID = "3fa85f64-5717-4562-b3fc-2c963f66afa6"
ADDED = datetime(2020, 9, 13, 12, 26, 40, tzinfo=timezone.utc)


@pytest.fixture
def pipeline() -> AsyncMock:
    pipeline = AsyncMock(spec=MountPipeline)
    pipeline.run.return_value = PipelineResult(identifier=GAME_ID)
    return pipeline


@pytest.fixture
def service(settings, pipeline) -> GameLaunchService:
    settings.docker_mode = False
    return GameLaunchService(settings, pipeline, ServiceModeDetector(settings))


@pytest.fixture
def game_data(settings) -> GameData:
    data = GameData(
        game_id=GAME_ID, date_added=ADDED, present_on_disk=True, parameters="extract"
    )
    os.makedirs(settings.data_packs_path, exist_ok=True)
    with open(os.path.join(settings.data_packs_path, data.data_pack_filename()), "wb") as f:
        f.write(b"PK")
    return data


def test_data_pack_filename_uses_epoch_millis():
    data = GameData(game_id=GAME_ID, date_added=ADDED)

    assert data.data_pack_filename() == f"{GAME_ID}-1600000000000.zip"


def test_naive_date_is_treated_as_utc():
    data = GameData(game_id=GAME_ID, date_added=datetime(2020, 9, 13, 12, 26, 40))

    assert data.data_pack_filename() == f"{GAME_ID}-1600000000000.zip"


def test_explicit_path_wins(service, settings):
    data = GameData(game_id=GAME_ID, date_added=ADDED, path="custom/pack.zip")

    assert service.resolve_path(data) == os.path.abspath(
        os.path.join(settings.data_packs_path, "custom/pack.zip")
    )


@pytest.mark.asyncio
async def test_legacy_game_is_left_alone(service, pipeline):
    result = await service.on_game_launch(GameLaunchRequest(game_id=GAME_ID))

    assert result is None
    pipeline.run.assert_not_awaited()


@pytest.mark.asyncio
async def test_game_launch_runs_pipeline(service, pipeline, game_data):
    result = await service.on_game_launch(
        GameLaunchRequest(game_id=GAME_ID, active_data=game_data)
    )

    assert result.identifier == GAME_ID
    pipeline.run.assert_awaited_once_with(
        MountRequest(identifier=GAME_ID, file_path=service.resolve_path(game_data)),
        "extract",
        is_docker=False,
    )


@pytest.mark.asyncio
async def test_add_app_mounts_parent_game(service, pipeline, game_data):
    await service.on_add_app_launch(
        AddAppLaunchRequest(add_app_id="addapp-1", parent_game_id=GAME_ID, active_data=game_data)
    )

    request = pipeline.run.await_args.args[0]
    assert request.identifier == GAME_ID


@pytest.mark.asyncio
async def test_add_app_without_parent_is_ignored(service, pipeline, game_data):
    result = await service.on_add_app_launch(
        AddAppLaunchRequest(add_app_id="addapp-1", active_data=game_data)
    )

    assert result is None
    pipeline.run.assert_not_awaited()


@pytest.mark.asyncio
async def test_add_app_without_data_is_ignored(service, pipeline):
    result = await service.on_add_app_launch(
        AddAppLaunchRequest(add_app_id="addapp-1", parent_game_id=GAME_ID)
    )

    assert result is None
    pipeline.run.assert_not_awaited()


@pytest.mark.asyncio
async def test_data_not_downloaded_raises(service, pipeline):
    data = GameData(game_id=GAME_ID, date_added=ADDED, present_on_disk=False)

    with pytest.raises(UnresolvedDataError, match="found but not downloaded"):
        await service.on_game_launch(GameLaunchRequest(game_id=GAME_ID, active_data=data))

    pipeline.run.assert_not_awaited()


@pytest.mark.asyncio
async def test_missing_file_raises(service, pipeline):
    data = GameData(game_id=GAME_ID, date_added=ADDED, present_on_disk=True)

    with pytest.raises(UnresolvedDataError) as exc_info:
        await service.on_game_launch(GameLaunchRequest(game_id=GAME_ID, active_data=data))

    assert exc_info.value.file_path == service.resolve_path(data)
    pipeline.run.assert_not_awaited()
