import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from ..core.exceptions import (
    AutoMountError,
    GrammarError,
    HelperServiceError,
    ProtocolError,
    UnresolvedDataError,
)
from ..dependencies import (
    get_game_launch_service,
    get_mount_param_parser,
    get_mount_pipeline,
    get_mounted_set,
    get_notification_handler,
    get_service_mode_detector,
)
from ..models import (
    AddAppLaunchRequest,
    ControlPlaneWarning,
    DirectiveModel,
    GameLaunchRequest,
    MountApiRequest,
    MountedEntries,
    MountRequest,
    ParseRequest,
    PipelineResult,
)
from ..services.launch import GameLaunchService, ServiceModeDetector
from ..services.mount.mounted_set import MountedSet
from ..services.mount.pipeline import MountPipeline
from ..services.mount_params import MountParamParser
from ..services.notification_handler import NotificationHandler

router = APIRouter(prefix="/api", tags=["mount"])


def _http_error(error: AutoMountError) -> HTTPException:
    if isinstance(error, GrammarError):
        code = status.HTTP_422_UNPROCESSABLE_ENTITY
    elif isinstance(error, UnresolvedDataError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, (ProtocolError, HelperServiceError)):
        code = status.HTTP_502_BAD_GATEWAY
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(status_code=code, detail=str(error))


@router.post("/mount", response_model=PipelineResult)
async def mount(
    body: MountApiRequest,
    pipeline: MountPipeline = Depends(get_mount_pipeline),
    detector: ServiceModeDetector = Depends(get_service_mode_detector),
) -> PipelineResult:
    """
    Mount a disk image and run its mount parameters.

    HTTP Status Codes:
        200: Mounted, already mounted, or skipped by 'extract'
        422: Malformed mount parameters
        502: QMP or mount helper failure
    """
    logging.info("Mount endpoint called", extra={"operation": "api_mount", "identifier": body.identifier})
    try:
        return await pipeline.run(
            MountRequest(identifier=body.identifier, file_path=body.file_path),
            body.parameters,
            is_docker=await detector.is_docker(),
        )
    except AutoMountError as e:
        raise _http_error(e) from e


@router.post("/launch/game", response_model=Optional[PipelineResult])
async def launch_game(
    body: GameLaunchRequest,
    launch_service: GameLaunchService = Depends(get_game_launch_service),
) -> Optional[PipelineResult]:
    try:
        return await launch_service.on_game_launch(body)
    except AutoMountError as e:
        raise _http_error(e) from e


@router.post("/launch/addapp", response_model=Optional[PipelineResult])
async def launch_add_app(
    body: AddAppLaunchRequest,
    launch_service: GameLaunchService = Depends(get_game_launch_service),
) -> Optional[PipelineResult]:
    try:
        return await launch_service.on_add_app_launch(body)
    except AutoMountError as e:
        raise _http_error(e) from e


@router.post("/params/parse", response_model=List[DirectiveModel])
async def parse_params(
    body: ParseRequest,
    parser: MountParamParser = Depends(get_mount_param_parser),
) -> List[DirectiveModel]:
    """Validate a mount parameter string without mounting anything."""
    try:
        directives = parser.parse(body.parameters)
    except GrammarError as e:
        raise _http_error(e) from e
    return [
        DirectiveModel(keyword=d.keyword, args=list(d.args), phase=d.phase.value)
        for d in directives
    ]


@router.get("/mounts", response_model=MountedEntries)
async def list_mounts(mounted: MountedSet = Depends(get_mounted_set)) -> MountedEntries:
    entries = mounted.snapshot()
    return MountedEntries(entries=entries, count=len(entries))


@router.get("/warnings", response_model=List[ControlPlaneWarning])
async def list_warnings(
    notifications: NotificationHandler = Depends(get_notification_handler),
) -> List[ControlPlaneWarning]:
    return notifications.recent_warnings()
