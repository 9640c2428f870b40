import logging

from automount.models import DirectiveModel, MountOutcome, MountRequest, MountStatus, PipelineResult
from automount.services.mount.orchestrator import MountOrchestrator
from automount.services.mount_params.directives import Phase
from automount.services.mount_params.parser import MountParamParser
from automount.services.mount_params.registry import DirectiveRegistry


class MountPipeline:
    """
    parse -> Before directives -> primary mount -> After directives.

    The parameter string is parsed and validated before any I/O, so a
    GrammarError never leaves a half-mounted request behind. If a Before
    directive returns False the primary mount and all After directives are
    skipped.
    """

    def __init__(
        self,
        orchestrator: MountOrchestrator,
        registry: DirectiveRegistry,
        parser: MountParamParser,
    ):
        self._orchestrator = orchestrator
        self._registry = registry
        self._parser = parser

    async def run(self, request: MountRequest, parameters: str, *, is_docker: bool) -> PipelineResult:
        directives = self._parser.parse(parameters or "")
        self._registry.validate(directives)
        if directives:
            logging.debug(f"Mount parameters for {request.identifier}: \"{parameters}\"")

        result = PipelineResult(
            identifier=request.identifier,
            directives=[
                DirectiveModel(keyword=d.keyword, args=list(d.args), phase=d.phase.value)
                for d in directives
            ],
        )
        mounted = self._orchestrator.mounted

        if not await self._registry.run_phase(directives, Phase.BEFORE, mounted, is_docker):
            result.auto_mount_skipped = True
            result.outcome = MountOutcome(
                identifier=request.identifier,
                status=MountStatus.SKIPPED,
                file_path=request.file_path,
            )
            return result

        result.outcome = await self._orchestrator.mount(
            request.identifier, request.file_path, is_docker=is_docker
        )
        await self._registry.run_phase(directives, Phase.AFTER, mounted, is_docker)
        return result
