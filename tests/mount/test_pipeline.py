"""
Tests for MountPipeline ordering: Before directives, primary mount, After directives.
"""

from unittest.mock import AsyncMock, Mock

import pytest

from automount.core.exceptions import ArityError, GrammarError, ProtocolError
from automount.models import MountOutcome, MountRequest, MountStatus
from automount.services.mount.mounted_set import MountedSet
from automount.services.mount.orchestrator import MountOrchestrator
from automount.services.mount.pipeline import MountPipeline
from automount.services.mount_params import Directive, DirectiveRegistry, MountParamParser

REQUEST = MountRequest(identifier="game-1", file_path="/fp/Data/Games/game-1.zip")


@pytest.fixture
def calls():
    return []


@pytest.fixture
def orchestrator(calls) -> Mock:
    orchestrator = Mock(spec=MountOrchestrator)
    orchestrator.mounted = MountedSet()

    async def mount(identifier, file_path, *, is_docker):
        calls.append(("mount", identifier))
        return MountOutcome(
            identifier=identifier, status=MountStatus.MOUNTED, file_path=file_path, payload="ok"
        )

    async def mount_auxiliary(file_path, mount_point, *, mounted=None, is_docker):
        calls.append(("extra", file_path, mount_point))
        return True

    orchestrator.mount = AsyncMock(side_effect=mount)
    orchestrator.mount_auxiliary = AsyncMock(side_effect=mount_auxiliary)
    return orchestrator


@pytest.fixture
def pipeline(orchestrator) -> MountPipeline:
    registry = DirectiveRegistry.default(orchestrator)
    return MountPipeline(orchestrator, registry, MountParamParser(registry.specs))


@pytest.mark.asyncio
async def test_no_parameters_only_mounts(pipeline, calls):
    result = await pipeline.run(REQUEST, "", is_docker=False)

    assert calls == [("mount", "game-1")]
    assert result.outcome.status is MountStatus.MOUNTED
    assert result.directives == []
    assert result.auto_mount_skipped is False


@pytest.mark.asyncio
async def test_after_directives_run_after_primary_mount(pipeline, calls):
    result = await pipeline.run(REQUEST, "extra;/x/a.iso;/mnt/a;", is_docker=True)

    assert calls == [("mount", "game-1"), ("extra", "/x/a.iso", "/mnt/a")]
    assert result.directives[0].keyword == "extra"
    assert result.directives[0].args == ["/x/a.iso", "/mnt/a"]
    assert result.directives[0].phase == "After"


@pytest.mark.asyncio
async def test_extract_skips_mount_and_after_directives(pipeline, calls, orchestrator):
    result = await pipeline.run(REQUEST, "extract extra;/x/a.iso;/mnt/a;", is_docker=False)

    assert calls == []
    assert result.auto_mount_skipped is True
    assert result.outcome.status is MountStatus.SKIPPED
    orchestrator.mount.assert_not_awaited()


@pytest.mark.asyncio
async def test_grammar_error_happens_before_any_io(pipeline, calls):
    with pytest.raises(GrammarError):
        await pipeline.run(REQUEST, "extra;/x/a.iso", is_docker=False)

    assert calls == []


@pytest.mark.asyncio
async def test_unknown_word_happens_before_any_io(pipeline, calls):
    with pytest.raises(GrammarError, match="unrecognized single-word"):
        await pipeline.run(REQUEST, "extra;/x/a.iso;/mnt/a; defrag", is_docker=False)

    assert calls == []


@pytest.mark.asyncio
async def test_primary_failure_skips_after_directives(pipeline, calls, orchestrator):
    orchestrator.mount.side_effect = ProtocolError("device_add failed")

    with pytest.raises(ProtocolError):
        await pipeline.run(REQUEST, "extra;/x/a.iso;/mnt/a;", is_docker=False)

    orchestrator.mount_auxiliary.assert_not_awaited()


@pytest.mark.asyncio
async def test_registry_validation_guards_parser_output(orchestrator, calls):
    registry = DirectiveRegistry.default(orchestrator)
    parser = Mock(spec=MountParamParser)
    parser.parse.return_value = [Directive("extra", ("/x/a.iso",))]
    pipeline = MountPipeline(orchestrator, registry, parser)

    with pytest.raises(ArityError):
        await pipeline.run(REQUEST, "whatever", is_docker=False)

    assert calls == []
